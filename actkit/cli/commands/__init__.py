"""CLI command modules."""

from . import audit_cmd, criteria_cmd, rules_cmd

__all__ = ["audit_cmd", "criteria_cmd", "rules_cmd"]
