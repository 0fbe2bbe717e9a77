"""CLI helper utilities for actkit commands."""

from __future__ import annotations

import json
from enum import StrEnum
from typing import Any

import typer
import yaml
from rich.console import Console

from actkit.builtin.rules import register_builtin_rules
from actkit.builtin.suites import register_builtin_suites
from actkit.kernel.config import ActKitConfig, get_default_config
from actkit.kernel.registry import RuleRegistry, duplicate_policy_from_name

console = Console()


class OutputFormat(StrEnum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"
    YAML = "yaml"


def get_config(ctx: typer.Context | None) -> ActKitConfig:
    """Configuration loaded by the root callback, or defaults."""
    obj = getattr(ctx, "obj", None) if ctx is not None else None
    if isinstance(obj, dict) and isinstance(obj.get("config"), ActKitConfig):
        return obj["config"]
    return get_default_config()


def build_registry(config: ActKitConfig, include_suites: bool = False) -> RuleRegistry:
    """A registry holding the bundled rules (and suites when asked)."""
    registry = RuleRegistry(duplicate_policy_from_name(config.runner.duplicate_policy))
    register_builtin_rules(registry)
    if include_suites:
        register_builtin_suites(registry)
    return registry


def print_data(data: Any, fmt: OutputFormat) -> None:
    """Emit machine-readable ``data`` as JSON or YAML on stdout."""
    if fmt == OutputFormat.YAML:
        typer.echo(yaml.safe_dump(data, sort_keys=False, allow_unicode=True))
    else:
        typer.echo(json.dumps(data, default=str, indent=2, ensure_ascii=False))
