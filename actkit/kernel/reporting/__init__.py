"""Result aggregation and rendering."""

from actkit.kernel.reporting.aggregator import create_report, summarize
from actkit.kernel.reporting.formatter import (
    create_element_representation,
    format_act_result,
    generate_remediation,
    log_results,
)

__all__ = [
    "create_element_representation",
    "create_report",
    "format_act_result",
    "generate_remediation",
    "log_results",
    "summarize",
]
