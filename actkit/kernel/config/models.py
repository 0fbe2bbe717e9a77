"""Configuration data models for actkit."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from actkit.kernel.exceptions import ValidationError

DuplicatePolicyName = Literal["warn", "keep", "reject"]


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Logging configuration for actkit.

    Attributes
    ----------
    level : str, default="INFO"
        Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    format : str, default="structured"
        Output format (console, json, structured, rich)
    output_file : str | None, default=None
        Optional file path to write logs to
    use_color : bool, default=True
        Use ANSI color codes (auto-disabled for non-TTY)
    include_timestamp : bool, default=True
        Include timestamp in log output
    use_rich : bool, default=False
        Use Rich for console output

    Examples
    --------
    TOML configuration:

    ```toml
    [tool.actkit.logging]
    level = "DEBUG"
    format = "rich"
    ```

    Environment variable overrides:

    ```bash
    export ACTKIT_LOG_LEVEL=DEBUG
    export ACTKIT_LOG_FORMAT=json
    export ACTKIT_LOG_FILE=/tmp/actkit.log
    export ACTKIT_LOG_COLOR=false
    ```
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["console", "json", "structured", "rich"] = "structured"
    output_file: str | None = None
    use_color: bool = True
    include_timestamp: bool = True
    use_rich: bool = False


@dataclass(frozen=True, slots=True)
class RunnerConfig:
    """How rules are executed.

    Attributes
    ----------
    rule_timeout : float, default=30.0
        Seconds each rule may run before it is abandoned
    duplicate_policy : str, default="warn"
        What the registry does when a rule id is registered twice:
        ``warn`` overwrites with a warning, ``keep`` keeps the first,
        ``reject`` raises
    highlight_failures : bool, default=True
        Publish highlight events for failed elements after a run
    """

    rule_timeout: float = 30.0
    duplicate_policy: DuplicatePolicyName = "warn"
    highlight_failures: bool = True

    def __post_init__(self) -> None:
        if self.rule_timeout <= 0:
            raise ValidationError("rule_timeout", "must be positive", value=self.rule_timeout)
        if self.duplicate_policy not in ("warn", "keep", "reject"):
            raise ValidationError(
                "duplicate_policy", "must be one of warn, keep, reject", value=self.duplicate_policy
            )


@dataclass(frozen=True, slots=True)
class ReportConfig:
    """Metadata stamped on generated reports."""

    tool_name: str = "actkit"
    tool_version: str | None = None


@dataclass(frozen=True, slots=True)
class ActKitConfig:
    """Complete actkit configuration.

    Attributes
    ----------
    logging : LoggingConfig
        Logging sink and format
    runner : RunnerConfig
        Rule execution settings
    report : ReportConfig
        Report metadata
    settings : dict[str, Any]
        Free-form settings for custom rules
    """

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    runner: RunnerConfig = field(default_factory=RunnerConfig)
    report: ReportConfig = field(default_factory=ReportConfig)
    settings: dict[str, Any] = field(default_factory=dict)
