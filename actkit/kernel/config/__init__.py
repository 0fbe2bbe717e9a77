"""Configuration models and loading."""

from actkit.kernel.config.loader import (
    ConfigLoader,
    clear_config_cache,
    get_default_config,
    load_config,
)
from actkit.kernel.config.models import ActKitConfig, LoggingConfig, ReportConfig, RunnerConfig

__all__ = [
    "ActKitConfig",
    "ConfigLoader",
    "LoggingConfig",
    "ReportConfig",
    "RunnerConfig",
    "clear_config_cache",
    "get_default_config",
    "load_config",
]
