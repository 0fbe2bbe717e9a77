"""Centralized logging configuration for actkit using Loguru.

Examples
--------
Basic usage:

>>> from actkit.kernel.logging import get_logger
>>> logger = get_logger(__name__)
>>> logger.info("Audit started", url="https://example.com")

Configure logging globally::

    from actkit.kernel.logging import configure_logging
    configure_logging(level="DEBUG", format="rich")
"""

import os
import sys
from contextlib import suppress
from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from loguru import Logger

from loguru import logger
from rich.logging import RichHandler

LogLevel = Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LogFormat = Literal["console", "json", "structured", "rich"]

_CURRENT_CONFIG: dict | None = None
_HANDLER_IDS: list[int] = []
# loguru installs a stderr DEBUG sink with id 0 at import time
_DEFAULT_HANDLER_ID = 0
_DEFAULT_HANDLER_REMOVED = False


def configure_logging(
    level: LogLevel = "INFO",
    format: LogFormat = "structured",
    output_file: str | Path | None = None,
    use_color: bool = True,
    include_timestamp: bool = True,
    force_reconfigure: bool = False,
    use_rich: bool = False,
) -> None:
    """Configure global logging for actkit.

    Idempotent: calling it again with the same settings leaves existing
    handlers in place.

    Parameters
    ----------
    level : LogLevel, default="INFO"
        Minimum log level to output
    format : LogFormat, default="structured"
        Output format:
        - "console": plain text, no colors
        - "json": one JSON object per record
        - "structured": Loguru native format with optional colors
        - "rich": Rich console handler
    output_file : str | Path | None, default=None
        Optional file path to write JSON logs to (in addition to stderr)
    use_color : bool, default=True
        Use ANSI color codes in structured format (auto-disabled for non-TTY)
    include_timestamp : bool, default=True
        Include timestamp in log output
    force_reconfigure : bool, default=False
        Reconfigure even if the settings did not change
    use_rich : bool, default=False
        Use Rich for console output (overrides format if True)
    """
    global _CURRENT_CONFIG, _DEFAULT_HANDLER_REMOVED

    current_config = {
        "level": level,
        "format": format,
        "output_file": str(output_file) if output_file else None,
        "use_color": use_color,
        "include_timestamp": include_timestamp,
        "use_rich": use_rich,
    }

    if not force_reconfigure and current_config == _CURRENT_CONFIG:
        return

    if not _DEFAULT_HANDLER_REMOVED:
        with suppress(ValueError):
            logger.remove(_DEFAULT_HANDLER_ID)
        _DEFAULT_HANDLER_REMOVED = True

    # After the default sink is gone, only remove handlers we added
    for handler_id in _HANDLER_IDS:
        with suppress(ValueError):
            logger.remove(handler_id)
    _HANDLER_IDS.clear()

    if use_rich or format == "rich":
        rich_handler = RichHandler(
            rich_tracebacks=True,
            markup=False,
            show_time=include_timestamp,
            show_level=True,
            show_path=False,
        )
        handler_id = logger.add(sink=rich_handler, level=level, format="{message}")
    elif format == "json":
        handler_id = logger.add(sink=sys.stderr, level=level, serialize=True)
    elif format == "structured":
        colorize = use_color and sys.stderr.isatty()
        timestamp_fmt = "<green>{time:YYYY-MM-DD HH:mm:ss}</green> " if include_timestamp else ""
        color_level = "<level>{level: <8}</level>" if colorize else "{level: <8}"
        structured_format = (
            f"{timestamp_fmt}[{color_level}]"
            "<cyan>{name}:{function}:{line}</cyan> | <level>{message}</level>"
        )
        handler_id = logger.add(
            sink=sys.stderr,
            level=level,
            format=structured_format,
            colorize=colorize,
        )
    else:
        timestamp_fmt = "{time:YYYY-MM-DD HH:mm:ss} " if include_timestamp else ""
        console_format = f"{timestamp_fmt}{{level: <8}} | {{name}} | {{message}}"
        handler_id = logger.add(
            sink=sys.stderr, level=level, format=console_format, colorize=False
        )
    _HANDLER_IDS.append(handler_id)

    if output_file:
        output_path = Path(output_file)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        handler_id = logger.add(
            sink=output_path,
            level=level,
            serialize=True,
            rotation="10 MB",
            retention="1 week",
        )
        _HANDLER_IDS.append(handler_id)

    _CURRENT_CONFIG = current_config


@lru_cache(maxsize=256)
def get_logger(name: str) -> "Logger":
    """Get a logger bound with the given module name (cached).

    Parameters
    ----------
    name : str
        Logger name, typically ``__name__`` from the calling module

    Returns
    -------
    loguru.Logger
        Logger instance bound with ``module=name``

    Notes
    -----
    If ``configure_logging()`` has not been called yet, a default
    configuration is installed from ``ACTKIT_LOG_LEVEL`` and
    ``ACTKIT_LOG_FORMAT``.
    """
    _ensure_configured()
    return logger.bind(module=name)


def _ensure_configured() -> None:
    """Install a default configuration on first use."""
    if _CURRENT_CONFIG is None:
        level = os.getenv("ACTKIT_LOG_LEVEL", "INFO").upper()
        format_type = os.getenv("ACTKIT_LOG_FORMAT", "structured").lower()
        configure_logging(level=level, format=format_type)  # type: ignore[arg-type]
