"""Configuration loader for actkit.

A configuration comes from, in order:

1. an explicit path (``kind: Config`` YAML, a flat TOML file or a pyproject),
2. the file named by ``ACTKIT_CONFIG_PATH``,
3. the nearest ``pyproject.toml`` with a ``[tool.actkit]`` table.

``${VAR}`` placeholders in string values are replaced from the environment and
``ACTKIT_*`` variables override the file afterwards.
"""

from __future__ import annotations

import os
import re
import tomllib
from collections.abc import Callable
from dataclasses import fields
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from actkit.kernel.config.models import ActKitConfig, LoggingConfig, ReportConfig, RunnerConfig
from actkit.kernel.logging import get_logger

_TRUTHY_VALUES = frozenset({"true", "1", "yes", "on", "enabled"})
_FALSY_VALUES = frozenset({"false", "0", "no", "off", "disabled"})

CONFIG_PATH_ENV = "ACTKIT_CONFIG_PATH"

logger = get_logger(__name__)


def _parse_bool_env(value: str) -> bool:
    """Parse boolean from environment variable value.

    Raises
    ------
    ValueError
        If value is not a recognized boolean string
    """
    normalized = value.lower().strip()
    if normalized in _TRUTHY_VALUES:
        return True
    if normalized in _FALSY_VALUES:
        return False
    expected = sorted(_TRUTHY_VALUES | _FALSY_VALUES)
    raise ValueError(f"Invalid boolean value: {value!r}. Expected one of: {expected}")


# env var -> (section, field, converter)
_ENV_OVERRIDES: dict[str, tuple[str, str, Callable[[str], Any]]] = {
    "ACTKIT_LOG_LEVEL": ("logging", "level", str.upper),
    "ACTKIT_LOG_FORMAT": ("logging", "format", str.lower),
    "ACTKIT_LOG_FILE": ("logging", "output_file", str),
    "ACTKIT_LOG_COLOR": ("logging", "use_color", _parse_bool_env),
    "ACTKIT_RULE_TIMEOUT": ("runner", "rule_timeout", float),
}

_SECTIONS: dict[str, type] = {
    "logging": LoggingConfig,
    "runner": RunnerConfig,
    "report": ReportConfig,
}


@lru_cache(maxsize=32)
def _load_and_parse_cached(path_str: str) -> ActKitConfig:
    return ConfigLoader()._load_and_parse(Path(path_str))


def _has_actkit_table(pyproject: Path) -> bool:
    with pyproject.open("rb") as f:
        return "actkit" in tomllib.load(f).get("tool", {})


class ConfigLoader:
    """Reads actkit configuration files into :class:`ActKitConfig`."""

    ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")

    def load_config_file(self, path: str | Path | None = None) -> ActKitConfig:
        """Load and cache the configuration at ``path`` or the discovered one.

        Raises
        ------
        FileNotFoundError
            If ``path`` does not exist or nothing can be discovered
        ValueError
            If a YAML file is not a ``kind: Config`` manifest
        """
        config_path = self._find_config_file(path)
        return _load_and_parse_cached(str(config_path.absolute()))

    def _find_config_file(self, path: str | Path | None) -> Path:
        if path:
            config_path = Path(path)
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return config_path

        if env_path := os.getenv(CONFIG_PATH_ENV):
            config_path = Path(env_path)
            if config_path.exists():
                return config_path
            logger.warning("{} set but file not found: {}", CONFIG_PATH_ENV, config_path)

        cwd = Path.cwd()
        for directory in (cwd, *cwd.parents):
            pyproject = directory / "pyproject.toml"
            if pyproject.exists() and _has_actkit_table(pyproject):
                return pyproject

        raise FileNotFoundError(
            "No configuration file found. Provide a kind: Config YAML path, "
            f"set {CONFIG_PATH_ENV}, or add [tool.actkit] to pyproject.toml"
        )

    def _load_and_parse(self, config_path: Path) -> ActKitConfig:
        logger.info("Loading configuration from {path}", path=config_path)
        if config_path.suffix in (".yaml", ".yml"):
            data = self._read_manifest(config_path)
        else:
            data = self._read_toml(config_path)
        return self._build(self._substitute_env_vars(data))

    def _read_manifest(self, config_path: Path) -> dict[str, Any]:
        with config_path.open("r", encoding="utf-8") as f:
            document = yaml.safe_load(f)

        if not isinstance(document, dict):
            raise ValueError(
                f"Invalid YAML config file: expected a mapping, got {type(document).__name__}"
            )
        if document.get("kind") != "Config":
            raise ValueError(
                f"YAML config file must use 'kind: Config' manifest format. "
                f"Got 'kind: {document.get('kind')}' in {config_path.name}."
            )
        spec = document.get("spec") or {}
        if not isinstance(spec, dict):
            raise ValueError("'spec' field in kind: Config must be a mapping")
        return spec

    def _read_toml(self, config_path: Path) -> dict[str, Any]:
        with config_path.open("rb") as f:
            document = tomllib.load(f)

        tool_table = document.get("tool", {}).get("actkit")
        if tool_table is not None:
            return tool_table
        if config_path.name == "pyproject.toml":
            logger.warning("No [tool.actkit] section found in pyproject.toml, using defaults")
            return {}
        return document

    def _substitute_env_vars(self, data: Any) -> Any:
        """Recursively replace ``${VAR}`` with environment values.

        Unknown variables keep their placeholder.
        """
        if isinstance(data, str):
            return self.ENV_VAR_PATTERN.sub(
                lambda match: os.environ.get(match.group(1), match.group(0)), data
            )
        if isinstance(data, dict):
            return {key: self._substitute_env_vars(value) for key, value in data.items()}
        if isinstance(data, list):
            return [self._substitute_env_vars(item) for item in data]
        return data

    def _build(self, data: dict[str, Any]) -> ActKitConfig:
        sections = {name: dict(data.get(name) or {}) for name in _SECTIONS}

        for env_name, (section, key, convert) in _ENV_OVERRIDES.items():
            raw = os.getenv(env_name)
            if not raw:
                continue
            try:
                sections[section][key] = convert(raw)
            except ValueError:
                logger.warning("Ignoring invalid {}={!r}", env_name, raw)

        built = {name: self._build_section(name, values) for name, values in sections.items()}
        return ActKitConfig(**built, settings=dict(data.get("settings") or {}))

    def _build_section(self, name: str, values: dict[str, Any]) -> Any:
        section_type = _SECTIONS[name]
        known = {f.name: f for f in fields(section_type)}
        for key in values.keys() - known.keys():
            logger.warning("Unknown [{}] option ignored: {}", name, key)

        kwargs = {key: value for key, value in values.items() if key in known}
        for key, value in kwargs.items():
            if known[key].type == "bool" and isinstance(value, str):
                kwargs[key] = _parse_bool_env(value)
        if "rule_timeout" in kwargs:
            kwargs["rule_timeout"] = float(kwargs["rule_timeout"])
        return section_type(**kwargs)


def load_config(path: str | Path | None = None) -> ActKitConfig:
    """Load configuration, falling back to defaults when no file is found.

    Parameters
    ----------
    path : str | Path | None
        Explicit config path. An explicit path that does not exist raises.
    """
    loader = ConfigLoader()
    if path is not None:
        return loader.load_config_file(path)
    try:
        return loader.load_config_file()
    except FileNotFoundError:
        logger.debug("No configuration file found, using defaults")
        return get_default_config()


def clear_config_cache() -> None:
    """Forget every parsed configuration file."""
    _load_and_parse_cached.cache_clear()


def get_default_config() -> ActKitConfig:
    return ActKitConfig()
