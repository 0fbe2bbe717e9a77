"""Tests for configuration models and the config loader.

Covers kind: Config YAML manifests, pyproject.toml [tool.actkit] sections,
environment substitution and environment overrides.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from actkit.kernel.config import (
    ActKitConfig,
    ConfigLoader,
    LoggingConfig,
    RunnerConfig,
    clear_config_cache,
    get_default_config,
    load_config,
)
from actkit.kernel.config.loader import _parse_bool_env
from actkit.kernel.exceptions import ValidationError

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture(autouse=True)
def _fresh_cache(monkeypatch: pytest.MonkeyPatch):
    for name in (
        "ACTKIT_CONFIG_PATH",
        "ACTKIT_LOG_LEVEL",
        "ACTKIT_LOG_FORMAT",
        "ACTKIT_LOG_FILE",
        "ACTKIT_LOG_COLOR",
        "ACTKIT_RULE_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)
    clear_config_cache()
    yield
    clear_config_cache()


class TestModels:
    """Tests for the configuration dataclasses."""

    def test_defaults(self) -> None:
        """Defaults match the documented values."""
        config = ActKitConfig()
        assert config.logging == LoggingConfig()
        assert config.runner.rule_timeout == 30.0
        assert config.runner.duplicate_policy == "warn"
        assert config.runner.highlight_failures is True
        assert config.report.tool_name == "actkit"
        assert config.report.tool_version is None
        assert config.settings == {}

    def test_frozen(self) -> None:
        """Config objects cannot be mutated."""
        config = RunnerConfig()
        with pytest.raises(AttributeError):
            config.rule_timeout = 5.0  # type: ignore[misc]

    def test_rejects_non_positive_timeout(self) -> None:
        with pytest.raises(ValidationError):
            RunnerConfig(rule_timeout=0)

    def test_rejects_unknown_duplicate_policy(self) -> None:
        with pytest.raises(ValidationError):
            RunnerConfig(duplicate_policy="explode")  # type: ignore[arg-type]

    def test_get_default_config(self) -> None:
        assert get_default_config() == ActKitConfig()


class TestParseBoolEnv:
    """Tests for _parse_bool_env."""

    def test_truthy_values(self) -> None:
        for value in ["true", "TRUE", "1", "yes", "on", "enabled"]:
            assert _parse_bool_env(value) is True

    def test_falsy_values(self) -> None:
        for value in ["false", "0", "no", "off", "disabled"]:
            assert _parse_bool_env(value) is False

    def test_whitespace_handling(self) -> None:
        assert _parse_bool_env("  true  ") is True

    def test_invalid_value_raises_error(self) -> None:
        with pytest.raises(ValueError, match="Invalid boolean value"):
            _parse_bool_env("maybe")


class TestConfigLoader:
    """Tests for ConfigLoader."""

    def test_env_var_pattern(self) -> None:
        loader = ConfigLoader()
        assert loader.ENV_VAR_PATTERN.match("${MY_VAR}")
        assert not loader.ENV_VAR_PATTERN.match("$MY_VAR")

    def test_substitute_env_vars_nested(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Substitution walks dicts and lists."""
        monkeypatch.setenv("ACTKIT_TEST_NAME", "auditor")
        loader = ConfigLoader()
        result = loader._substitute_env_vars(
            {"report": {"tool_name": "${ACTKIT_TEST_NAME}"}, "tags": ["${ACTKIT_TEST_NAME}", 3]}
        )
        assert result == {"report": {"tool_name": "auditor"}, "tags": ["auditor", 3]}

    def test_missing_env_var_keeps_placeholder(self) -> None:
        loader = ConfigLoader()
        assert loader._substitute_env_vars("${ACTKIT_DOES_NOT_EXIST}") == "${ACTKIT_DOES_NOT_EXIST}"

    def test_load_yaml_manifest(self, tmp_path: Path) -> None:
        """A kind: Config YAML file is parsed into ActKitConfig."""
        path = tmp_path / "actkit.yaml"
        path.write_text(
            "kind: Config\n"
            "spec:\n"
            "  logging:\n"
            "    level: DEBUG\n"
            "    format: json\n"
            "  runner:\n"
            "    rule_timeout: 12.5\n"
            "    duplicate_policy: reject\n"
            "    highlight_failures: false\n"
            "  report:\n"
            "    tool_name: my-auditor\n"
            "    tool_version: '2.0'\n"
            "  settings:\n"
            "    max_links: 50\n",
            encoding="utf-8",
        )

        config = ConfigLoader().load_config_file(path)

        assert config.logging.level == "DEBUG"
        assert config.logging.format == "json"
        assert config.runner == RunnerConfig(
            rule_timeout=12.5, duplicate_policy="reject", highlight_failures=False
        )
        assert config.report.tool_name == "my-auditor"
        assert config.report.tool_version == "2.0"
        assert config.settings == {"max_links": 50}

    def test_yaml_requires_config_kind(self, tmp_path: Path) -> None:
        path = tmp_path / "actkit.yaml"
        path.write_text("kind: Pipeline\nspec: {}\n", encoding="utf-8")
        with pytest.raises(ValueError, match="kind: Config"):
            ConfigLoader().load_config_file(path)

    def test_yaml_spec_must_be_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "actkit.yml"
        path.write_text("kind: Config\nspec: [1, 2]\n", encoding="utf-8")
        with pytest.raises(ValueError, match="must be a mapping"):
            ConfigLoader().load_config_file(path)

    def test_pyproject_tool_section(self, tmp_path: Path) -> None:
        path = tmp_path / "pyproject.toml"
        path.write_text(
            '[project]\nname = "site"\n\n'
            "[tool.actkit.runner]\nrule_timeout = 5\n\n"
            '[tool.actkit.logging]\nlevel = "WARNING"\n',
            encoding="utf-8",
        )

        config = ConfigLoader().load_config_file(path)

        assert config.runner.rule_timeout == 5.0
        assert config.logging.level == "WARNING"

    def test_pyproject_without_section_uses_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "pyproject.toml"
        path.write_text('[project]\nname = "site"\n', encoding="utf-8")
        assert ConfigLoader().load_config_file(path) == get_default_config()

    def test_flat_toml_file(self, tmp_path: Path) -> None:
        path = tmp_path / "actkit.toml"
        path.write_text("[runner]\nrule_timeout = 7\n", encoding="utf-8")
        assert ConfigLoader().load_config_file(path).runner.rule_timeout == 7.0

    def test_explicit_missing_path_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            ConfigLoader().load_config_file(tmp_path / "nope.yaml")

    def test_config_path_env_var(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = tmp_path / "custom.yaml"
        path.write_text("kind: Config\nspec:\n  runner:\n    rule_timeout: 3\n", encoding="utf-8")
        monkeypatch.setenv("ACTKIT_CONFIG_PATH", str(path))
        monkeypatch.chdir(tmp_path)

        assert ConfigLoader().load_config_file().runner.rule_timeout == 3.0

    def test_discovers_nearest_pyproject_with_table(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """A pyproject without [tool.actkit] is skipped on the way up."""
        (tmp_path / "pyproject.toml").write_text(
            "[tool.actkit.runner]\nrule_timeout = 9\n", encoding="utf-8"
        )
        nested = tmp_path / "site" / "pages"
        nested.mkdir(parents=True)
        (tmp_path / "site" / "pyproject.toml").write_text(
            '[project]\nname = "site"\n', encoding="utf-8"
        )
        monkeypatch.chdir(nested)

        assert ConfigLoader().load_config_file().runner.rule_timeout == 9.0

    def test_unknown_options_are_ignored(self, tmp_path: Path) -> None:
        path = tmp_path / "actkit.toml"
        path.write_text(
            '[runner]\nrule_timeout = 4\nretries = 3\nhighlight_failures = "off"\n',
            encoding="utf-8",
        )
        runner = ConfigLoader().load_config_file(path).runner
        assert runner == RunnerConfig(rule_timeout=4.0, highlight_failures=False)

    def test_results_are_cached(self, tmp_path: Path) -> None:
        path = tmp_path / "actkit.toml"
        path.write_text("[runner]\nrule_timeout = 7\n", encoding="utf-8")
        loader = ConfigLoader()
        assert loader.load_config_file(path) is loader.load_config_file(path)


class TestEnvironmentOverrides:
    """Environment variables win over file values."""

    def test_logging_overrides(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = tmp_path / "actkit.toml"
        path.write_text('[logging]\nlevel = "INFO"\nuse_color = true\n', encoding="utf-8")
        monkeypatch.setenv("ACTKIT_LOG_LEVEL", "debug")
        monkeypatch.setenv("ACTKIT_LOG_FORMAT", "JSON")
        monkeypatch.setenv("ACTKIT_LOG_FILE", "/tmp/actkit.log")
        monkeypatch.setenv("ACTKIT_LOG_COLOR", "off")

        logging_config = ConfigLoader().load_config_file(path).logging

        assert logging_config.level == "DEBUG"
        assert logging_config.format == "json"
        assert logging_config.output_file == "/tmp/actkit.log"
        assert logging_config.use_color is False

    def test_invalid_color_is_ignored(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = tmp_path / "actkit.toml"
        path.write_text("[logging]\nuse_color = false\n", encoding="utf-8")
        monkeypatch.setenv("ACTKIT_LOG_COLOR", "sometimes")
        assert ConfigLoader().load_config_file(path).logging.use_color is False

    def test_rule_timeout_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = tmp_path / "actkit.toml"
        path.write_text("[runner]\nrule_timeout = 7\n", encoding="utf-8")
        monkeypatch.setenv("ACTKIT_RULE_TIMEOUT", "2.5")
        assert ConfigLoader().load_config_file(path).runner.rule_timeout == 2.5


class TestLoadConfig:
    """Tests for load_config."""

    def test_falls_back_to_defaults(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """With nothing to discover, defaults are returned."""
        empty = tmp_path / "empty"
        empty.mkdir()
        monkeypatch.chdir(empty)

        def not_found(self: ConfigLoader, path: object) -> Path:
            raise FileNotFoundError("no config")

        monkeypatch.setattr(ConfigLoader, "_find_config_file", not_found)
        assert load_config() == get_default_config()

    def test_explicit_missing_path_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.toml")
