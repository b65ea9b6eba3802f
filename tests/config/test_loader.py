"""Tests for config/loader.py module.

Covers:
- _load_yaml() function
- _deep_merge() function
- load_config() precedence: kwargs > env > yaml > defaults
"""

from __future__ import annotations

from pathlib import Path

import pytest

from testlink.config.loader import _deep_merge, _load_yaml, load_config
from testlink.core.errors import ConfigError, ErrorCode


class TestLoadYaml:
    """Tests for _load_yaml function."""

    def test_returns_empty_dict_for_missing_file(self, tmp_path: Path) -> None:
        """Returns empty dict when file doesn't exist."""
        assert _load_yaml(tmp_path / "nonexistent.yaml") == {}

    def test_loads_valid_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text("logging:\n  level: DEBUG\n")

        assert _load_yaml(yaml_file) == {"logging": {"level": "DEBUG"}}

    def test_returns_empty_for_empty_file(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "empty.yaml"
        yaml_file.write_text("")

        assert _load_yaml(yaml_file) == {}

    def test_raises_on_malformed_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "bad.yaml"
        yaml_file.write_text("sync: [unclosed\n")

        with pytest.raises(ConfigError) as exc_info:
            _load_yaml(yaml_file)
        assert exc_info.value.code is ErrorCode.CONFIG_PARSE_ERROR

    def test_raises_on_non_mapping(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "list.yaml"
        yaml_file.write_text("- a\n- b\n")

        with pytest.raises(ConfigError, match="mapping"):
            _load_yaml(yaml_file)


class TestDeepMerge:
    """Tests for _deep_merge function."""

    def test_nested_override(self) -> None:
        base = {"sync": {"link_only": False, "see_window_lines": 20}}
        override = {"sync": {"link_only": True}}

        assert _deep_merge(base, override) == {"sync": {"link_only": True, "see_window_lines": 20}}

    def test_does_not_mutate_base(self) -> None:
        base = {"a": {"b": 1}}
        _deep_merge(base, {"a": {"b": 2}})
        assert base == {"a": {"b": 1}}


class TestLoadConfig:
    """Tests for load_config function."""

    def _write_project_config(self, root: Path, content: str) -> None:
        config_dir = root / ".testlink"
        config_dir.mkdir(parents=True, exist_ok=True)
        (config_dir / "config.yaml").write_text(content)

    def test_defaults_without_config_file(self, tmp_path: Path) -> None:
        config = load_config(tmp_path)

        assert config.discovery.production_dirs == ["src", "app"]
        assert config.discovery.test_dirs == ["tests"]
        assert config.discovery.exclude_dirs == ["vendor", "node_modules", ".git"]
        assert config.discovery.test_namespace == "Tests"
        assert config.sync.link_only is False
        assert config.sync.see_window_lines == 20
        assert config.logging.level == "WARNING"

    def test_project_yaml_is_applied(self, tmp_path: Path) -> None:
        self._write_project_config(tmp_path, "discovery:\n  production_dirs: [lib]\n")

        config = load_config(tmp_path)

        assert config.discovery.production_dirs == ["lib"]
        assert config.discovery.test_dirs == ["tests"]

    def test_env_overrides_yaml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        self._write_project_config(tmp_path, "sync:\n  link_only: false\n")
        monkeypatch.setenv("TESTLINK__SYNC__LINK_ONLY", "true")

        config = load_config(tmp_path)

        assert config.sync.link_only is True

    def test_kwargs_override_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TESTLINK__LOGGING__LEVEL", "DEBUG")

        config = load_config(tmp_path, logging={"level": "ERROR"})

        assert config.logging.level == "ERROR"

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        explicit = tmp_path / "custom.yaml"
        explicit.write_text("sync:\n  see_window_lines: 5\n")

        config = load_config(tmp_path, config_path=explicit)

        assert config.sync.see_window_lines == 5

    def test_missing_explicit_config_path_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path, config_path=tmp_path / "nope.yaml")
        assert exc_info.value.code is ErrorCode.CONFIG_FILE_NOT_FOUND

    def test_invalid_value_raises(self, tmp_path: Path) -> None:
        self._write_project_config(tmp_path, "sync:\n  see_window_lines: 0\n")

        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path)

        assert exc_info.value.code is ErrorCode.CONFIG_INVALID_VALUE
        assert "see_window_lines" in exc_info.value.details["field"]
