"""Tests for configuration loading."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from syncwatch.config import DEFAULT_SYNC_COMMAND, load_config, parse_config
from syncwatch.errors import ConfigError, ErrorCategory


class TestParseConfig:
    """Tests for parse_config."""

    def test_defaults(self) -> None:
        """Test omitted settings take their defaults."""
        config = parse_config({"profiles": {"home": {"include": ["/home/user/Documents"]}}})

        assert config.debounce_ms == 10000
        assert config.max_wait_ms == 60000
        assert config.run_on_startup is True
        assert config.log_unison_stdout is True
        assert config.restart_delay_ms == 1000
        assert config.backend == "watchdog"
        assert config.sync_command == DEFAULT_SYNC_COMMAND
        assert config.profiles["home"].exclude == []

    def test_camel_case_keys(self) -> None:
        """Test the camelCase option names are accepted."""
        config = parse_config(
            {
                "runOnStartup": False,
                "logUnisonStdout": False,
                "debounceMs": 500,
                "maxWaitMs": 2000,
                "profiles": {
                    "home-elite": {
                        "include": ["/home/user/Documents", "/home/user/Pictures"],
                        "exclude": [".cache", "Downloads"],
                    },
                },
            }
        )

        assert config.run_on_startup is False
        assert config.log_unison_stdout is False
        assert config.debounce_seconds == 0.5
        assert config.max_wait_seconds == 2.0
        assert config.profiles["home-elite"].exclude == [".cache", "Downloads"]

    def test_include_paths_expanded(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test ~ and environment variables are expanded in include paths."""
        monkeypatch.setenv("SYNC_ROOT", "/srv/data")
        config = parse_config({"profiles": {"p": {"include": ["~/Documents", "$SYNC_ROOT/x"]}}})

        include = config.profiles["p"].include
        assert include[0] == str(Path.home() / "Documents")
        assert include[1] == "/srv/data/x"

    def test_exclusion_order_preserved(self) -> None:
        """Test exclusion patterns keep their configured order."""
        config = parse_config(
            {"profiles": {"p": {"include": ["/a"], "exclude": ["z", "a", "m"]}}}
        )

        assert config.profiles["p"].exclude == ["z", "a", "m"]

    @pytest.mark.parametrize(
        "data",
        [
            {"profiles": {}},
            {"profiles": {"p": {"include": []}}},
            {"profiles": {"p": {"include": ["/a"], "exclude": [""]}}},
            {"profiles": {"p": {"include": ["/a"]}}, "debounceMs": 0},
            {"profiles": {"p": {"include": ["/a"]}}, "maxWaitMs": -5},
            {"profiles": {"p": {"include": ["/a"]}}, "backend": "fanotify"},
            {"profiles": {"p": {"include": ["/a"]}}, "unknownOption": True},
            {"profiles": {"p": {"include": ["/a"], "excludes": ["x"]}}},
            {"profiles": {"p": {"include": ["/a"]}}, "sync_command": []},
            {"profiles": {" ": {"include": ["/a"]}}},
            {"debounce_ms": 100},
        ],
    )
    def test_invalid_config(self, data: dict[str, Any]) -> None:
        """Test malformed configurations are fatal errors."""
        with pytest.raises(ConfigError) as exc_info:
            parse_config(data)

        assert exc_info.value.category == ErrorCategory.FATAL
        assert exc_info.value.errors

    def test_not_a_mapping(self) -> None:
        """Test a non-mapping document is rejected."""
        with pytest.raises(ConfigError, match="mapping"):
            parse_config(["profiles"])

    def test_empty(self) -> None:
        """Test an empty document is rejected."""
        with pytest.raises(ConfigError, match="Empty"):
            parse_config(None)


class TestLoadConfig:
    """Tests for load_config."""

    def test_load_file(self, config_file: Path) -> None:
        """Test loading a YAML file."""
        config = load_config(config_file)

        assert list(config.profiles) == ["home"]
        assert config.run_on_startup is False

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test a missing file raises ConfigError."""
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        """Test broken YAML raises ConfigError."""
        path = tmp_path / "config.yaml"
        path.write_text("profiles: [unclosed\n")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path)

    def test_empty_file(self, tmp_path: Path) -> None:
        """Test an empty file raises ConfigError."""
        path = tmp_path / "config.yaml"
        path.write_text("")

        with pytest.raises(ConfigError, match="Empty"):
            load_config(path)

    def test_default_path(self, config_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the default location is used when no path is given."""
        monkeypatch.setattr("syncwatch.config.CONFIG_FILE", config_file)

        assert list(load_config().profiles) == ["home"]
