"""Tests for modeinjector.toml configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from modeinjector.core.errors import ConfigError
from modeinjector.core.manifest import CONFIG_FILE, load_config


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / CONFIG_FILE
    path.write_text(text, encoding="utf-8")
    return path


class TestLoadConfig:
    def test_defaults_when_missing(self, tmp_path: Path):
        config = load_config(tmp_path / CONFIG_FILE, env={})
        assert config.store.path == "variables.json"
        assert config.store_path == tmp_path.resolve() / "variables.json"
        assert config.report.error_limit == 10
        assert config.colors.strict_hex is False
        assert config.logging.level == "INFO"
        assert config.log_dir is None

    def test_full_file(self, tmp_path: Path):
        path = _write(
            tmp_path,
            """
[store]
path = "design/vars.json"

[report]
error_limit = 3

[colors]
strict_hex = true

[logging]
level = "debug"
dir = "logs"
""",
        )
        config = load_config(path, env={})
        assert config.store_path == tmp_path.resolve() / "design" / "vars.json"
        assert config.report.error_limit == 3
        assert config.colors.strict_hex is True
        assert config.logging.level == "DEBUG"
        assert config.log_dir == tmp_path.resolve() / "logs"

    def test_absolute_store_path_kept(self, tmp_path: Path):
        target = tmp_path / "elsewhere.json"
        path = _write(tmp_path, f'[store]\npath = "{target.as_posix()}"\n')
        assert load_config(path, env={}).store_path == target

    def test_env_overrides(self, tmp_path: Path):
        path = _write(tmp_path, '[logging]\nlevel = "INFO"\n')
        config = load_config(
            path,
            env={"MODEINJECTOR_STORE": "env.json", "MODEINJECTOR_LOG_LEVEL": "warning"},
        )
        assert config.store.path == "env.json"
        assert config.logging.level == "WARNING"

    def test_invalid_toml(self, tmp_path: Path):
        path = _write(tmp_path, "[store\npath = 1")
        with pytest.raises(ConfigError, match="Invalid TOML"):
            load_config(path, env={})

    @pytest.mark.parametrize(
        ("text", "message"),
        [
            ('[report]\nerror_limit = "ten"\n', r"\[report\] error_limit must be int"),
            ("[report]\nerror_limit = true\n", r"\[report\] error_limit must be int"),
            ("[report]\nerror_limit = -1\n", "must not be negative"),
            ('[colors]\nstrict_hex = "yes"\n', r"\[colors\] strict_hex must be bool"),
            ('[logging]\nlevel = "LOUD"\n', "Unknown log level 'LOUD'"),
            ('store = "x"\n', r"\[store\] must be a table"),
        ],
    )
    def test_invalid_values(self, tmp_path: Path, text: str, message: str):
        path = _write(tmp_path, text)
        with pytest.raises(ConfigError, match=message):
            load_config(path, env={})

    def test_bad_env_log_level(self, tmp_path: Path):
        with pytest.raises(ConfigError):
            load_config(tmp_path / CONFIG_FILE, env={"MODEINJECTOR_LOG_LEVEL": "chatty"})
