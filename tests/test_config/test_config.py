"""
Tests for ops_insights/config.py.

What we test
------------
1. AppConfig() defaults match the committed engine limits.
2. load_config() reads an explicit TOML file.
3. local.toml next to the config file is deep-merged over it.
4. OPS_INSIGHTS_* environment variables override file values.
5. Missing config file → FileNotFoundError.
6. Invalid values (negative limits, unknown log level) → ValidationError.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from ops_insights.config import AppConfig, EngineConfig, LoggingConfig, load_config


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


_CLEAN_ENV = {
    "OPS_INSIGHTS_DB_PATH": "",
    "OPS_INSIGHTS_LOG_LEVEL": "",
    "OPS_INSIGHTS_DEBUG": "",
}


class TestDefaults:
    def test_engine_defaults(self):
        cfg = AppConfig()
        assert cfg.engine.growth_top_n == 5
        assert cfg.engine.churn_top_n == 10
        assert cfg.engine.retention_limit == 5
        assert cfg.engine.cost_saving_limit == 3
        assert cfg.engine.revenue_growth_limit == 3
        assert cfg.engine.underutilized_limit == 5
        assert cfg.engine.renewal_window_days == 30
        assert cfg.engine.forecast_periods == 6

    def test_committed_default_toml_loads(self):
        with patch.dict("os.environ", _CLEAN_ENV):
            cfg = load_config()
        assert cfg.engine == EngineConfig()


class TestLoadConfig:
    def test_explicit_file(self, tmp_path):
        path = _write(tmp_path / "app.toml", """
[database]
db_path = "custom.db"

[engine]
churn_top_n = 3
""")
        with patch.dict("os.environ", _CLEAN_ENV):
            cfg = load_config(path)
        assert cfg.database.db_path == "custom.db"
        assert cfg.engine.churn_top_n == 3
        assert cfg.engine.growth_top_n == 5

    def test_local_override_deep_merged(self, tmp_path):
        path = _write(tmp_path / "app.toml", """
[engine]
churn_top_n = 3
growth_top_n = 7
""")
        _write(tmp_path / "local.toml", """
[engine]
churn_top_n = 1
""")
        with patch.dict("os.environ", _CLEAN_ENV):
            cfg = load_config(path)
        assert cfg.engine.churn_top_n == 1
        assert cfg.engine.growth_top_n == 7

    def test_env_overrides(self, tmp_path):
        path = _write(tmp_path / "app.toml", "[logging]\nlevel = \"INFO\"\n")
        env = {
            "OPS_INSIGHTS_DB_PATH": "env.db",
            "OPS_INSIGHTS_LOG_LEVEL": "debug",
            "OPS_INSIGHTS_DEBUG": "true",
        }
        with patch.dict("os.environ", env):
            cfg = load_config(path)
        assert cfg.database.db_path == "env.db"
        assert cfg.logging.level == "DEBUG"
        assert cfg.debug is True

    def test_project_debug_flag(self, tmp_path):
        path = _write(tmp_path / "app.toml", "[project]\ndebug = true\n")
        with patch.dict("os.environ", _CLEAN_ENV):
            assert load_config(path).debug is True

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.toml")


class TestValidation:
    def test_negative_limit_rejected(self):
        with pytest.raises(ValidationError):
            EngineConfig(churn_top_n=-1)

    def test_unknown_log_level_rejected(self):
        with pytest.raises(ValidationError):
            LoggingConfig(level="LOUD")

    def test_log_level_normalised(self):
        assert LoggingConfig(level="warning").level == "WARNING"

    def test_frozen(self):
        cfg = AppConfig()
        with pytest.raises(ValidationError):
            cfg.debug = True
