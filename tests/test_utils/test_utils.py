"""
Tests for ops_insights/utils.

What we test
------------
time_utils:
  - month_start() and add_months() including day clamping and year wrap.

logging:
  - configure_logging() installs a stderr handler and, when set, a file
    handler; JSON format writes one object per line with extra fields.
"""

from __future__ import annotations

import json
import logging
from datetime import date

import pytest

from ops_insights.config import LoggingConfig
from ops_insights.utils.logging import configure_logging
from ops_insights.utils.time_utils import add_months, month_start


class TestTimeUtils:
    def test_month_start(self):
        assert month_start(date(2024, 9, 17)) == date(2024, 9, 1)

    @pytest.mark.parametrize("start, months, expected", [
        (date(2024, 3, 31), -1, date(2024, 2, 29)),
        (date(2024, 1, 15), -12, date(2023, 1, 15)),
        (date(2024, 11, 30), 3, date(2025, 2, 28)),
        (date(2024, 6, 1), 0, date(2024, 6, 1)),
    ])
    def test_add_months(self, start, months, expected):
        assert add_months(start, months) == expected


class TestConfigureLogging:
    @pytest.fixture(autouse=True)
    def _restore_root(self):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        yield
        for handler in root.handlers:
            if handler not in saved_handlers:
                handler.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)

    def test_json_file_output(self, tmp_path):
        log_file = tmp_path / "logs" / "engine.log"
        configure_logging(LoggingConfig(level="INFO", log_file=str(log_file), json_format=True))

        logging.getLogger("ops_insights.test").info("fetched %d rows", 3, extra={"source": "clients"})
        for handler in logging.getLogger().handlers:
            handler.flush()

        line = log_file.read_text(encoding="utf-8").strip().splitlines()[-1]
        payload = json.loads(line)
        assert payload["level"] == "INFO"
        assert payload["msg"] == "fetched 3 rows"
        assert payload["source"] == "clients"

    def test_no_file_handler_when_unset(self):
        configure_logging(LoggingConfig(level="WARNING", log_file=""))
        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert not any(isinstance(h, logging.FileHandler) for h in root.handlers)
