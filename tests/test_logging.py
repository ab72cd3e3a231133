"""
Tests for structured logging setup.
"""

import json
import logging

import pytest

from jotflow.utils.logging import get_logger, setup_logging


def jotflow_handlers() -> list[logging.Handler]:
    return [h for h in logging.getLogger().handlers if getattr(h, "_jotflow", False)]


@pytest.fixture
def restore_logging():
    yield
    setup_logging(level="WARNING", format="console")


class TestSetupLogging:
    def test_repeated_setup_keeps_one_handler(self, restore_logging):
        setup_logging(level="INFO", format="json")
        setup_logging(level="INFO", format="console")
        assert len(jotflow_handlers()) == 1

    def test_log_file_gets_json_events(self, tmp_path, restore_logging):
        log_file = tmp_path / "logs" / "jotflow.log"
        setup_logging(level="INFO", format="console", log_file=log_file)
        assert len(jotflow_handlers()) == 2

        get_logger("jotflow.tests.file").info("task_created", task_id="abc")
        logging.getLogger("jotflow.tests.stdlib").warning("plain stdlib record")

        lines = [json.loads(line) for line in log_file.read_text().splitlines()]
        events = {line["event"]: line for line in lines}
        assert events["task_created"]["task_id"] == "abc"
        assert events["task_created"]["level"] == "info"
        assert events["task_created"]["app"] == "jotflow"
        assert events["plain stdlib record"]["logger"] == "jotflow.tests.stdlib"

    def test_level_filters_structlog_events(self, tmp_path, restore_logging):
        log_file = tmp_path / "jotflow.log"
        setup_logging(level="WARNING", format="json", log_file=log_file)

        logger = get_logger("jotflow.tests.level")
        logger.info("dropped")
        logger.warning("kept")

        events = [json.loads(line)["event"] for line in log_file.read_text().splitlines()]
        assert events == ["kept"]

    def test_third_party_loggers_quieted(self, restore_logging):
        setup_logging(level="DEBUG", format="console")
        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("jotflow.tests.other").getEffectiveLevel() == logging.DEBUG
