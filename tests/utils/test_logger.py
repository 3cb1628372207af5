"""
Unit tests for logging setup
"""

import sys
import pytest
from loguru import logger

from agririsk.utils.logger import get_logger, setup_logging


@pytest.fixture(autouse=True)
def restore_default_sink():
    yield
    logger.remove()
    logger.add(sys.stderr)


class TestSetupLogging:
    def test_file_sink_created(self, tmp_path, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)

        setup_logging(log_level="DEBUG", log_dir=str(tmp_path), log_file="test.log")
        logger.info("evaluation started")

        log_file = tmp_path / "test.log"
        assert log_file.exists()
        assert "evaluation started" in log_file.read_text()

    def test_console_only_without_log_dir(self, tmp_path, monkeypatch):
        monkeypatch.delenv("LOG_DIR", raising=False)
        monkeypatch.chdir(tmp_path)

        setup_logging()

        assert list(tmp_path.iterdir()) == []

    def test_get_logger_binds_name(self):
        records = []
        logger.add(lambda message: records.append(message.record), level="INFO")

        get_logger("batch").info("hello")

        assert records[-1]["extra"]["name"] == "batch"
