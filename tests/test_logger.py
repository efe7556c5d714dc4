"""
Tests for the application logger.
"""

import logging
from logging.handlers import RotatingFileHandler

import pytest

from meddy.database.config.config import settings
from meddy.utils.logger import configure_logging, get_logger


@pytest.fixture
def file_logging(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "LOG_TO_FILE", True)
    monkeypatch.setattr(settings, "LOG_DIR", str(tmp_path / "logs"))
    yield tmp_path / "logs"
    monkeypatch.undo()
    configure_logging()


def test_child_loggers():
    assert get_logger("tools").name == "meddy.tools"
    assert get_logger() is logging.getLogger("meddy")


def test_file_handlers(file_logging):
    logger = configure_logging()
    files = sorted(h.baseFilename for h in logger.handlers if isinstance(h, RotatingFileHandler))
    assert files == [str(file_logging / "app.log"), str(file_logging / "errors.log")]

    get_logger("tools").error("MedLLaMA unavailable")
    for handler in logger.handlers:
        handler.flush()
    assert "MedLLaMA unavailable" in (file_logging / "errors.log").read_text()


def test_reconfiguring_does_not_duplicate_handlers():
    configure_logging()
    configure_logging()
    assert len(get_logger().handlers) == 1
    assert logging.getLogger("httpx").level == logging.WARNING
