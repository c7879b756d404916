"""
Tests for the structured logging setup.
"""

import logging

import pytest
import structlog

from utilities.logger import get_logger, setup_logging


@pytest.fixture(autouse=True)
def reset_structlog():
    """Restore structlog and root handlers after each test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    yield
    structlog.reset_defaults()
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()


def test_json_file_logging(tmp_path):
    """Test that events reach the log file as JSON lines."""
    log_file = tmp_path / "logs" / "api.log"

    setup_logging(log_level="INFO", log_format="json", log_file=log_file)
    get_logger("tests").info("Book created", book_id=7)

    lines = log_file.read_text(encoding="utf-8").strip().splitlines()
    assert any('"event": "Book created"' in line and '"book_id": 7' in line for line in lines)


def test_level_filtering(tmp_path):
    """Test that events below the configured level are dropped."""
    log_file = tmp_path / "api.log"

    setup_logging(log_level="WARNING", log_format="console", log_file=log_file)
    get_logger("tests").info("hidden event")
    get_logger("tests").warning("visible event")

    content = log_file.read_text(encoding="utf-8")
    assert "hidden event" not in content
    assert "visible event" in content
