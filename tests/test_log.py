"""Tests for themeicons.log."""

import logging
from logging.handlers import RotatingFileHandler

import pytest

from themeicons.log import LOG_FILENAME, PACKAGE_LOGGER, configure_file_logging


@pytest.fixture
def clean_logger():
    logger = logging.getLogger(PACKAGE_LOGGER)
    before = list(logger.handlers)
    level = logger.level
    yield logger
    for handler in logger.handlers:
        if handler not in before:
            handler.close()
            logger.removeHandler(handler)
    logger.setLevel(level)


def test_configure_file_logging_writes_file(tmp_path, clean_logger):
    logger = configure_file_logging(tmp_path / "logs")
    logging.getLogger("themeicons.lookup").info("no theme provides icon %r", "gimp")
    for handler in logger.handlers:
        handler.flush()
    text = (tmp_path / "logs" / LOG_FILENAME).read_text(encoding="utf-8")
    assert "INFO no theme provides icon 'gimp'" in text


def test_configure_file_logging_is_idempotent(tmp_path, clean_logger):
    configure_file_logging(tmp_path)
    logger = configure_file_logging(tmp_path)
    rotating = [h for h in logger.handlers if isinstance(h, RotatingFileHandler)]
    assert len(rotating) == 1
