import logging

import pytest

from bytefield.logging_config import setup_logging


@pytest.fixture
def package_logger():
    logger = logging.getLogger("bytefield")
    yield logger
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


def test_level_name_is_accepted(package_logger):
    setup_logging("debug")
    assert package_logger.level == logging.DEBUG
    assert len(package_logger.handlers) == 1


def test_unknown_level_name_is_rejected(package_logger):
    with pytest.raises(ValueError, match="NOPE"):
        setup_logging("NOPE")


def test_repeated_setup_does_not_duplicate_handlers(package_logger):
    setup_logging(logging.INFO)
    setup_logging(logging.WARNING)
    assert len(package_logger.handlers) == 1
    assert package_logger.level == logging.WARNING


def test_file_handler_writes_log(package_logger, tmp_path):
    log_file = tmp_path / "run.log"
    setup_logging(logging.INFO, str(log_file))
    logging.getLogger("bytefield.model.io").info("hello from io")
    for handler in package_logger.handlers:
        handler.flush()
    text = log_file.read_text(encoding="utf-8")
    assert "Logging initialized." in text
    assert "bytefield.model.io - INFO - hello from io" in text
