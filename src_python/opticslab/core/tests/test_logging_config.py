import logging

from opticslab.logging_config import PACKAGE_LOGGER, setup_logging


def _reset(logger):
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_setup_logging_console_only():
    logger = setup_logging(logging.DEBUG)
    try:
        assert logger.name == PACKAGE_LOGGER
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
    finally:
        _reset(logger)


def test_setup_logging_replaces_handlers_and_writes_file(tmp_path):
    log_file = tmp_path / 'opticslab.log'
    setup_logging()
    logger = setup_logging(logging.INFO, log_file=str(log_file))
    try:
        assert len(logger.handlers) == 2
        logging.getLogger('opticslab.core.simulator').info("pass finished")
        for handler in logger.handlers:
            handler.flush()
        assert 'pass finished' in log_file.read_text(encoding='utf-8')
    finally:
        _reset(logger)
