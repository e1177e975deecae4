import logging
import os
import tempfile

from logging_config import setup_logging


def _close(logger):
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_file_logging_and_no_duplicate_handlers():
    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, "tsvgrid.log")
        setup_logging(logging.DEBUG, path)
        logger = setup_logging(logging.DEBUG, path)
        try:
            assert len(logger.handlers) == 1
            assert not logger.propagate
            logging.getLogger("tsvgrid.session").info("Inserted row 2")
            logger.handlers[0].flush()
            with open(path, encoding="utf-8") as f:
                text = f.read()
            assert "tsvgrid.session - INFO - Inserted row 2" in text
        finally:
            _close(logger)


def test_without_targets_uses_null_handler():
    logger = setup_logging(logging.WARNING)
    try:
        assert [type(h) for h in logger.handlers] == [logging.NullHandler]
        assert logger.level == logging.WARNING
    finally:
        _close(logger)
