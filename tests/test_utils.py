import logging

from isoml.utils import setup_logging


def test_setup_logging_is_idempotent():
    logger = logging.getLogger("isoml")
    before = len(logger.handlers)

    setup_logging("DEBUG")
    setup_logging("DEBUG")

    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == max(before, 1)
