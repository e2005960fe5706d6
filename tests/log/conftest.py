"""Logger isolation for logging tests."""

import pytest


@pytest.fixture(autouse=True)
def restore_hcbuf_logger():
    """Put back the hcbuf logger's handlers and level after each test."""
    from hcbuf._logging import logger

    handlers = logger.handlers[:]
    level = logger.level
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)
