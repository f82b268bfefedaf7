"""Shared fixtures for top2csv tests."""

import logging
from pathlib import Path

import pytest

DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture
def sample_log() -> Path:
    """A three-snapshot top log with dbserver and two inputmgr rows."""
    return DATA_DIR / "top.log"


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo handler setup done by the command line entry points."""
    yield
    logger = logging.getLogger("top2csv")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
