"""Root conftest: load the test environment and route structlog through stdlib so caplog sees it."""

from pathlib import Path

import pytest
import structlog
from dotenv import load_dotenv

from shared.logging import setup_logging

load_dotenv(Path(__file__).resolve().parent.parent / ".env.tests")

# No file handler is opened while pytest is running.
setup_logging(log_level="DEBUG")


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Keep bound context vars from leaking between tests."""
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()
