"""Root conftest: test environment, structlog routed into caplog, and a clean REVIEW_ environment."""

import os
from pathlib import Path

import pytest
import structlog
from dotenv import load_dotenv

from shared.logging import structlog_processors

load_dotenv(Path(__file__).resolve().parent.parent / ".env.tests")

# Same processor chain as the CLI, but without handlers: records reach caplog
# through stdlib propagation.
structlog.configure(
    processors=structlog_processors(),
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=False,
)


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Prevent context leaking between tests."""
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()


@pytest.fixture(autouse=True)
def _isolate_review_settings(monkeypatch):
    """Pipeline expectations assume ReviewSettings defaults, whatever the shell exports."""
    for key in [k for k in os.environ if k.startswith("REVIEW_")]:
        monkeypatch.delenv(key)
