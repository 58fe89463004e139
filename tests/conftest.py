import pytest
import structlog


@pytest.fixture(autouse=True)
def reset_structlog():
    """CLI commands reconfigure structlog against the runner's captured streams."""
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
