import pytest

from policy_router.routing.gauge import active_requests


@pytest.fixture(autouse=True)
def process_gauge_balanced():
    """Every test must leave the process-wide gauge where it found it."""
    start = active_requests.read()
    yield
    assert active_requests.read() == start, "unbalanced increment/decrement on the process-wide gauge"
