"""Fixtures for cross-context integration tests.

Each test runs with both the ordering and tracking domains initialized on
the configured providers (in-memory by default) and starts from empty
stores.
"""

import pytest


@pytest.fixture
def ordering_ctx(ordering_bed, reset_domain_data):
    """Push the ordering domain context for a test, with cleanup."""
    from ordering.domain import ordering

    ctx = ordering.domain_context()
    ctx.push()

    yield ordering

    ctx.pop()
    reset_domain_data(ordering)


@pytest.fixture
def tracking_domain(tracking_bed, reset_domain_data):
    from tracking.domain import tracking

    yield tracking

    reset_domain_data(tracking)
