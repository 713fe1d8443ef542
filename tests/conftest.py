import os
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Selects the protean config overlay before any domain is imported.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def ordering_bed():
    from ordering.domain import ordering

    bed = DomainFixture(ordering)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(scope="session")
def tracking_bed():
    from tracking.domain import tracking

    bed = DomainFixture(tracking)
    bed.setup()
    yield bed
    bed.teardown()


def _reset_domain_data(domain):
    """Clear every provider and the event store of ``domain``."""
    with domain.domain_context():
        for _, provider in domain.providers.items():
            provider._data_reset()
        domain.event_store.store._data_reset()


@pytest.fixture(autouse=True)
def reset_adapters():
    """Give every test fresh collaborator fakes."""
    from identity.provider import reset_identity_provider
    from notifications.channel import reset_channels
    from ordering.store import reset_order_store
    from payments.gateway import reset_payment_processor
    from tracking.feed import reset_feed_source
    from tracking.geocoding import reset_geocoder

    resets = [
        reset_identity_provider,
        reset_channels,
        reset_order_store,
        reset_payment_processor,
        reset_feed_source,
        reset_geocoder,
    ]
    for reset in resets:
        reset()
    yield
    for reset in resets:
        reset()


@pytest.fixture(scope="session")
def reset_domain_data():
    """Callable that wipes a domain's stored aggregates and events."""
    return _reset_domain_data
