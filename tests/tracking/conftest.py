import pytest


@pytest.fixture(autouse=True)
def _ctx(ordering_bed, tracking_bed, reset_domain_data):
    from ordering.domain import ordering
    from tracking.domain import tracking

    with tracking_bed.domain_context():
        yield
    reset_domain_data(tracking)
    reset_domain_data(ordering)
