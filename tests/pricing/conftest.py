import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def pricing_bed():
    from pricing.domain import pricing

    bed = DomainFixture(pricing)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(pricing_bed):
    with pricing_bed.domain_context():
        yield


@pytest.fixture(autouse=True)
def _reset_ports():
    yield

    from pricing.ports import reset_ports

    reset_ports()
