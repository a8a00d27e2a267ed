import pytest
from protean.integrations.pytest import DomainFixture

from logistics.notification.fake_sink import FakeNotificationSink


@pytest.fixture(scope="session")
def logistics_bed():
    from logistics.domain import logistics

    bed = DomainFixture(logistics)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(logistics_bed):
    with logistics_bed.domain_context():
        yield

        from protean import current_domain

        # Clear all databases
        for _, provider in current_domain.providers.items():
            provider._data_reset()

        # Drain event stores
        current_domain.event_store.store._data_reset()


@pytest.fixture()
def sink():
    fake = FakeNotificationSink()
    yield fake
    fake.reset()


@pytest.fixture()
def lifecycle(sink):
    from logistics.shipment.lifecycle import ShipmentLifecycle

    return ShipmentLifecycle(sink)
