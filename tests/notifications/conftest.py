import pytest
from protean import current_domain
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def notifications_bed():
    from notifications.domain import notifications

    bed = DomainFixture(notifications)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(notifications_bed, monkeypatch):
    from notifications.channel import reset_channels

    monkeypatch.delenv("EMAIL_ADAPTER", raising=False)
    monkeypatch.setenv("SHOP_EMAIL", "orders@storefront.example.com")
    reset_channels()
    with notifications_bed.domain_context():
        yield

        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()
    reset_channels()
