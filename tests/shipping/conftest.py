import pytest
from shipping.carrier.port import Address, Contact, Package, Party


@pytest.fixture(autouse=True)
def _carrier(monkeypatch):
    from shipping.carrier import reset_carrier

    monkeypatch.delenv("CARRIER_ADAPTER", raising=False)
    reset_carrier()
    yield
    reset_carrier()


@pytest.fixture()
def address():
    return Address(
        street_lines=["10 FedEx Parkway", "Suite 302"],
        city="Collierville",
        state_or_province_code="TN",
        postal_code="38017",
        country_code="US",
    )


@pytest.fixture()
def package():
    return Package(weight=2.5, dimensions={"length": 10, "width": 8, "height": 4, "units": "IN"})


@pytest.fixture()
def shipper():
    return Party(
        contact=Contact(person_name="Shop Dispatch", phone_number="9015550100", company_name="Storefront"),
        address=Address(
            street_lines=["1 Warehouse Way"],
            city="Memphis",
            state_or_province_code="TN",
            postal_code="38118",
        ),
    )


@pytest.fixture()
def recipient(address):
    return Party(contact=Contact(person_name="Jane Buyer", phone_number="9015550199"), address=address)
