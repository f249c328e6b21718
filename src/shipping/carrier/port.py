"""Carrier port — abstract interface for shipping carrier integrations.

Routes and application code program against the port; adapters are
swapped via configuration (FakeCarrier in dev/test, FedExCarrier in
production).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal


class CarrierError(Exception):
    """The carrier rejected a request or could not be reached."""


@dataclass(frozen=True)
class Address:
    street_lines: list[str]
    city: str
    state_or_province_code: str
    postal_code: str
    country_code: str = "US"


@dataclass(frozen=True)
class Contact:
    person_name: str
    phone_number: str
    company_name: str | None = None


@dataclass(frozen=True)
class Party:
    """Shipper or recipient of a shipment."""

    contact: Contact
    address: Address


@dataclass(frozen=True)
class Package:
    weight: float
    weight_units: str = "LB"
    dimensions: dict | None = field(default=None)  # {length, width, height, units}


@dataclass(frozen=True)
class RateQuote:
    service_type: str
    amount: Decimal
    currency: str


@dataclass(frozen=True)
class ShipmentResult:
    tracking_number: str | None
    service_type: str
    label_url: str | None = None


class CarrierPort(ABC):
    """Abstract interface for carrier adapters."""

    @abstractmethod
    def track(self, tracking_number: str) -> dict:
        """Return the carrier's tracking payload for one tracking number."""
        ...

    @abstractmethod
    def validate_address(self, address: Address) -> bool:
        """True only when the carrier resolves the address as a valid, deliverable one."""
        ...

    @abstractmethod
    def get_rate(self, address: Address, package: Package) -> list[RateQuote]:
        """Quote shipping a package from the shop to `address`."""
        ...

    @abstractmethod
    def create_shipment(
        self,
        shipper: Party,
        recipient: Party,
        packages: list[Package],
        service_type: str,
        packaging_type: str,
    ) -> ShipmentResult:
        """Book a shipment and return its tracking number."""
        ...
