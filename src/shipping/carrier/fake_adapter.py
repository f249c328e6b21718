"""Fake carrier adapter — deterministic carrier for testing and development.

Generates mock tracking numbers and tracking events. Configurable
success/failure behavior for integration testing.
"""

from datetime import UTC, datetime
from decimal import Decimal
from uuid import uuid4

from shipping.carrier.port import (
    Address,
    CarrierError,
    CarrierPort,
    Package,
    Party,
    RateQuote,
    ShipmentResult,
)

DEFAULT_FAILURE_REASON = "Carrier unavailable"


class FakeCarrier(CarrierPort):
    """Fake carrier that always succeeds by default."""

    def __init__(self):
        self.should_succeed = True
        self.failure_reason = DEFAULT_FAILURE_REASON
        self.invalid_postal_codes: set[str] = set()
        self.shipments: list[dict] = []

    def configure(self, should_succeed: bool = True, failure_reason: str = DEFAULT_FAILURE_REASON):
        """Configure the fake carrier behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def _check(self):
        if not self.should_succeed:
            raise CarrierError(self.failure_reason)

    def track(self, tracking_number: str) -> dict:
        self._check()
        now = datetime.now(UTC).isoformat()
        return {
            "output": {
                "completeTrackResults": [
                    {
                        "trackingNumber": tracking_number,
                        "trackResults": [
                            {
                                "latestStatusDetail": {"code": "IT", "description": "In transit"},
                                "scanEvents": [
                                    {"date": now, "eventDescription": "Picked up"},
                                    {"date": now, "eventDescription": "In transit"},
                                ],
                            }
                        ],
                    }
                ]
            }
        }

    def validate_address(self, address: Address) -> bool:
        if not self.should_succeed:
            return False
        return address.postal_code not in self.invalid_postal_codes

    def get_rate(self, address: Address, package: Package) -> list[RateQuote]:
        self._check()
        # Flat $5 plus $1 per weight unit
        amount = (Decimal("5.00") + Decimal(str(package.weight))).quantize(Decimal("0.01"))
        return [RateQuote(service_type="FEDEX_GROUND", amount=amount, currency="USD")]

    def create_shipment(
        self,
        shipper: Party,
        recipient: Party,
        packages: list[Package],
        service_type: str,
        packaging_type: str,
    ) -> ShipmentResult:
        self._check()
        tracking_number = f"FAKE-{uuid4().hex[:12].upper()}"
        self.shipments.append(
            {
                "tracking_number": tracking_number,
                "recipient": recipient,
                "packages": packages,
                "service_type": service_type,
                "packaging_type": packaging_type,
            }
        )
        return ShipmentResult(
            tracking_number=tracking_number,
            service_type=service_type,
            label_url=f"https://fake-carrier.example.com/labels/{tracking_number}.pdf",
        )
