"""Carrier adapter abstraction — pluggable shipping carrier integration."""

import os

from shipping.carrier.port import CarrierPort

_carrier_instance: CarrierPort | None = None


def get_carrier() -> CarrierPort:
    """Return the configured carrier adapter (singleton).

    Uses FakeCarrier by default. Set CARRIER_ADAPTER=fedex (plus the
    FEDEX_* credentials) to talk to FedEx.
    """
    global _carrier_instance
    if _carrier_instance is None:
        adapter = os.environ.get("CARRIER_ADAPTER", "fake")
        if adapter == "fake":
            from shipping.carrier.fake_adapter import FakeCarrier

            _carrier_instance = FakeCarrier()
        elif adapter == "fedex":
            from shipping.carrier.fedex_adapter import FedExCarrier, FedExConfig

            _carrier_instance = FedExCarrier(FedExConfig.from_env())
        else:
            raise ValueError(f"Unknown carrier adapter: {adapter}")
    return _carrier_instance


def set_carrier(carrier: CarrierPort) -> None:
    """Override the active carrier (useful for tests)."""
    global _carrier_instance
    _carrier_instance = carrier


def reset_carrier():
    """Reset the carrier singleton (useful for testing)."""
    global _carrier_instance
    _carrier_instance = None
