"""Integration tests for the tracking and shipping endpoints via TestClient."""

import asyncio
import time

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from shipping.api import carrier_error_handler, shipping_router, tracking_router
from shipping.carrier import get_carrier, set_carrier
from shipping.carrier.fake_adapter import FakeCarrier
from shipping.carrier.port import CarrierError

ADDRESS = {
    "street_lines": ["10 FedEx Parkway"],
    "city": "Collierville",
    "state_or_province_code": "TN",
    "postal_code": "38017",
}


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(tracking_router)
    app.include_router(shipping_router)
    app.add_exception_handler(CarrierError, carrier_error_handler)
    return TestClient(app)


def _party(name, **address):
    return {
        "contact": {"person_name": name, "phone_number": "9015550100"},
        "address": {**ADDRESS, **address},
    }


class TestTrackAPI:
    def test_track(self, client):
        response = client.post("/track", json={"trackingNumber": "123456789012"})
        assert response.status_code == 200
        track = response.json()["output"]["completeTrackResults"][0]
        assert track["trackingNumber"] == "123456789012"

    def test_track_accepts_snake_case(self, client):
        response = client.post("/track", json={"tracking_number": "123456789012"})
        assert response.status_code == 200

    def test_missing_tracking_number(self, client):
        response = client.post("/track", json={})
        assert response.status_code == 422

    def test_carrier_failure_returns_502(self, client):
        get_carrier().configure(should_succeed=False, failure_reason="FedEx is unreachable")

        response = client.post("/track", json={"trackingNumber": "123456789012"})
        assert response.status_code == 502
        assert response.json() == {"error": "FedEx is unreachable"}


class TestAddressValidationAPI:
    def test_valid(self, client):
        response = client.post("/shipping/addresses/validate", json=ADDRESS)
        assert response.status_code == 200
        assert response.json() == {"valid": True}

    def test_invalid(self, client):
        get_carrier().invalid_postal_codes.add("38017")

        response = client.post("/shipping/addresses/validate", json=ADDRESS)
        assert response.json() == {"valid": False}

    def test_carrier_down_reports_invalid(self, client):
        get_carrier().configure(should_succeed=False)

        response = client.post("/shipping/addresses/validate", json=ADDRESS)
        assert response.status_code == 200
        assert response.json() == {"valid": False}

    def test_too_many_street_lines(self, client):
        response = client.post(
            "/shipping/addresses/validate",
            json={**ADDRESS, "street_lines": ["a", "b", "c", "d"]},
        )
        assert response.status_code == 422


class TestRatesAPI:
    def test_quotes(self, client):
        response = client.post("/shipping/rates", json={"address": ADDRESS, "package": {"weight": 3}})
        assert response.status_code == 200
        quotes = response.json()["quotes"]
        assert len(quotes) == 1
        assert quotes[0]["service_type"] == "FEDEX_GROUND"
        assert float(quotes[0]["amount"]) == 8.0

    def test_weight_must_be_positive(self, client):
        response = client.post("/shipping/rates", json={"address": ADDRESS, "package": {"weight": 0}})
        assert response.status_code == 422


class TestCreateShipmentAPI:
    def test_create(self, client):
        response = client.post(
            "/shipping/shipments",
            json={
                "shipper": _party("Shop Dispatch", postal_code="38118", city="Memphis"),
                "recipient": _party("Jane Buyer"),
                "packages": [{"weight": 1.5, "dimensions": {"length": 10, "width": 8, "height": 4}}],
            },
        )
        assert response.status_code == 201
        data = response.json()
        assert data["tracking_number"].startswith("FAKE-")
        assert data["service_type"] == "FEDEX_GROUND"
        assert data["label_url"]

        shipment = get_carrier().shipments[0]
        assert shipment["recipient"].contact.person_name == "Jane Buyer"
        assert shipment["packages"][0].dimensions["units"] == "IN"

    def test_requires_a_package(self, client):
        response = client.post(
            "/shipping/shipments",
            json={"shipper": _party("Shop"), "recipient": _party("Buyer"), "packages": []},
        )
        assert response.status_code == 422

    def test_carrier_rejection_returns_502(self, client):
        get_carrier().configure(should_succeed=False, failure_reason="FedEx rejected the request (400)")

        response = client.post(
            "/shipping/shipments",
            json={"shipper": _party("Shop"), "recipient": _party("Buyer"), "packages": [{"weight": 1}]},
        )
        assert response.status_code == 502
        assert response.json()["error"] == "FedEx rejected the request (400)"


class _SlowCarrier(FakeCarrier):
    """Blocks like a real carrier round trip."""

    def track(self, tracking_number):
        time.sleep(0.5)
        return super().track(tracking_number)


async def _longest_stall_during(request):
    """Run `request` next to a 10 ms ticker; return the longest gap between ticks."""
    gaps = []
    done = asyncio.Event()

    async def ticker():
        last = time.monotonic()
        while not done.is_set():
            await asyncio.sleep(0.01)
            now = time.monotonic()
            gaps.append(now - last)
            last = now

    ticking = asyncio.create_task(ticker())
    response = await request()
    done.set()
    await ticking
    return response, max(gaps)


class TestCarrierCallsDoNotBlockEventLoop:
    def test_slow_tracking_runs_off_the_event_loop(self):
        set_carrier(_SlowCarrier())
        app = FastAPI()
        app.include_router(tracking_router)

        async def track():
            transport = httpx.ASGITransport(app=app)
            async with httpx.AsyncClient(transport=transport, base_url="http://storefront.test") as http:
                return await http.post("/track", json={"trackingNumber": "123456789012"})

        response, longest_stall = asyncio.run(_longest_stall_during(track))

        assert response.status_code == 200
        assert longest_stall < 0.25
