"""Integration tests for checkout sessions and the provider webhook."""

import asyncio
import json
import time

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from payments.api.routes import payment_router
from payments.checkout.checkout import CheckoutSession, CheckoutStatus
from payments.gateway import get_gateway, set_gateway
from payments.gateway.fake_adapter import TEST_SIGNATURE, FakeGateway
from payments.gateway.port import PurchasedItem
from protean import current_domain
from protean.integrations.fastapi import register_exception_handlers

ADDRESS = {"line1": "1 Main St", "city": "Springfield", "state": "IL", "postal_code": "62701", "country": "US"}


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(payment_router)
    register_exception_handlers(app)
    return TestClient(app)


def _create_session(client, items=None):
    response = client.post(
        "/payments/checkout-sessions",
        json={"items": items or [{"id": "camp-mug", "quantity": 2}], "customer_email": "a@example.com"},
    )
    assert response.status_code == 200
    return response.json()["id"]


def _completed_event(session_id, **session_overrides):
    session = {
        "id": session_id,
        "object": "checkout.session",
        "shipping_details": {"address": ADDRESS},
        "customer_details": {"email": "buyer@example.com"},
    }
    session.update(session_overrides)
    return {"id": "evt_001", "type": "checkout.session.completed", "data": {"object": session}}


def _post_webhook(client, event, signature=TEST_SIGNATURE):
    return client.post(
        "/payments/webhook",
        content=json.dumps(event).encode(),
        headers={"Stripe-Signature": signature, "Content-Type": "application/json"},
    )


def _session(gateway_session_id):
    repo = current_domain.repository_for(CheckoutSession)
    return repo._dao.query.filter(gateway_session_id=gateway_session_id).all().items[0]


class TestCreateCheckoutSessionAPI:
    def test_returns_id_and_url(self, client):
        response = client.post(
            "/payments/checkout-sessions",
            json={"items": [{"id": "trail-poster", "quantity": 1}]},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["id"].startswith("cs_test_")
        assert data["url"].startswith("https://")

    def test_unknown_product_returns_400(self, client):
        response = client.post(
            "/payments/checkout-sessions",
            json={"items": [{"id": "no-such-thing", "quantity": 1}]},
        )
        assert response.status_code == 400

    def test_empty_cart_returns_422(self, client):
        response = client.post("/payments/checkout-sessions", json={"items": []})
        assert response.status_code == 422

    def test_gateway_failure_returns_502(self, client):
        get_gateway().configure(should_succeed=False)
        response = client.post(
            "/payments/checkout-sessions",
            json={"items": [{"id": "camp-mug", "quantity": 1}]},
        )
        assert response.status_code == 502


class TestWebhookAPI:
    def test_completed_session_is_recorded(self, client):
        session_id = _create_session(client)

        response = _post_webhook(client, _completed_event(session_id))

        assert response.status_code == 200
        assert response.json() == {"received": True}
        session = _session(session_id)
        assert session.status == CheckoutStatus.COMPLETED.value
        assert session.line_items_summary == "2 x Enamel Camp Mug"

    def test_bad_signature_returns_400(self, client):
        session_id = _create_session(client)

        response = _post_webhook(client, _completed_event(session_id), signature="forged")

        assert response.status_code == 400
        assert "Webhook Error" in response.json()["detail"]
        assert _session(session_id).status == CheckoutStatus.OPEN.value

    def test_other_event_types_are_acknowledged(self, client):
        response = _post_webhook(client, {"id": "evt_002", "type": "payment_intent.created", "data": {"object": {}}})
        assert response.status_code == 200
        assert response.json() == {"received": True}

    def test_missing_shipping_address_returns_400(self, client):
        session_id = _create_session(client)

        response = _post_webhook(client, _completed_event(session_id, shipping_details=None))

        assert response.status_code == 400
        assert _session(session_id).status == CheckoutStatus.OPEN.value

    def test_missing_customer_email_returns_400(self, client):
        session_id = _create_session(client)

        response = _post_webhook(client, _completed_event(session_id, customer_details={"email": None}))

        assert response.status_code == 400

    def test_session_without_id_returns_400(self, client):
        response = _post_webhook(client, _completed_event(None))

        assert response.status_code == 400
        assert get_gateway().calls == []

    def test_redelivered_webhook_is_acknowledged(self, client):
        session_id = _create_session(client)
        _post_webhook(client, _completed_event(session_id))

        response = _post_webhook(client, _completed_event(session_id))

        assert response.status_code == 200
        assert _session(session_id).status == CheckoutStatus.COMPLETED.value


class TestConfigureGatewayAPI:
    def test_toggle_failure(self, client, monkeypatch):
        monkeypatch.delenv("PROTEAN_ENV", raising=False)
        response = client.post(
            "/payments/gateway/configure",
            json={"should_succeed": False, "failure_reason": "Card network down"},
        )
        assert response.status_code == 200
        assert response.json()["should_succeed"] is False
        assert get_gateway().failure_reason == "Card network down"

    def test_forbidden_in_production(self, client, monkeypatch):
        monkeypatch.setenv("PROTEAN_ENV", "production")
        response = client.post("/payments/gateway/configure", json={"should_succeed": False})
        assert response.status_code == 403


class _SlowGateway(FakeGateway):
    """Blocks like a real provider round trip."""

    def create_checkout_session(self, *args, **kwargs):
        time.sleep(0.5)
        return super().create_checkout_session(*args, **kwargs)

    def list_line_items(self, session_id):
        time.sleep(0.5)
        return super().list_line_items(session_id)


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


class TestGatewayCallsDoNotBlockEventLoop:
    @pytest.fixture()
    def app(self):
        app = FastAPI()
        app.include_router(payment_router)
        register_exception_handlers(app)
        return app

    def _post(self, app, path, **kwargs):
        async def request():
            transport = httpx.ASGITransport(app=app)
            async with httpx.AsyncClient(transport=transport, base_url="http://storefront.test") as http:
                return await http.post(path, **kwargs)

        return asyncio.run(_longest_stall_during(request))

    def test_slow_checkout_runs_off_the_event_loop(self, app):
        set_gateway(_SlowGateway())

        response, longest_stall = self._post(
            app, "/payments/checkout-sessions", json={"items": [{"id": "camp-mug", "quantity": 1}]}
        )

        assert response.status_code == 200
        assert longest_stall < 0.25

    def test_slow_webhook_runs_off_the_event_loop(self, app):
        gateway = _SlowGateway()
        gateway.sessions["cs_test_slow"] = [PurchasedItem(description="Enamel Camp Mug", quantity=1, amount_total=1800)]
        set_gateway(gateway)

        response, longest_stall = self._post(
            app,
            "/payments/webhook",
            content=json.dumps(_completed_event("cs_test_slow")).encode(),
            headers={"Stripe-Signature": TEST_SIGNATURE, "Content-Type": "application/json"},
        )

        assert response.status_code == 200
        assert longest_stall < 0.25
