"""Application tests for StartCheckout and CompleteCheckout."""

import json

import pytest
from payments.checkout.checkout import CheckoutSession, CheckoutStatus
from payments.checkout.completion import CompleteCheckout
from payments.checkout.start import StartCheckout
from payments.gateway import get_gateway
from payments.gateway.port import GatewayError
from protean import current_domain
from protean.exceptions import ValidationError

ADDRESS = {"line1": "1 Main St", "city": "Springfield", "state": "IL", "postal_code": "62701", "country": "US"}


def _start(items, customer_email="a@example.com"):
    return current_domain.process(
        StartCheckout(customer_email=customer_email, items=json.dumps(items)),
        asynchronous=False,
    )


def _sessions(gateway_session_id):
    repo = current_domain.repository_for(CheckoutSession)
    return repo._dao.query.filter(gateway_session_id=gateway_session_id).all().items


class TestStartCheckout:
    def test_opens_session_with_catalogue_prices(self):
        result = _start([{"product_id": "camp-mug", "quantity": 2}, {"product_id": "trail-poster", "quantity": 1}])

        assert result["session_id"].startswith("cs_test_")
        assert result["url"]

        session = _sessions(result["session_id"])[0]
        assert session.status == CheckoutStatus.OPEN.value
        assert session.amount_total == 2 * 1800 + 2450
        assert session.customer_email == "a@example.com"

    def test_gateway_receives_urls_and_countries(self, monkeypatch):
        monkeypatch.setenv("CLIENT_URL", "https://shop.example.com/")
        monkeypatch.setenv("CHECKOUT_ALLOWED_COUNTRIES", "us, ca")

        _start([{"product_id": "wool-beanie", "quantity": 1}])

        call = get_gateway().calls[-1]
        assert call["success_url"] == "https://shop.example.com/Success"
        assert call["cancel_url"] == "https://shop.example.com/Cancel"
        assert call["allowed_countries"] == ["US", "CA"]
        assert call["line_items"][0].name == "Merino Wool Beanie"
        assert call["line_items"][0].unit_amount == 3200

    def test_unknown_product_rejected(self):
        with pytest.raises(ValidationError):
            _start([{"product_id": "no-such-thing", "quantity": 1}])
        assert get_gateway().calls == []

    def test_empty_cart_rejected(self):
        with pytest.raises(ValidationError):
            _start([])

    def test_gateway_failure_propagates(self):
        get_gateway().configure(should_succeed=False)
        with pytest.raises(GatewayError):
            _start([{"product_id": "camp-mug", "quantity": 1}])


class TestCompleteCheckout:
    def _complete(self, gateway_session_id, **overrides):
        defaults = {
            "gateway_session_id": gateway_session_id,
            "customer_email": "buyer@example.com",
            "shipping_address": json.dumps(ADDRESS),
            "line_items_summary": "1 x Enamel Camp Mug",
        }
        defaults.update(overrides)
        return current_domain.process(CompleteCheckout(**defaults), asynchronous=False)

    def test_completes_open_session(self):
        result = _start([{"product_id": "camp-mug", "quantity": 1}])
        self._complete(result["session_id"])

        session = _sessions(result["session_id"])[0]
        assert session.status == CheckoutStatus.COMPLETED.value
        assert session.customer_email == "buyer@example.com"
        assert json.loads(session.shipping_address) == ADDRESS

    def test_redelivery_is_acknowledged(self):
        result = _start([{"product_id": "camp-mug", "quantity": 1}])
        first = self._complete(result["session_id"])
        second = self._complete(result["session_id"], line_items_summary="changed")

        assert first == second
        session = _sessions(result["session_id"])[0]
        assert session.line_items_summary == "1 x Enamel Camp Mug"

    def test_unknown_session_is_recorded(self):
        self._complete("cs_external_001")

        sessions = _sessions("cs_external_001")
        assert len(sessions) == 1
        assert sessions[0].status == CheckoutStatus.COMPLETED.value
