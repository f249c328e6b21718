"""Tests for turning provider webhook sessions into CompleteCheckout."""

import json

import pytest
from payments.checkout.webhook import completion_command, format_line_items
from payments.gateway.fake_adapter import FakeGateway
from payments.gateway.port import CheckoutLineItem, PurchasedItem
from protean.exceptions import ValidationError

ADDRESS = {"line1": "1 Main St", "city": "Springfield", "state": "IL", "postal_code": "62701", "country": "US"}


def _session(gateway, **overrides):
    result = gateway.create_checkout_session(
        [
            CheckoutLineItem(name="Enamel Camp Mug", unit_amount=1800, quantity=2),
            CheckoutLineItem(name="Trail Map Poster", unit_amount=2450, quantity=1),
        ],
        None,
        "s",
        "c",
        ["US"],
    )
    session = {
        "id": result.session_id,
        "shipping_details": {"address": ADDRESS},
        "customer_details": {"email": "buyer@example.com"},
    }
    session.update(overrides)
    return session


class TestFormatLineItems:
    def test_format(self):
        items = [PurchasedItem("Mug", 2), PurchasedItem("Poster", 1)]
        assert format_line_items(items) == "2 x Mug, 1 x Poster"

    def test_empty(self):
        assert format_line_items([]) == ""


class TestCompletionCommand:
    def test_builds_command(self):
        gateway = FakeGateway()
        session = _session(gateway)

        command = completion_command(session, gateway)

        assert command.gateway_session_id == session["id"]
        assert command.customer_email == "buyer@example.com"
        assert json.loads(command.shipping_address) == ADDRESS
        assert command.line_items_summary == "2 x Enamel Camp Mug, 1 x Trail Map Poster"

    def test_missing_shipping_address(self):
        gateway = FakeGateway()
        with pytest.raises(ValidationError, match="No shipping address found"):
            completion_command(_session(gateway, shipping_details=None), gateway)

    def test_missing_customer_email(self):
        gateway = FakeGateway()
        with pytest.raises(ValidationError, match="No customer email found"):
            completion_command(_session(gateway, customer_details={}), gateway)

    def test_missing_session_id(self):
        gateway = FakeGateway()
        with pytest.raises(ValidationError, match="Checkout session has no id"):
            completion_command(_session(gateway, id=None), gateway)
        assert [c["method"] for c in gateway.calls] == ["create_checkout_session"]
