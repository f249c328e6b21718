"""Configurable fake payment gateway for development and testing.

This adapter simulates a real payment gateway without any external calls.
It can be configured at runtime to succeed or fail, making it useful for:
- Manual API testing via /payments/gateway/configure
- Automated tests with predictable outcomes
- Development without real gateway credentials

Webhooks are accepted when signed with "test-signature", mirroring the way
Stripe's test mode pairs test keys with known fixtures.
"""

import json
from uuid import uuid4

from payments.gateway.port import (
    CheckoutLineItem,
    CheckoutSessionResult,
    GatewayError,
    PaymentGateway,
    PurchasedItem,
    WebhookVerificationError,
)

TEST_SIGNATURE = "test-signature"


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Gateway unavailable"
        self.calls: list[dict] = []
        self.sessions: dict[str, list[PurchasedItem]] = {}

    def configure(self, should_succeed: bool, failure_reason: str = "Gateway unavailable") -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def create_checkout_session(
        self,
        line_items: list[CheckoutLineItem],
        customer_email: str | None,
        success_url: str,
        cancel_url: str,
        allowed_countries: list[str],
    ) -> CheckoutSessionResult:
        self.calls.append(
            {
                "method": "create_checkout_session",
                "line_items": line_items,
                "customer_email": customer_email,
                "success_url": success_url,
                "cancel_url": cancel_url,
                "allowed_countries": allowed_countries,
            }
        )

        if not self.should_succeed:
            raise GatewayError(self.failure_reason)

        session_id = f"cs_test_{uuid4().hex[:24]}"
        self.sessions[session_id] = [
            PurchasedItem(
                description=item.name,
                quantity=item.quantity,
                amount_total=item.unit_amount * item.quantity,
            )
            for item in line_items
        ]
        return CheckoutSessionResult(
            session_id=session_id,
            url=f"https://checkout.fake-gateway.example.com/pay/{session_id}",
            amount_total=sum(item.unit_amount * item.quantity for item in line_items),
        )

    def list_line_items(self, session_id: str) -> list[PurchasedItem]:
        self.calls.append({"method": "list_line_items", "session_id": session_id})

        if not self.should_succeed:
            raise GatewayError(self.failure_reason)
        return list(self.sessions.get(session_id, []))

    def construct_webhook_event(self, payload: bytes, signature: str) -> dict:
        if signature != TEST_SIGNATURE:
            raise WebhookVerificationError("No signatures found matching the expected signature for payload")
        try:
            return json.loads(payload)
        except ValueError as exc:
            raise WebhookVerificationError(f"Invalid payload: {exc}") from exc
