"""Stripe payment gateway adapter.

Uses the stripe-python SDK to open hosted Checkout Sessions, read back their
line items, and verify webhook signatures with the endpoint's signing
secret. Credentials are passed per call so several gateways with different
keys can coexist in one process.
"""

import stripe
import structlog

from payments.gateway.port import (
    CheckoutLineItem,
    CheckoutSessionResult,
    GatewayError,
    PaymentGateway,
    PurchasedItem,
    WebhookVerificationError,
)

logger = structlog.get_logger(__name__)


class StripeGateway(PaymentGateway):
    """Production Stripe gateway adapter."""

    def __init__(self, api_key: str, webhook_secret: str) -> None:
        self.api_key = api_key
        self.webhook_secret = webhook_secret

    def create_checkout_session(
        self,
        line_items: list[CheckoutLineItem],
        customer_email: str | None,
        success_url: str,
        cancel_url: str,
        allowed_countries: list[str],
    ) -> CheckoutSessionResult:
        params = {
            "payment_method_types": ["card"],
            "line_items": [
                {
                    "price_data": {
                        "currency": item.currency,
                        "product_data": {"name": item.name},
                        "unit_amount": item.unit_amount,
                    },
                    "quantity": item.quantity,
                }
                for item in line_items
            ],
            "mode": "payment",
            "success_url": success_url,
            "cancel_url": cancel_url,
            "shipping_address_collection": {"allowed_countries": allowed_countries},
        }
        if customer_email:
            params["customer_email"] = customer_email

        try:
            session = stripe.checkout.Session.create(api_key=self.api_key, **params)
        except stripe.StripeError as exc:
            logger.error("Stripe checkout session creation failed", error=str(exc))
            raise GatewayError(str(exc)) from exc

        return CheckoutSessionResult(
            session_id=session.id,
            url=session.url,
            amount_total=session.amount_total,
        )

    def list_line_items(self, session_id: str) -> list[PurchasedItem]:
        try:
            result = stripe.checkout.Session.list_line_items(session_id, api_key=self.api_key)
        except stripe.StripeError as exc:
            logger.error("Stripe line item lookup failed", session_id=session_id, error=str(exc))
            raise GatewayError(str(exc)) from exc

        return [
            PurchasedItem(
                description=item.description,
                quantity=item.quantity,
                amount_total=item.amount_total,
            )
            for item in result.data
        ]

    def construct_webhook_event(self, payload: bytes, signature: str) -> dict:
        try:
            event = stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
        except stripe.SignatureVerificationError as exc:
            raise WebhookVerificationError(str(exc)) from exc
        except ValueError as exc:
            raise WebhookVerificationError(f"Invalid payload: {exc}") from exc

        return event.to_dict()
