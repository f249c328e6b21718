"""CheckoutSession aggregate (CQRS) — one hosted checkout with the payment provider.

State Machine (2 states):
    OPEN → COMPLETED
    COMPLETED → (terminal)

A session is opened when the shopper starts checkout and completed when the
provider's webhook reports payment. Shipping details and the customer's
email are only known at completion time.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Integer, String, Text

from payments.checkout.events import CheckoutCompleted, CheckoutStarted
from payments.domain import payments

DEFAULT_CURRENCY = "usd"


class CheckoutStatus(Enum):
    OPEN = "Open"
    COMPLETED = "Completed"


@payments.aggregate
class CheckoutSession:
    """A shopper's checkout, mirrored from the payment provider's session."""

    gateway_session_id = String(required=True, max_length=255)
    customer_email = String(max_length=254)
    items = Text()  # JSON: [{product_id, name, unit_amount, quantity}]
    amount_total = Integer(default=0, min_value=0)
    currency = String(max_length=3, default=DEFAULT_CURRENCY)
    status = String(choices=CheckoutStatus, default=CheckoutStatus.OPEN.value)

    # Known once the provider reports completion
    shipping_address = Text()  # JSON object
    line_items_summary = Text()

    created_at = DateTime()
    completed_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def completed_checkout_has_shipping_and_email(self):
        if self.status == CheckoutStatus.COMPLETED.value:
            if not self.shipping_address:
                raise ValidationError({"shipping_address": ["No shipping address found"]})
            if not self.customer_email:
                raise ValidationError({"customer_email": ["No customer email found"]})

    @classmethod
    def open(cls, gateway_session_id, items, customer_email=None, currency=DEFAULT_CURRENCY):
        """Record a newly opened provider session."""
        now = datetime.now(UTC)
        amount_total = sum(item["unit_amount"] * item["quantity"] for item in items)

        session = cls(
            gateway_session_id=gateway_session_id,
            customer_email=customer_email,
            items=json.dumps(items),
            amount_total=amount_total,
            currency=currency,
            status=CheckoutStatus.OPEN.value,
            created_at=now,
            updated_at=now,
        )

        session.raise_(
            CheckoutStarted(
                checkout_id=str(session.id),
                gateway_session_id=gateway_session_id,
                customer_email=customer_email,
                items=json.dumps(items),
                amount_total=amount_total,
                currency=currency,
                started_at=now,
            )
        )

        return session

    @property
    def is_completed(self) -> bool:
        return self.status == CheckoutStatus.COMPLETED.value

    def complete(self, customer_email, shipping_address: dict, line_items_summary: str):
        """Mark the session paid and capture where the order ships."""
        if self.is_completed:
            raise ValidationError({"status": ["Checkout session is already completed"]})
        if not shipping_address:
            raise ValidationError({"shipping_address": ["No shipping address found"]})
        if not customer_email:
            raise ValidationError({"customer_email": ["No customer email found"]})

        now = datetime.now(UTC)
        self.customer_email = customer_email
        self.shipping_address = json.dumps(shipping_address)
        self.line_items_summary = line_items_summary
        self.status = CheckoutStatus.COMPLETED.value
        self.completed_at = now
        self.updated_at = now

        self.raise_(
            CheckoutCompleted(
                checkout_id=str(self.id),
                gateway_session_id=self.gateway_session_id,
                customer_email=customer_email,
                shipping_address=self.shipping_address,
                line_items_summary=line_items_summary,
                amount_total=self.amount_total,
                currency=self.currency,
                completed_at=now,
            )
        )
