"""Cross-domain event contracts for Payments domain events.

These classes define the event shape for consumption by other domains
(e.g., the Notifications domain sending order confirmations). They are
registered as external events via domain.register_external_event() with
matching __type__ strings so Protean's stream deserialization works correctly.

The source-of-truth events are in src/payments/checkout/events.py.
"""

from protean.core.event import BaseEvent
from protean.fields import DateTime, Identifier, Integer, String, Text


class CheckoutCompleted(BaseEvent):
    """The payment provider reported a completed checkout session."""

    __version__ = 1

    checkout_id = Identifier(required=True)
    gateway_session_id = String(required=True)
    customer_email = String(required=True)
    shipping_address = Text(required=True)  # JSON object
    line_items_summary = Text(required=True)
    amount_total = Integer()
    currency = String()
    completed_at = DateTime(required=True)
