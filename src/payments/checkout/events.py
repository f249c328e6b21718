"""Domain events for the CheckoutSession aggregate."""

from protean.fields import DateTime, Identifier, Integer, String, Text

from payments.domain import payments


@payments.event(part_of="CheckoutSession")
class CheckoutStarted:
    """A hosted checkout session was opened with the payment provider."""

    __version__ = 1

    checkout_id = Identifier(required=True)
    gateway_session_id = String(required=True)
    customer_email = String()
    items = Text(required=True)  # JSON: [{product_id, name, unit_amount, quantity}]
    amount_total = Integer(required=True)
    currency = String(required=True)
    started_at = DateTime(required=True)


@payments.event(part_of="CheckoutSession")
class CheckoutCompleted:
    """The payment provider reported the checkout session as paid."""

    __version__ = 1

    checkout_id = Identifier(required=True)
    gateway_session_id = String(required=True)
    customer_email = String(required=True)
    shipping_address = Text(required=True)  # JSON object
    line_items_summary = Text(required=True)
    amount_total = Integer()
    currency = String()
    completed_at = DateTime(required=True)
