"""Translate the provider's webhook events into checkout commands.

Only `checkout.session.completed` is acted upon; the session object must
carry a shipping address and the customer's email.
"""

import json

from protean.exceptions import ValidationError

from payments.checkout.completion import CompleteCheckout
from payments.gateway.port import PaymentGateway, PurchasedItem

CHECKOUT_SESSION_COMPLETED = "checkout.session.completed"


def format_line_items(items: list[PurchasedItem]) -> str:
    """Render purchased items as "2 x Mug, 1 x Poster"."""
    return ", ".join(f"{item.quantity} x {item.description}" for item in items)


def completion_command(session: dict, gateway: PaymentGateway) -> CompleteCheckout:
    """Build CompleteCheckout from a completed session object.

    Raises ValidationError when the session lacks an id, a shipping address
    or a customer email.
    """
    session_id = session.get("id")
    if not session_id:
        raise ValidationError({"id": ["Checkout session has no id"]})

    shipping_address = (session.get("shipping_details") or {}).get("address")
    if not shipping_address:
        raise ValidationError({"shipping_details": ["No shipping address found"]})

    customer_email = (session.get("customer_details") or {}).get("email")
    if not customer_email:
        raise ValidationError({"customer_details": ["No customer email found"]})

    line_items = gateway.list_line_items(session_id)

    return CompleteCheckout(
        gateway_session_id=session_id,
        customer_email=customer_email,
        shipping_address=json.dumps(shipping_address),
        line_items_summary=format_line_items(line_items),
    )
