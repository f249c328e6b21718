"""StartCheckout — price the cart and open a hosted checkout session.

Items carry only product ids and quantities; names and prices come from the
product catalogue. Payment is collected by card on the provider's page,
which also collects the shipping address for the allowed countries.
"""

import json
import os

from protean.exceptions import ValidationError
from protean.fields import String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from payments.checkout.checkout import DEFAULT_CURRENCY, CheckoutSession
from payments.checkout.pricing import get_catalog
from payments.domain import logger, payments
from payments.gateway import get_gateway
from payments.gateway.port import CheckoutLineItem


def client_url() -> str:
    return os.environ.get("CLIENT_URL", "http://localhost:5173").rstrip("/")


def allowed_countries() -> list[str]:
    raw = os.environ.get("CHECKOUT_ALLOWED_COUNTRIES", "US")
    return [code.strip().upper() for code in raw.split(",") if code.strip()]


@payments.command(part_of="CheckoutSession")
class StartCheckout:
    customer_email = String(max_length=254)
    items = Text(required=True)  # JSON: [{product_id, quantity}]


@payments.command_handler(part_of=CheckoutSession)
class StartCheckoutHandler:
    @handle(StartCheckout)
    def start_checkout(self, command):
        requested = json.loads(command.items)
        if not requested:
            raise ValidationError({"items": ["Checkout requires at least one item"]})

        catalog = get_catalog()
        priced = []
        for entry in requested:
            product = catalog.get(entry["product_id"])
            priced.append(
                {
                    "product_id": product.id,
                    "name": product.name,
                    "unit_amount": product.unit_amount,
                    "quantity": int(entry["quantity"]),
                }
            )

        result = get_gateway().create_checkout_session(
            line_items=[
                CheckoutLineItem(
                    name=item["name"],
                    unit_amount=item["unit_amount"],
                    quantity=item["quantity"],
                    currency=DEFAULT_CURRENCY,
                )
                for item in priced
            ],
            customer_email=command.customer_email,
            success_url=f"{client_url()}/Success",
            cancel_url=f"{client_url()}/Cancel",
            allowed_countries=allowed_countries(),
        )

        session = CheckoutSession.open(
            gateway_session_id=result.session_id,
            items=priced,
            customer_email=command.customer_email,
        )
        current_domain.repository_for(CheckoutSession).add(session)

        logger.info(
            "Checkout session opened",
            checkout_id=str(session.id),
            gateway_session_id=result.session_id,
            amount_total=session.amount_total,
        )
        return {"session_id": result.session_id, "url": result.url}
