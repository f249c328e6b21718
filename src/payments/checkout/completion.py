"""CompleteCheckout — record the provider's report that a session was paid.

Webhooks can be redelivered; completing an already-completed session is
acknowledged without raising CheckoutCompleted again. A session opened
outside this service (no local record) is recorded on the fly.
"""

import json

from protean.fields import String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from payments.checkout.checkout import CheckoutSession
from payments.domain import logger, payments


@payments.command(part_of="CheckoutSession")
class CompleteCheckout:
    gateway_session_id = String(required=True, max_length=255)
    customer_email = String(required=True, max_length=254)
    shipping_address = Text(required=True)  # JSON object
    line_items_summary = Text(required=True)


@payments.command_handler(part_of=CheckoutSession)
class CompleteCheckoutHandler:
    @handle(CompleteCheckout)
    def complete_checkout(self, command):
        repo = current_domain.repository_for(CheckoutSession)
        matches = repo._dao.query.filter(gateway_session_id=command.gateway_session_id).all().items

        if matches:
            session = matches[0]
        else:
            logger.info(
                "No local record for checkout session, recording it",
                gateway_session_id=command.gateway_session_id,
            )
            session = CheckoutSession.open(gateway_session_id=command.gateway_session_id, items=[])

        if session.is_completed:
            logger.info(
                "Checkout session already completed, ignoring redelivery",
                gateway_session_id=command.gateway_session_id,
            )
            return str(session.id)

        session.complete(
            customer_email=command.customer_email,
            shipping_address=json.loads(command.shipping_address),
            line_items_summary=command.line_items_summary,
        )
        repo.add(session)
        return str(session.id)
