"""Inbound cross-domain event handler — Notifications reacts to Payment events.

Listens for CheckoutCompleted and sends an order confirmation to the
shopper and a new-order alert to the shop.
"""

import json
import os

import structlog
from notifications.domain import notifications
from notifications.notification.helpers import create_email_notification
from notifications.notification.notification import Notification, NotificationType
from protean.utils.mixins import handle
from shared.events.payments import CheckoutCompleted

logger = structlog.get_logger(__name__)

CHECKOUT_COMPLETED_TYPE = "Payments.CheckoutCompleted.v1"

notifications.register_external_event(CheckoutCompleted, CHECKOUT_COMPLETED_TYPE)


def shop_email() -> str | None:
    """Address that receives new-order alerts (falls back to EMAIL_FROM)."""
    return os.environ.get("SHOP_EMAIL") or os.environ.get("EMAIL_FROM")


@notifications.event_handler(part_of=Notification, stream_category="payments::checkout_session")
class PaymentEventsHandler:
    """Reacts to Payment domain events to send order emails."""

    @handle(CheckoutCompleted)
    def on_checkout_completed(self, event: CheckoutCompleted) -> None:
        source_id = str(event.gateway_session_id)

        create_email_notification(
            recipient=event.customer_email,
            notification_type=NotificationType.ORDER_CONFIRMATION.value,
            context={"line_items": event.line_items_summary},
            source_event_type=CHECKOUT_COMPLETED_TYPE,
            source_id=source_id,
        )

        shop = shop_email()
        if not shop:
            logger.warning(
                "SHOP_EMAIL not configured, skipping new order alert",
                gateway_session_id=source_id,
            )
            return

        create_email_notification(
            recipient=shop,
            notification_type=NotificationType.NEW_ORDER_ALERT.value,
            context={
                "line_items": event.line_items_summary,
                "shipping_address": json.loads(event.shipping_address),
                "customer_email": event.customer_email,
            },
            source_event_type=CHECKOUT_COMPLETED_TYPE,
            source_id=source_id,
        )
