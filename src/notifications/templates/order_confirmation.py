"""Order confirmation, sent to the shopper when checkout completes."""

from notifications.notification.notification import NotificationType
from notifications.templates.base import EmailTemplate


class OrderConfirmationTemplate(EmailTemplate):
    notification_type = NotificationType.ORDER_CONFIRMATION.value
    subject = "Order Confirmation"

    @classmethod
    def body(cls, context: dict) -> str:
        # Fixed text; the itemised summary goes to the shop alert
        return "Thank you for your order! Your order is being processed."
