"""New order alert, an internal email asking the shop to ship an order."""

from notifications.notification.notification import NotificationType, RecipientType
from notifications.templates.base import EmailTemplate

_ADDRESS_FIELDS = ("line1", "line2", "city", "state", "postal_code", "country")


def format_address(address) -> str:
    """Render a provider address dict as a single comma-separated line."""
    if not address:
        return "N/A"
    if isinstance(address, str):
        return address
    return ", ".join(str(address[field]) for field in _ADDRESS_FIELDS if address.get(field))


class NewOrderAlertTemplate(EmailTemplate):
    notification_type = NotificationType.NEW_ORDER_ALERT.value
    recipient_type = RecipientType.INTERNAL.value
    subject = "New Order Received"

    @classmethod
    def body(cls, context: dict) -> str:
        line_items = context.get("line_items") or "N/A"
        customer_email = context.get("customer_email") or "N/A"
        return (
            f"An order for {line_items} has been placed.\n\n"
            f"Ship to: {format_address(context.get('shipping_address'))}\n"
            f"Customer email: {customer_email}"
        )
