"""Email templates, looked up by notification type."""

from notifications.templates.base import EmailTemplate
from notifications.templates.new_order_alert import NewOrderAlertTemplate
from notifications.templates.order_confirmation import OrderConfirmationTemplate

TEMPLATE_REGISTRY: dict[str, type[EmailTemplate]] = {
    template.notification_type: template for template in (OrderConfirmationTemplate, NewOrderAlertTemplate)
}


def get_template(notification_type: str) -> type[EmailTemplate]:
    try:
        return TEMPLATE_REGISTRY[notification_type]
    except KeyError:
        raise ValueError(f"No template registered for notification type: {notification_type}") from None
