"""Shared helpers for notification event handlers."""

import structlog
from notifications.notification.notification import Notification
from notifications.templates import get_template
from protean.utils.globals import current_domain

logger = structlog.get_logger(__name__)


def create_email_notification(
    recipient: str,
    notification_type: str,
    context: dict,
    recipient_type: str | None = None,
    source_event_type: str | None = None,
    source_id: str | None = None,
) -> str:
    """Render the template for `notification_type` and queue one email.

    The recipient type defaults to the one the template is written for.
    Adding the notification to the repository raises NotificationCreated,
    which the dispatcher picks up.

    Returns:
        The notification ID.
    """
    template = get_template(notification_type)
    rendered = template.render(context)

    notification = Notification.create(
        recipient=recipient,
        notification_type=notification_type,
        subject=rendered["subject"],
        body=rendered["body"],
        recipient_type=recipient_type or template.recipient_type,
        source_event_type=source_event_type,
        source_id=source_id,
    )
    current_domain.repository_for(Notification).add(notification)

    logger.info(
        "Notification created",
        notification_type=notification_type,
        recipient_type=notification.recipient_type,
        notification_id=str(notification.id),
    )
    return str(notification.id)
