"""Internal dispatch handler — sends notifications via the email channel.

Reacts to NotificationCreated and NotificationRetried events and hands the
email to the configured channel adapter. Updates the notification status
to SENT or FAILED based on the result.
"""

import structlog
from notifications.channel import get_channel
from notifications.domain import notifications
from notifications.notification.events import NotificationCreated, NotificationRetried
from notifications.notification.notification import Notification, NotificationStatus
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

logger = structlog.get_logger(__name__)


@notifications.event_handler(part_of=Notification)
class NotificationDispatcher:
    """Dispatches notifications via the email adapter when they are queued."""

    @handle(NotificationCreated)
    def on_notification_created(self, event: NotificationCreated) -> None:
        dispatch_notification(event.notification_id)

    @handle(NotificationRetried)
    def on_notification_retried(self, event: NotificationRetried) -> None:
        dispatch_notification(event.notification_id)


def dispatch_notification(notification_id) -> None:
    """Send one PENDING notification and record the outcome."""
    repo = current_domain.repository_for(Notification)

    try:
        notification = repo.get(notification_id)
    except ObjectNotFoundError:
        logger.error("Notification not found for dispatch", notification_id=str(notification_id))
        return

    if NotificationStatus(notification.status) != NotificationStatus.PENDING:
        logger.info(
            "Notification not in PENDING status, skipping dispatch",
            notification_id=str(notification_id),
            status=notification.status,
        )
        return

    adapter = get_channel(notification.channel)
    try:
        result = adapter.send(
            to=notification.recipient,
            subject=notification.subject or "",
            body=notification.body,
        )
    except Exception as e:
        # Adapter errors are recorded on the notification and left for retry
        logger.error(
            "Notification dispatch failed",
            notification_id=str(notification.id),
            error=str(e),
        )
        result = {"status": "failed", "error": str(e)}

    if result.get("status") == "sent":
        notification.mark_sent(message_id=result.get("message_id"))
        logger.info(
            "Notification sent",
            notification_id=str(notification.id),
            notification_type=notification.notification_type,
        )
    else:
        notification.mark_failed(result.get("error", "Unknown dispatch error"))

    repo.add(notification)
