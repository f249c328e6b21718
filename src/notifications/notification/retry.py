"""RetryNotification: put a failed email back in the dispatch queue."""

import structlog
from notifications.domain import notifications
from notifications.notification.notification import Notification
from protean.fields import Identifier
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

logger = structlog.get_logger(__name__)


@notifications.command(part_of="Notification")
class RetryNotification:
    notification_id: Identifier(required=True)


@notifications.command_handler(part_of=Notification)
class RetryNotificationHandler:
    @handle(RetryNotification)
    def retry_notification(self, command: RetryNotification) -> str:
        repo = current_domain.repository_for(Notification)
        notification = repo.get(command.notification_id)
        notification.retry()
        repo.add(notification)

        logger.info(
            "Notification requeued",
            notification_id=str(notification.id),
            attempts=notification.retry_count,
            max_retries=notification.max_retries,
        )
        return str(notification.id)
