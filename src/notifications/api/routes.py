"""FastAPI routes for the Notifications domain.

Thin adapters over the Notification aggregate: an audit view of the order
emails and a way to retry the ones that failed.
"""

from fastapi import APIRouter, Query
from notifications.api.schemas import (
    NotificationListResponse,
    NotificationResponse,
    StatusResponse,
)
from notifications.notification.notification import Notification, NotificationStatus
from notifications.notification.retry import RetryNotification
from protean.utils.globals import current_domain

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _to_response(n: Notification) -> NotificationResponse:
    return NotificationResponse(
        notification_id=str(n.id),
        recipient=n.recipient,
        recipient_type=n.recipient_type,
        notification_type=n.notification_type,
        channel=n.channel,
        subject=n.subject,
        status=n.status,
        failure_reason=n.failure_reason,
        retry_count=n.retry_count,
        max_retries=n.max_retries,
        source_id=n.source_id,
        created_at=n.created_at,
        sent_at=n.sent_at,
    )


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    status: NotificationStatus | None = None,
    limit: int = Query(50, ge=1, le=100),
) -> NotificationListResponse:
    """List notifications, newest first, optionally by status."""
    query = current_domain.repository_for(Notification)._dao.query
    if status is not None:
        query = query.filter(status=status.value)
    results = query.order_by("-created_at").limit(limit).all()
    return NotificationListResponse(
        notifications=[_to_response(n) for n in results.items],
        total=results.total,
    )


@router.get("/{notification_id}", response_model=NotificationResponse)
async def get_notification(notification_id: str) -> NotificationResponse:
    """Fetch a single notification."""
    return _to_response(current_domain.repository_for(Notification).get(notification_id))


@router.post("/{notification_id}/retry", status_code=201, response_model=StatusResponse)
async def retry_notification(notification_id: str) -> StatusResponse:
    """Retry a failed notification."""
    command = RetryNotification(notification_id=notification_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()
