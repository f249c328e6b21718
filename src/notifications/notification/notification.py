"""Notification aggregate: one order email and its delivery history.

A notification starts Pending and is handed to the email provider by the
dispatcher. The provider either accepts it (Sent, final) or it fails
(Failed), in which case it may be requeued until its retry budget runs
out. Every failed attempt counts against the budget.
"""

from datetime import UTC, datetime
from enum import Enum

from notifications.domain import notifications
from notifications.notification.events import (
    NotificationCreated,
    NotificationFailed,
    NotificationRetried,
    NotificationSent,
)
from protean.exceptions import ValidationError
from protean.fields import DateTime, Integer, String, Text

DEFAULT_MAX_RETRIES = 3


class NotificationType(Enum):
    ORDER_CONFIRMATION = "OrderConfirmation"
    NEW_ORDER_ALERT = "NewOrderAlert"


class RecipientType(Enum):
    CUSTOMER = "Customer"
    INTERNAL = "Internal"


class NotificationChannel(Enum):
    EMAIL = "Email"


class NotificationStatus(Enum):
    PENDING = "Pending"
    SENT = "Sent"
    FAILED = "Failed"


# (from, to) pairs; Sent has no way out
_ALLOWED_MOVES = frozenset(
    {
        (NotificationStatus.PENDING, NotificationStatus.SENT),
        (NotificationStatus.PENDING, NotificationStatus.FAILED),
        (NotificationStatus.FAILED, NotificationStatus.PENDING),
    }
)


def _utcnow() -> datetime:
    return datetime.now(UTC)


@notifications.aggregate
class Notification:
    recipient: String(required=True, max_length=254)
    recipient_type: String(choices=RecipientType, default=RecipientType.CUSTOMER.value)
    notification_type: String(choices=NotificationType, required=True)
    channel: String(choices=NotificationChannel, default=NotificationChannel.EMAIL.value)

    subject: String(max_length=500)
    body: Text(required=True)

    # What caused this email, e.g. Payments.CheckoutCompleted.v1 + session id
    source_event_type: String(max_length=200)
    source_id: String(max_length=200)

    status: String(choices=NotificationStatus, default=NotificationStatus.PENDING.value)
    message_id: String(max_length=200)
    sent_at: DateTime()
    failure_reason: String(max_length=500)
    retry_count: Integer(default=0, min_value=0)
    max_retries: Integer(default=DEFAULT_MAX_RETRIES, min_value=0)

    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def create(
        cls,
        recipient,
        notification_type,
        body,
        subject=None,
        recipient_type=RecipientType.CUSTOMER.value,
        source_event_type=None,
        source_id=None,
        max_retries=DEFAULT_MAX_RETRIES,
    ):
        """Queue an email for `recipient`. Raises NotificationCreated."""
        created_at = _utcnow()
        notification = cls(
            recipient=recipient,
            recipient_type=recipient_type,
            notification_type=notification_type,
            subject=subject,
            body=body,
            source_event_type=source_event_type,
            source_id=source_id,
            max_retries=max_retries,
            created_at=created_at,
            updated_at=created_at,
        )
        notification.raise_(
            NotificationCreated(
                notification_id=str(notification.id),
                recipient=notification.recipient,
                recipient_type=notification.recipient_type,
                notification_type=notification.notification_type,
                channel=notification.channel,
                subject=notification.subject,
                source_event_type=notification.source_event_type,
                created_at=created_at,
            )
        )
        return notification

    @property
    def can_retry(self) -> bool:
        return self.status == NotificationStatus.FAILED.value and self.retry_count < self.max_retries

    def _move_to(self, target: NotificationStatus) -> datetime:
        current = NotificationStatus(self.status)
        if (current, target) not in _ALLOWED_MOVES:
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target.value}"]})

        moved_at = _utcnow()
        self.status = target.value
        self.updated_at = moved_at
        return moved_at

    def mark_sent(self, message_id=None, sent_at=None):
        """The provider accepted the email."""
        accepted_at = self._move_to(NotificationStatus.SENT)
        self.message_id = message_id
        self.sent_at = sent_at or accepted_at
        self.failure_reason = None

        self.raise_(
            NotificationSent(
                notification_id=str(self.id),
                recipient=self.recipient,
                channel=self.channel,
                message_id=message_id,
                sent_at=self.sent_at,
            )
        )

    def mark_failed(self, reason):
        """Record a failed delivery attempt."""
        failed_at = self._move_to(NotificationStatus.FAILED)
        self.failure_reason = (reason or "Unknown dispatch error")[:500]
        self.retry_count += 1

        self.raise_(
            NotificationFailed(
                notification_id=str(self.id),
                recipient=self.recipient,
                channel=self.channel,
                reason=self.failure_reason,
                retry_count=self.retry_count,
                max_retries=self.max_retries,
                failed_at=failed_at,
            )
        )

    def retry(self):
        """Requeue a failed email for another delivery attempt."""
        if self.status != NotificationStatus.FAILED.value:
            raise ValidationError({"status": ["Only failed notifications can be retried"]})
        if not self.can_retry:
            raise ValidationError({"retry_count": ["Maximum retry attempts exceeded"]})

        retried_at = self._move_to(NotificationStatus.PENDING)
        self.failure_reason = None

        self.raise_(
            NotificationRetried(
                notification_id=str(self.id),
                recipient=self.recipient,
                channel=self.channel,
                retry_count=self.retry_count,
                retried_at=retried_at,
            )
        )
