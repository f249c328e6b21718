"""Notification lifecycle events.

NotificationCreated and NotificationRetried drive the dispatcher; Sent and
Failed record the outcome of each delivery attempt.
"""

from notifications.domain import notifications
from protean.fields import DateTime, Identifier, Integer, String


@notifications.event(part_of="Notification")
class NotificationCreated:
    __version__ = 1

    notification_id: Identifier(required=True)
    notification_type: String(required=True)
    recipient: String(required=True)
    recipient_type: String(required=True)
    channel: String(required=True)
    subject: String()
    source_event_type: String()
    created_at: DateTime(required=True)


@notifications.event(part_of="Notification")
class NotificationSent:
    __version__ = 1

    notification_id: Identifier(required=True)
    recipient: String(required=True)
    channel: String(required=True)
    message_id: String()  # provider's id, e.g. SendGrid X-Message-Id
    sent_at: DateTime(required=True)


@notifications.event(part_of="Notification")
class NotificationFailed:
    __version__ = 1

    notification_id: Identifier(required=True)
    recipient: String(required=True)
    channel: String(required=True)
    reason: String(required=True)
    retry_count: Integer(required=True)
    max_retries: Integer(required=True)
    failed_at: DateTime(required=True)


@notifications.event(part_of="Notification")
class NotificationRetried:
    __version__ = 1

    notification_id: Identifier(required=True)
    recipient: String(required=True)
    channel: String(required=True)
    retry_count: Integer(required=True)
    retried_at: DateTime(required=True)
