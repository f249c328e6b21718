"""Tests for the Notification aggregate state machine."""

import pytest
from notifications.notification.events import (
    NotificationCreated,
    NotificationFailed,
    NotificationRetried,
    NotificationSent,
)
from notifications.notification.notification import (
    Notification,
    NotificationChannel,
    NotificationStatus,
    NotificationType,
    RecipientType,
)
from protean.exceptions import ValidationError


def _notification(**overrides):
    defaults = {
        "recipient": "shopper@example.com",
        "notification_type": NotificationType.ORDER_CONFIRMATION.value,
        "subject": "Order Confirmation",
        "body": "Thank you for your order! Your order is being processed.",
    }
    defaults.update(overrides)
    n = Notification.create(**defaults)
    n._events.clear()
    return n


class TestCreate:
    def test_defaults(self):
        n = Notification.create(
            recipient="shopper@example.com",
            notification_type=NotificationType.ORDER_CONFIRMATION.value,
            body="Thanks!",
        )
        assert n.status == NotificationStatus.PENDING.value
        assert n.channel == NotificationChannel.EMAIL.value
        assert n.recipient_type == RecipientType.CUSTOMER.value
        assert n.retry_count == 0
        assert n.max_retries == 3

    def test_raises_created_event(self):
        n = Notification.create(
            recipient="orders@example.com",
            notification_type=NotificationType.NEW_ORDER_ALERT.value,
            body="New order",
            recipient_type=RecipientType.INTERNAL.value,
        )
        event = n._events[0]
        assert isinstance(event, NotificationCreated)
        assert event.recipient == "orders@example.com"
        assert event.recipient_type == RecipientType.INTERNAL.value

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            _notification(notification_type="Welcome")

    def test_body_required(self):
        with pytest.raises(ValidationError):
            _notification(body=None)


class TestTransitions:
    def test_mark_sent(self):
        n = _notification()
        n.mark_sent(message_id="email-123")

        assert n.status == NotificationStatus.SENT.value
        assert n.message_id == "email-123"
        assert n.sent_at is not None
        assert isinstance(n._events[0], NotificationSent)

    def test_mark_failed_counts_attempt(self):
        n = _notification()
        n.mark_failed("Mailbox unavailable")

        assert n.status == NotificationStatus.FAILED.value
        assert n.failure_reason == "Mailbox unavailable"
        assert n.retry_count == 1
        event = n._events[0]
        assert isinstance(event, NotificationFailed)
        assert event.retry_count == 1

    def test_sent_is_terminal(self):
        n = _notification()
        n.mark_sent()
        with pytest.raises(ValidationError):
            n.mark_failed("late bounce")

    def test_retry_returns_to_pending(self):
        n = _notification()
        n.mark_failed("timeout")
        n._events.clear()

        assert n.can_retry
        n.retry()

        assert n.status == NotificationStatus.PENDING.value
        assert n.failure_reason is None
        assert isinstance(n._events[0], NotificationRetried)

    def test_retry_only_from_failed(self):
        n = _notification()
        with pytest.raises(ValidationError, match="Only failed notifications can be retried"):
            n.retry()

    def test_retry_budget(self):
        n = _notification(max_retries=1)
        n.mark_failed("timeout")

        assert not n.can_retry
        with pytest.raises(ValidationError, match="Maximum retry attempts exceeded"):
            n.retry()
