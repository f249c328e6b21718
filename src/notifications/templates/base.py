"""Base class for email templates."""

from typing import ClassVar

from notifications.notification.notification import RecipientType


class EmailTemplate:
    """A subject line plus a body rendered from event context."""

    notification_type: ClassVar[str]
    recipient_type: ClassVar[str] = RecipientType.CUSTOMER.value
    subject: ClassVar[str]

    @classmethod
    def body(cls, context: dict) -> str:
        raise NotImplementedError

    @classmethod
    def render(cls, context: dict) -> dict:
        return {"subject": cls.subject, "body": cls.body(context)}
