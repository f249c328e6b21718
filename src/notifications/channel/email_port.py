"""Email channel port.

Adapters never raise for a rejected message: they report the outcome in
a SendResult so the dispatcher can record it on the notification.
"""

from abc import ABC, abstractmethod
from typing import NotRequired, TypedDict


class SendResult(TypedDict):
    message_id: str | None
    status: str  # "sent" or "failed"
    error: NotRequired[str]


class EmailPort(ABC):
    @abstractmethod
    def send(self, to: str, subject: str, body: str, html_body: str | None = None) -> SendResult:
        """Hand one message to the email provider."""
        ...
