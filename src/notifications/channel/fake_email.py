"""Fake email adapter — records sent emails for tests and local development."""

from uuid import uuid4

from notifications.channel.email_port import EmailPort, SendResult

DEFAULT_FAILURE_REASON = "Email delivery failed"


class FakeEmailAdapter(EmailPort):
    """Keeps messages in memory instead of sending them."""

    def __init__(self):
        self.sent_emails: list[dict] = []
        self.should_succeed = True
        self.failure_reason = DEFAULT_FAILURE_REASON

    def configure(self, should_succeed: bool = True, failure_reason: str = DEFAULT_FAILURE_REASON):
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def send(
        self,
        to: str,
        subject: str,
        body: str,
        html_body: str | None = None,
    ) -> SendResult:
        if not self.should_succeed:
            return {"message_id": None, "status": "failed", "error": self.failure_reason}

        message_id = f"email-{uuid4().hex[:12]}"
        self.sent_emails.append(
            {
                "message_id": message_id,
                "to": to,
                "subject": subject,
                "body": body,
                "html_body": html_body,
            }
        )
        return {"message_id": message_id, "status": "sent"}

    def reset(self):
        self.sent_emails.clear()
        self.configure()
