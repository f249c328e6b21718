"""SendGrid email adapter — delivers notifications through the SendGrid v3 API."""

import structlog
from python_http_client.exceptions import HTTPError
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from notifications.channel.email_port import EmailPort, SendResult

logger = structlog.get_logger(__name__)


class SendGridEmailAdapter(EmailPort):
    """Sends plain-text (and optional HTML) email from a fixed sender address.

    SendGrid answers 202 Accepted when it takes a message; anything else is
    reported as a failed send so the notification can be retried.
    """

    def __init__(self, api_key: str, from_email: str, client: SendGridAPIClient | None = None):
        self.from_email = from_email
        self.client = client or SendGridAPIClient(api_key)

    def send(
        self,
        to: str,
        subject: str,
        body: str,
        html_body: str | None = None,
    ) -> SendResult:
        message = Mail(
            from_email=self.from_email,
            to_emails=to,
            subject=subject,
            plain_text_content=body,
            html_content=html_body,
        )

        try:
            response = self.client.send(message)
        except HTTPError as exc:
            logger.warning("SendGrid rejected email", status_code=exc.status_code)
            return {"message_id": None, "status": "failed", "error": f"SendGrid error {exc.status_code}"}

        if response.status_code != 202:
            return {
                "message_id": None,
                "status": "failed",
                "error": f"SendGrid did not accept the email (status {response.status_code})",
            }

        return {"message_id": response.headers.get("X-Message-Id"), "status": "sent"}
