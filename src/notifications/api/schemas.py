"""Pydantic request/response models for the Notifications API.

API schemas are separate from Protean commands (anti-corruption pattern).
"""

from datetime import datetime

from pydantic import BaseModel


# ---------------------------------------------------------------------------
# Response Models
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"


class NotificationResponse(BaseModel):
    notification_id: str
    recipient: str
    recipient_type: str
    notification_type: str
    channel: str
    subject: str | None = None
    status: str
    failure_reason: str | None = None
    retry_count: int = 0
    max_retries: int = 0
    source_id: str | None = None
    created_at: datetime | None = None
    sent_at: datetime | None = None


class NotificationListResponse(BaseModel):
    notifications: list[NotificationResponse]
    total: int
