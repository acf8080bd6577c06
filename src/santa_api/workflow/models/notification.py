"""
Notification Model

Append-only delivery log for santa disclosure emails. Never holds the
decrypted wish or address.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from santa_api.workflow.enums import NotificationStatus
from santa_api.workflow.enums import NotificationType


class NotificationRecord(BaseModel):
    """Notification database model.

    Append-only table.
    """

    notification_id: UUID
    notification_type: NotificationType = NotificationType.SANTA_DISCLOSURE
    group_id: str
    santa_id: str
    recipient_email: str
    subject: str
    status: NotificationStatus = NotificationStatus.PENDING
    error_message: str = ""
    created_at: datetime
    sent_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        extra = "forbid"
