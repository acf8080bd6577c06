"""
Participation and Wish Models

Per (group, participant) records carrying the encrypted address and wish
together with their approval status.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from santa_api.workflow.enums import AddressStatus
from santa_api.workflow.enums import WishStatus


class Participation(BaseModel):
    """Participation database model. One per (group_id, user_id)."""

    group_id: str
    user_id: str
    event_id: str = "default"
    submitted: bool = False
    address_encrypted: Optional[str] = None
    address_status: AddressStatus = AddressStatus.NONE
    address_submitted_at: Optional[datetime] = None
    address_approved_at: Optional[datetime] = None
    address_approved_by: Optional[str] = None  # admin user id

    class Config:
        from_attributes = True
        extra = "forbid"


class RecipientWish(BaseModel):
    """Recipient wish database model. One per (group_id, user_id)."""

    group_id: str
    user_id: str  # the recipient
    event_id: str = "default"
    wish_encrypted: str
    wish_set_at: datetime
    status: WishStatus = WishStatus.PENDING
    approved_at: Optional[datetime] = None
    approved_by: Optional[str] = None  # admin user id

    class Config:
        from_attributes = True
        extra = "forbid"
