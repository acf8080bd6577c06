"""
Orchestrator Result Models

Values returned from exchange operations to the HTTP boundary.
"""

from datetime import datetime
from typing import List
from typing import Optional

from pydantic import BaseModel
from pydantic import Field

from santa_api.workflow.enums import AddressStatus
from santa_api.workflow.enums import WishStatus


class ShuffleResult(BaseModel):
    """Outcome of replacing a group's mappings."""

    group_id: str
    event_id: str
    member_count: int
    mappings_inserted: int


class ApprovalResult(BaseModel):
    """Outcome of an approval. Never carries decrypted content."""

    group_id: str
    user_id: str
    approved_at: datetime
    santas_notified: int = 0
    notifications_failed: int = 0


class Disclosure(BaseModel):
    """Recipient wish and address revealed to their santa (identity-blind)."""

    wish: str
    address: str
    recipient_name_hidden: bool = True


class MappingStatus(BaseModel):
    santa_id: str
    recipient_id: str
    santa_email: Optional[str] = None
    recipient_email: Optional[str] = None
    event_id: str


class WishStatusItem(BaseModel):
    user_id: str
    user_email: Optional[str] = None
    status: WishStatus
    wish_set_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None


class AddressStatusItem(BaseModel):
    user_id: str
    user_email: Optional[str] = None
    status: AddressStatus
    submitted_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None


class AcknowledgementItem(BaseModel):
    santa_id: str
    santa_email: Optional[str] = None
    sent_at: datetime


class GroupStatus(BaseModel):
    """Admin view of a group's progress. Metadata only."""

    group_id: str
    event_id: str
    mappings: List[MappingStatus] = Field(default_factory=list)
    wishes: List[WishStatusItem] = Field(default_factory=list)
    addresses: List[AddressStatusItem] = Field(default_factory=list)
    acknowledgements: List[AcknowledgementItem] = Field(default_factory=list)


class ParticipantSummary(BaseModel):
    """One member's progress in a group. No wish or address content."""

    user_id: str
    display_name: Optional[str] = None
    email: Optional[str] = None
    submitted: bool = False
    address_status: AddressStatus = AddressStatus.NONE
