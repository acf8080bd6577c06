"""
Secret Santa API Schemas

Request bodies use the field names clients already send (name, joinCode,
wish, address) and reject unknown fields. Response models use
PascalCase fields.
"""

from datetime import datetime
from typing import List
from typing import Optional

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

# ════════════════════════════════════════════════════════════════════════════
# Request Schemas
# ════════════════════════════════════════════════════════════════════════════


class CreateGroupRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1, max_length=200, description="Group name, unique per owner")


class JoinGroupRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    join_code: str = Field(..., alias="joinCode", min_length=1, max_length=32, description="Code shared by the owner")


class SetWishRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    wish: str = Field(..., min_length=1, max_length=2000)


class SubmitAddressRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    address: str = Field(..., min_length=1, max_length=2000)


# ════════════════════════════════════════════════════════════════════════════
# Group Schemas
# ════════════════════════════════════════════════════════════════════════════


class MessageResponse(BaseModel):
    """Plain acknowledgement of a state change."""

    Message: str


class GroupResponse(BaseModel):
    """Group details."""

    GroupId: str
    Name: str
    OwnerId: str
    JoinCode: str
    CreatedAt: datetime


class GroupCreatedResponse(BaseModel):
    Message: str
    Group: GroupResponse


class GroupListResponse(BaseModel):
    """List of groups."""

    Message: str
    Count: int
    Groups: List[GroupResponse]


# ════════════════════════════════════════════════════════════════════════════
# Workflow Schemas
# ════════════════════════════════════════════════════════════════════════════


class ShuffleResponse(BaseModel):
    Message: str
    GroupId: str
    EventId: str
    MemberCount: int
    MappingsInserted: int


class ApprovalResponse(BaseModel):
    """Approval outcome. Never contains the approved wish or address."""

    Message: str
    GroupId: str
    UserId: str
    ApprovedAt: datetime
    SantasNotified: int = 0
    NotificationsFailed: int = 0


class AssignmentResponse(BaseModel):
    """What a santa sees about their recipient."""

    Wish: str
    Address: str
    RecipientNameHidden: bool = True


class AcknowledgementResponse(BaseModel):
    Message: str
    SentAt: datetime


# ════════════════════════════════════════════════════════════════════════════
# Group Status Schemas (admin)
# ════════════════════════════════════════════════════════════════════════════


class MappingStatusItem(BaseModel):
    SantaId: str
    SantaEmail: Optional[str] = None
    RecipientId: str
    RecipientEmail: Optional[str] = None
    EventId: str


class WishStatusResponseItem(BaseModel):
    UserId: str
    UserEmail: Optional[str] = None
    Status: str  # PENDING, APPROVED
    WishSetAt: Optional[datetime] = None
    ApprovedAt: Optional[datetime] = None


class AddressStatusResponseItem(BaseModel):
    UserId: str
    UserEmail: Optional[str] = None
    Status: str  # PENDING, APPROVED
    SubmittedAt: Optional[datetime] = None
    ApprovedAt: Optional[datetime] = None


class AcknowledgementStatusItem(BaseModel):
    SantaId: str
    SantaEmail: Optional[str] = None
    SentAt: datetime


class GroupStatusResponse(BaseModel):
    """Progress of one group. Identifiers and statuses only."""

    GroupId: str
    EventId: str
    Mappings: List[MappingStatusItem] = Field(default_factory=list)
    Wishes: List[WishStatusResponseItem] = Field(default_factory=list)
    Addresses: List[AddressStatusResponseItem] = Field(default_factory=list)
    Acknowledgements: List[AcknowledgementStatusItem] = Field(default_factory=list)


class ParticipantItem(BaseModel):
    UserId: str
    Name: Optional[str] = None
    Email: Optional[str] = None
    Submitted: bool
    AddressStatus: str  # NONE, PENDING, APPROVED


class ParticipantListResponse(BaseModel):
    """Members of one group and where each stands. No wish or address content."""

    Message: str
    GroupId: str
    Count: int
    Participants: List[ParticipantItem] = Field(default_factory=list)
