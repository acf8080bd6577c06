"""
Workflow Models Module

All Pydantic models for the exchange workflow:
- Database entity models (groups, memberships, participations, wishes, mappings)
- Append-only records (acknowledgements, notifications)
- Caller identity and operation results
"""

from santa_api.workflow.models.group import Group, Membership
from santa_api.workflow.models.identity import Identity
from santa_api.workflow.models.mapping import Acknowledgement, Mapping
from santa_api.workflow.models.notification import NotificationRecord
from santa_api.workflow.models.participation import Participation, RecipientWish
from santa_api.workflow.models.results import (
    AcknowledgementItem,
    AddressStatusItem,
    ApprovalResult,
    Disclosure,
    GroupStatus,
    MappingStatus,
    ParticipantSummary,
    ShuffleResult,
    WishStatusItem,
)

__all__ = [
    # Entity models
    "Group",
    "Membership",
    "Participation",
    "RecipientWish",
    "Mapping",
    "Acknowledgement",
    "NotificationRecord",
    # Identity
    "Identity",
    # Results
    "ShuffleResult",
    "ApprovalResult",
    "Disclosure",
    "GroupStatus",
    "MappingStatus",
    "WishStatusItem",
    "AddressStatusItem",
    "AcknowledgementItem",
    "ParticipantSummary",
]
