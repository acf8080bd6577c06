"""
Workflow Store Protocol

The persistence contract the orchestrator depends on. Implementations must
enforce the unique keys listed below and raise DuplicateRecordError when a
write violates one:

- groups: join_code, (owner_id, name)
- memberships: (group_id, user_id)
- participations / recipient_wishes: (group_id, user_id)
- mappings: (group_id, event_id, santa_id), (group_id, event_id, recipient_id)
- acknowledgements: (group_id, santa_id, recipient_id)

Status transitions are conditional writes (compare-and-set) returning whether
the row changed, so concurrent approvals cannot both succeed.
"""

from datetime import datetime
from typing import List
from typing import Optional
from typing import Protocol
from typing import Sequence
from uuid import UUID

from santa_api.workflow.models import Acknowledgement
from santa_api.workflow.models import Group
from santa_api.workflow.models import Mapping
from santa_api.workflow.models import Membership
from santa_api.workflow.models import NotificationRecord
from santa_api.workflow.models import Participation
from santa_api.workflow.models import RecipientWish


class WorkflowStore(Protocol):
    """Persistence operations used by ExchangeOrchestrator."""

    # Groups
    async def create_group(self, group: Group) -> None: ...

    async def get_group(self, group_id: str) -> Optional[Group]: ...

    async def get_group_by_join_code(self, join_code: str) -> Optional[Group]: ...

    async def get_group_by_owner_and_name(self, owner_id: str, name: str) -> Optional[Group]: ...

    async def list_groups(self) -> List[Group]: ...

    async def list_groups_for_user(self, user_id: str) -> List[Group]: ...

    # Memberships
    async def add_member(self, membership: Membership) -> None: ...

    async def get_member(self, group_id: str, user_id: str) -> Optional[Membership]: ...

    async def list_members(self, group_id: str) -> List[Membership]: ...

    # Participations (address track)
    async def ensure_participation(self, group_id: str, user_id: str, event_id: str) -> None: ...

    async def get_participation(self, group_id: str, user_id: str) -> Optional[Participation]: ...

    async def submit_address(
        self, group_id: str, user_id: str, address_encrypted: str, submitted_at: datetime
    ) -> bool: ...

    async def approve_address(self, group_id: str, user_id: str, approver_id: str, approved_at: datetime) -> bool: ...

    async def list_participations(self, group_id: str) -> List[Participation]: ...

    # Wishes
    async def get_wish(self, group_id: str, user_id: str) -> Optional[RecipientWish]: ...

    async def submit_wish(
        self, group_id: str, user_id: str, event_id: str, wish_encrypted: str, set_at: datetime
    ) -> bool: ...

    async def approve_wish(self, group_id: str, user_id: str, approver_id: str, approved_at: datetime) -> bool: ...

    async def list_wishes(self, group_id: str) -> List[RecipientWish]: ...

    # Mappings
    async def replace_mappings(self, group_id: str, event_id: str, mappings: Sequence[Mapping]) -> int: ...

    async def list_mappings(self, group_id: str, event_id: str) -> List[Mapping]: ...

    async def get_mapping_for_santa(self, group_id: str, event_id: str, santa_id: str) -> Optional[Mapping]: ...

    async def list_mappings_for_recipient(self, group_id: str, event_id: str, recipient_id: str) -> List[Mapping]: ...

    # Acknowledgements
    async def create_acknowledgement(self, ack: Acknowledgement) -> None: ...

    async def get_acknowledgement(
        self, group_id: str, santa_id: str, recipient_id: str
    ) -> Optional[Acknowledgement]: ...

    async def list_acknowledgements(self, group_id: str) -> List[Acknowledgement]: ...

    # Notifications
    async def create_notification(self, record: NotificationRecord) -> None: ...

    async def mark_notification_sent(self, notification_id: UUID, sent_at: datetime) -> None: ...

    async def mark_notification_failed(self, notification_id: UUID, error_message: str) -> None: ...

    async def list_notifications(self, group_id: str) -> List[NotificationRecord]: ...

    # Lifecycle
    async def health_check(self) -> bool: ...

    async def close(self) -> None: ...
