"""
PostgreSQL Workflow Store

WorkflowStore implementation backed by the asyncpg repositories.
"""

from datetime import datetime
from typing import List
from typing import Optional
from typing import Sequence
from uuid import UUID

from santa_api.workflow.db.pool import DomainDBPool
from santa_api.workflow.db.repository_group import GroupRepository
from santa_api.workflow.db.repository_group import MembershipRepository
from santa_api.workflow.db.repository_mapping import AcknowledgementRepository
from santa_api.workflow.db.repository_mapping import MappingRepository
from santa_api.workflow.db.repository_notification import NotificationRepository
from santa_api.workflow.db.repository_participation import ParticipationRepository
from santa_api.workflow.db.repository_participation import WishRepository
from santa_api.workflow.models import Acknowledgement
from santa_api.workflow.models import Group
from santa_api.workflow.models import Mapping
from santa_api.workflow.models import Membership
from santa_api.workflow.models import NotificationRecord
from santa_api.workflow.models import Participation
from santa_api.workflow.models import RecipientWish


class PostgresStore:
    """Delegates each store operation to the matching repository."""

    def __init__(self, pool: DomainDBPool):
        self.db_pool = pool
        self.groups = GroupRepository(pool)
        self.members = MembershipRepository(pool)
        self.participations = ParticipationRepository(pool)
        self.wishes = WishRepository(pool)
        self.mappings = MappingRepository(pool)
        self.acks = AcknowledgementRepository(pool)
        self.notifications = NotificationRepository(pool)

    # Groups
    async def create_group(self, group: Group) -> None:
        await self.groups.create(group)

    async def get_group(self, group_id: str) -> Optional[Group]:
        return await self.groups.get(group_id)

    async def get_group_by_join_code(self, join_code: str) -> Optional[Group]:
        return await self.groups.get_by_join_code(join_code)

    async def get_group_by_owner_and_name(self, owner_id: str, name: str) -> Optional[Group]:
        return await self.groups.get_by_owner_and_name(owner_id, name)

    async def list_groups(self) -> List[Group]:
        return await self.groups.list_all()

    async def list_groups_for_user(self, user_id: str) -> List[Group]:
        return await self.groups.list_for_user(user_id)

    # Memberships
    async def add_member(self, membership: Membership) -> None:
        await self.members.add(membership)

    async def get_member(self, group_id: str, user_id: str) -> Optional[Membership]:
        return await self.members.get(group_id, user_id)

    async def list_members(self, group_id: str) -> List[Membership]:
        return await self.members.list_for_group(group_id)

    # Participations
    async def ensure_participation(self, group_id: str, user_id: str, event_id: str) -> None:
        await self.participations.ensure(group_id, user_id, event_id)

    async def get_participation(self, group_id: str, user_id: str) -> Optional[Participation]:
        return await self.participations.get(group_id, user_id)

    async def submit_address(
        self, group_id: str, user_id: str, address_encrypted: str, submitted_at: datetime
    ) -> bool:
        return await self.participations.submit_address(group_id, user_id, address_encrypted, submitted_at)

    async def approve_address(self, group_id: str, user_id: str, approver_id: str, approved_at: datetime) -> bool:
        return await self.participations.approve_address(group_id, user_id, approver_id, approved_at)

    async def list_participations(self, group_id: str) -> List[Participation]:
        return await self.participations.list_for_group(group_id)

    # Wishes
    async def get_wish(self, group_id: str, user_id: str) -> Optional[RecipientWish]:
        return await self.wishes.get(group_id, user_id)

    async def submit_wish(
        self, group_id: str, user_id: str, event_id: str, wish_encrypted: str, set_at: datetime
    ) -> bool:
        return await self.wishes.submit(group_id, user_id, event_id, wish_encrypted, set_at)

    async def approve_wish(self, group_id: str, user_id: str, approver_id: str, approved_at: datetime) -> bool:
        return await self.wishes.approve(group_id, user_id, approver_id, approved_at)

    async def list_wishes(self, group_id: str) -> List[RecipientWish]:
        return await self.wishes.list_for_group(group_id)

    # Mappings
    async def replace_mappings(self, group_id: str, event_id: str, mappings: Sequence[Mapping]) -> int:
        return await self.mappings.replace(group_id, event_id, mappings)

    async def list_mappings(self, group_id: str, event_id: str) -> List[Mapping]:
        return await self.mappings.list_for_event(group_id, event_id)

    async def get_mapping_for_santa(self, group_id: str, event_id: str, santa_id: str) -> Optional[Mapping]:
        return await self.mappings.get_for_santa(group_id, event_id, santa_id)

    async def list_mappings_for_recipient(self, group_id: str, event_id: str, recipient_id: str) -> List[Mapping]:
        return await self.mappings.list_for_recipient(group_id, event_id, recipient_id)

    # Acknowledgements
    async def create_acknowledgement(self, ack: Acknowledgement) -> None:
        await self.acks.create(ack)

    async def get_acknowledgement(self, group_id: str, santa_id: str, recipient_id: str) -> Optional[Acknowledgement]:
        return await self.acks.get(group_id, santa_id, recipient_id)

    async def list_acknowledgements(self, group_id: str) -> List[Acknowledgement]:
        return await self.acks.list_for_group(group_id)

    # Notifications
    async def create_notification(self, record: NotificationRecord) -> None:
        await self.notifications.create(record)

    async def mark_notification_sent(self, notification_id: UUID, sent_at: datetime) -> None:
        await self.notifications.mark_sent(notification_id, sent_at)

    async def mark_notification_failed(self, notification_id: UUID, error_message: str) -> None:
        await self.notifications.mark_failed(notification_id, error_message)

    async def list_notifications(self, group_id: str) -> List[NotificationRecord]:
        return await self.notifications.list_for_group(group_id)

    # Lifecycle
    async def health_check(self) -> bool:
        return await self.db_pool.health_check()

    async def close(self) -> None:
        await self.db_pool.close()
