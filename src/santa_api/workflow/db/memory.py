"""
In-Memory Workflow Store

Process-local implementation of WorkflowStore. Enforces the same unique keys
as the PostgreSQL schema. Used when no domain database is configured (local
development) and as the store substituted in tests.
"""

import asyncio
from datetime import datetime
from typing import Dict
from typing import List
from typing import Optional
from typing import Sequence
from typing import Tuple
from uuid import UUID

from loguru import logger

from santa_api.workflow.enums import AddressStatus
from santa_api.workflow.enums import EntityType
from santa_api.workflow.enums import NotificationStatus
from santa_api.workflow.enums import WishStatus
from santa_api.workflow.exceptions import DuplicateRecordError
from santa_api.workflow.models import Acknowledgement
from santa_api.workflow.models import Group
from santa_api.workflow.models import Mapping
from santa_api.workflow.models import Membership
from santa_api.workflow.models import NotificationRecord
from santa_api.workflow.models import Participation
from santa_api.workflow.models import RecipientWish


class MemoryStore:
    """Dictionary-backed store keyed exactly like the database unique indexes."""

    def __init__(self) -> None:
        self._groups: Dict[str, Group] = {}
        self._members: Dict[Tuple[str, str], Membership] = {}
        self._participations: Dict[Tuple[str, str], Participation] = {}
        self._wishes: Dict[Tuple[str, str], RecipientWish] = {}
        self._mappings: Dict[Tuple[str, str, str], Mapping] = {}
        self._acks: Dict[Tuple[str, str, str], Acknowledgement] = {}
        self._notifications: Dict[UUID, NotificationRecord] = {}
        self._shuffle_lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Groups
    # ------------------------------------------------------------------
    async def create_group(self, group: Group) -> None:
        for existing in self._groups.values():
            if existing.join_code == group.join_code:
                raise DuplicateRecordError(EntityType.GROUP.value, ("join_code", group.join_code))
            if existing.owner_id == group.owner_id and existing.name == group.name:
                raise DuplicateRecordError(EntityType.GROUP.value, (group.owner_id, group.name))
        if group.group_id in self._groups:
            raise DuplicateRecordError(EntityType.GROUP.value, (group.group_id,))
        self._groups[group.group_id] = group

    async def get_group(self, group_id: str) -> Optional[Group]:
        return self._groups.get(group_id)

    async def get_group_by_join_code(self, join_code: str) -> Optional[Group]:
        return next((g for g in self._groups.values() if g.join_code == join_code), None)

    async def get_group_by_owner_and_name(self, owner_id: str, name: str) -> Optional[Group]:
        return next(
            (g for g in self._groups.values() if g.owner_id == owner_id and g.name == name),
            None,
        )

    async def list_groups(self) -> List[Group]:
        return sorted(self._groups.values(), key=lambda g: g.created_at)

    async def list_groups_for_user(self, user_id: str) -> List[Group]:
        group_ids = {gid for (gid, uid) in self._members if uid == user_id}
        return sorted(
            (g for g in self._groups.values() if g.group_id in group_ids),
            key=lambda g: g.created_at,
        )

    # ------------------------------------------------------------------
    # Memberships
    # ------------------------------------------------------------------
    async def add_member(self, membership: Membership) -> None:
        key = (membership.group_id, membership.user_id)
        if key in self._members:
            raise DuplicateRecordError(EntityType.MEMBERSHIP.value, key)
        self._members[key] = membership

    async def get_member(self, group_id: str, user_id: str) -> Optional[Membership]:
        return self._members.get((group_id, user_id))

    async def list_members(self, group_id: str) -> List[Membership]:
        members = [m for (gid, _), m in self._members.items() if gid == group_id]
        return sorted(members, key=lambda m: m.joined_at)

    # ------------------------------------------------------------------
    # Participations
    # ------------------------------------------------------------------
    async def ensure_participation(self, group_id: str, user_id: str, event_id: str) -> None:
        key = (group_id, user_id)
        if key not in self._participations:
            self._participations[key] = Participation(group_id=group_id, user_id=user_id, event_id=event_id)

    async def get_participation(self, group_id: str, user_id: str) -> Optional[Participation]:
        return self._participations.get((group_id, user_id))

    async def submit_address(
        self, group_id: str, user_id: str, address_encrypted: str, submitted_at: datetime
    ) -> bool:
        key = (group_id, user_id)
        current = self._participations.get(key)
        if current is None or current.address_status == AddressStatus.APPROVED:
            return False
        self._participations[key] = current.model_copy(
            update={
                "submitted": True,
                "address_encrypted": address_encrypted,
                "address_status": AddressStatus.PENDING,
                "address_submitted_at": submitted_at,
                "address_approved_at": None,
                "address_approved_by": None,
            }
        )
        return True

    async def approve_address(self, group_id: str, user_id: str, approver_id: str, approved_at: datetime) -> bool:
        key = (group_id, user_id)
        current = self._participations.get(key)
        if current is None or current.address_status != AddressStatus.PENDING:
            return False
        self._participations[key] = current.model_copy(
            update={
                "address_status": AddressStatus.APPROVED,
                "address_approved_at": approved_at,
                "address_approved_by": approver_id,
            }
        )
        return True

    async def list_participations(self, group_id: str) -> List[Participation]:
        return [p for (gid, _), p in self._participations.items() if gid == group_id]

    # ------------------------------------------------------------------
    # Wishes
    # ------------------------------------------------------------------
    async def get_wish(self, group_id: str, user_id: str) -> Optional[RecipientWish]:
        return self._wishes.get((group_id, user_id))

    async def submit_wish(
        self, group_id: str, user_id: str, event_id: str, wish_encrypted: str, set_at: datetime
    ) -> bool:
        key = (group_id, user_id)
        current = self._wishes.get(key)
        if current is not None and current.status == WishStatus.APPROVED:
            return False
        self._wishes[key] = RecipientWish(
            group_id=group_id,
            user_id=user_id,
            event_id=event_id,
            wish_encrypted=wish_encrypted,
            wish_set_at=set_at,
            status=WishStatus.PENDING,
        )
        return True

    async def approve_wish(self, group_id: str, user_id: str, approver_id: str, approved_at: datetime) -> bool:
        key = (group_id, user_id)
        current = self._wishes.get(key)
        if current is None or current.status != WishStatus.PENDING:
            return False
        self._wishes[key] = current.model_copy(
            update={"status": WishStatus.APPROVED, "approved_at": approved_at, "approved_by": approver_id}
        )
        return True

    async def list_wishes(self, group_id: str) -> List[RecipientWish]:
        return [w for (gid, _), w in self._wishes.items() if gid == group_id]

    # ------------------------------------------------------------------
    # Mappings
    # ------------------------------------------------------------------
    async def replace_mappings(self, group_id: str, event_id: str, mappings: Sequence[Mapping]) -> int:
        async with self._shuffle_lock:
            staged = {k: v for k, v in self._mappings.items() if not (k[0] == group_id and k[1] == event_id)}
            recipients = set()
            inserted = 0
            for mapping in mappings:
                key = (mapping.group_id, mapping.event_id, mapping.santa_id)
                recipient_key = (mapping.group_id, mapping.event_id, mapping.recipient_id)
                if key in staged or recipient_key in recipients:
                    logger.warning(
                        "Skipping duplicate mapping row",
                        group_id=group_id,
                        event_id=event_id,
                        santa_id=mapping.santa_id,
                    )
                    continue
                staged[key] = mapping
                recipients.add(recipient_key)
                inserted += 1
            # swap in one step so readers never see a partially replaced set
            self._mappings = staged
            return inserted

    async def list_mappings(self, group_id: str, event_id: str) -> List[Mapping]:
        return [m for (gid, eid, _), m in self._mappings.items() if gid == group_id and eid == event_id]

    async def get_mapping_for_santa(self, group_id: str, event_id: str, santa_id: str) -> Optional[Mapping]:
        return self._mappings.get((group_id, event_id, santa_id))

    async def list_mappings_for_recipient(self, group_id: str, event_id: str, recipient_id: str) -> List[Mapping]:
        return [m for m in await self.list_mappings(group_id, event_id) if m.recipient_id == recipient_id]

    # ------------------------------------------------------------------
    # Acknowledgements
    # ------------------------------------------------------------------
    async def create_acknowledgement(self, ack: Acknowledgement) -> None:
        key = (ack.group_id, ack.santa_id, ack.recipient_id)
        if key in self._acks:
            raise DuplicateRecordError(EntityType.ACKNOWLEDGEMENT.value, key)
        self._acks[key] = ack

    async def get_acknowledgement(self, group_id: str, santa_id: str, recipient_id: str) -> Optional[Acknowledgement]:
        return self._acks.get((group_id, santa_id, recipient_id))

    async def list_acknowledgements(self, group_id: str) -> List[Acknowledgement]:
        return [a for (gid, _, _), a in self._acks.items() if gid == group_id]

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------
    async def create_notification(self, record: NotificationRecord) -> None:
        self._notifications[record.notification_id] = record

    async def mark_notification_sent(self, notification_id: UUID, sent_at: datetime) -> None:
        record = self._notifications.get(notification_id)
        if record:
            self._notifications[notification_id] = record.model_copy(
                update={"status": NotificationStatus.SENT, "sent_at": sent_at}
            )

    async def mark_notification_failed(self, notification_id: UUID, error_message: str) -> None:
        record = self._notifications.get(notification_id)
        if record:
            self._notifications[notification_id] = record.model_copy(
                update={"status": NotificationStatus.FAILED, "error_message": error_message}
            )

    async def list_notifications(self, group_id: str) -> List[NotificationRecord]:
        return sorted(
            (n for n in self._notifications.values() if n.group_id == group_id),
            key=lambda n: n.created_at,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    async def health_check(self) -> bool:
        return True

    async def close(self) -> None:
        return None
