"""
Participation and Wish Repositories

The two approval tracks. Every status change is a conditional UPDATE so a
transition only happens from the expected source state.
"""

from datetime import datetime
from typing import List
from typing import Optional

import asyncpg

from santa_api.workflow.db.repository_base import BaseRepository
from santa_api.workflow.models import Participation
from santa_api.workflow.models import RecipientWish


class ParticipationRepository(BaseRepository):
    """Address track: NONE -> PENDING -> APPROVED."""

    model = Participation

    def __init__(self, pool: asyncpg.Pool):
        super().__init__(pool, "participations")

    async def ensure(self, group_id: str, user_id: str, event_id: str) -> None:
        await self._execute(
            f"""
            INSERT INTO {self.qualified_table} (group_id, user_id, event_id)
            VALUES ($1, $2, $3)
            ON CONFLICT (group_id, user_id) DO NOTHING
            """,
            group_id,
            user_id,
            event_id,
        )

    async def get(self, group_id: str, user_id: str) -> Optional[Participation]:
        return await self._fetch_one(
            f"SELECT * FROM {self.qualified_table} WHERE group_id = $1 AND user_id = $2",
            group_id,
            user_id,
        )

    async def submit_address(
        self, group_id: str, user_id: str, address_encrypted: str, submitted_at: datetime
    ) -> bool:
        """Overwrite the address and reset to PENDING unless already APPROVED."""
        count = await self._execute(
            f"""
            UPDATE {self.qualified_table}
            SET submitted = TRUE,
                address_encrypted = $3,
                address_submitted_at = $4,
                address_status = 'PENDING',
                address_approved_at = NULL,
                address_approved_by = NULL
            WHERE group_id = $1 AND user_id = $2 AND address_status <> 'APPROVED'
            """,
            group_id,
            user_id,
            address_encrypted,
            submitted_at,
        )
        return count == 1

    async def approve_address(self, group_id: str, user_id: str, approver_id: str, approved_at: datetime) -> bool:
        count = await self._execute(
            f"""
            UPDATE {self.qualified_table}
            SET address_status = 'APPROVED', address_approved_at = $3, address_approved_by = $4
            WHERE group_id = $1 AND user_id = $2 AND address_status = 'PENDING'
            """,
            group_id,
            user_id,
            approved_at,
            approver_id,
        )
        return count == 1

    async def list_for_group(self, group_id: str) -> List[Participation]:
        return await self._fetch_all(f"SELECT * FROM {self.qualified_table} WHERE group_id = $1", group_id)


class WishRepository(BaseRepository):
    """Wish track: (absent) -> PENDING -> APPROVED."""

    model = RecipientWish

    def __init__(self, pool: asyncpg.Pool):
        super().__init__(pool, "recipient_wishes")

    async def get(self, group_id: str, user_id: str) -> Optional[RecipientWish]:
        return await self._fetch_one(
            f"SELECT * FROM {self.qualified_table} WHERE group_id = $1 AND user_id = $2",
            group_id,
            user_id,
        )

    async def submit(self, group_id: str, user_id: str, event_id: str, wish_encrypted: str, set_at: datetime) -> bool:
        """Upsert the wish as PENDING. An APPROVED row is left untouched."""
        count = await self._execute(
            f"""
            INSERT INTO {self.qualified_table} AS w
                (group_id, user_id, event_id, wish_encrypted, wish_set_at, status)
            VALUES ($1, $2, $3, $4, $5, 'PENDING')
            ON CONFLICT (group_id, user_id) DO UPDATE
            SET wish_encrypted = EXCLUDED.wish_encrypted,
                wish_set_at = EXCLUDED.wish_set_at,
                status = 'PENDING',
                approved_at = NULL,
                approved_by = NULL
            WHERE w.status <> 'APPROVED'
            """,
            group_id,
            user_id,
            event_id,
            wish_encrypted,
            set_at,
        )
        return count == 1

    async def approve(self, group_id: str, user_id: str, approver_id: str, approved_at: datetime) -> bool:
        count = await self._execute(
            f"""
            UPDATE {self.qualified_table}
            SET status = 'APPROVED', approved_at = $3, approved_by = $4
            WHERE group_id = $1 AND user_id = $2 AND status = 'PENDING'
            """,
            group_id,
            user_id,
            approved_at,
            approver_id,
        )
        return count == 1

    async def list_for_group(self, group_id: str) -> List[RecipientWish]:
        return await self._fetch_all(f"SELECT * FROM {self.qualified_table} WHERE group_id = $1", group_id)
