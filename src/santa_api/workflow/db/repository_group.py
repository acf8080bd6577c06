"""
Group Repository

Repository for exchange groups and their memberships.
"""

from typing import List
from typing import Optional

import asyncpg

from santa_api.workflow.db.repository_base import BaseRepository
from santa_api.workflow.models import Group
from santa_api.workflow.models import Membership


class GroupRepository(BaseRepository):
    """Group repository. Unique on join_code and (owner_id, name)."""

    model = Group

    def __init__(self, pool: asyncpg.Pool):
        super().__init__(pool, "groups")

    async def create(self, group: Group) -> None:
        await self._insert(group, (group.owner_id, group.name, group.join_code))

    async def get(self, group_id: str) -> Optional[Group]:
        return await self._fetch_one(f"SELECT * FROM {self.qualified_table} WHERE group_id = $1", group_id)

    async def get_by_join_code(self, join_code: str) -> Optional[Group]:
        return await self._fetch_one(f"SELECT * FROM {self.qualified_table} WHERE join_code = $1", join_code)

    async def get_by_owner_and_name(self, owner_id: str, name: str) -> Optional[Group]:
        return await self._fetch_one(
            f"SELECT * FROM {self.qualified_table} WHERE owner_id = $1 AND name = $2",
            owner_id,
            name,
        )

    async def list_all(self) -> List[Group]:
        return await self._fetch_all(f"SELECT * FROM {self.qualified_table} ORDER BY created_at")

    async def list_for_user(self, user_id: str) -> List[Group]:
        return await self._fetch_all(
            f"""
            SELECT g.*
            FROM {self.qualified_table} g
            JOIN santa.memberships m ON m.group_id = g.group_id
            WHERE m.user_id = $1
            ORDER BY g.created_at
            """,
            user_id,
        )


class MembershipRepository(BaseRepository):
    """Membership repository. Unique on (group_id, user_id)."""

    model = Membership

    def __init__(self, pool: asyncpg.Pool):
        super().__init__(pool, "memberships")

    async def add(self, membership: Membership) -> None:
        await self._insert(membership, (membership.group_id, membership.user_id))

    async def get(self, group_id: str, user_id: str) -> Optional[Membership]:
        return await self._fetch_one(
            f"SELECT * FROM {self.qualified_table} WHERE group_id = $1 AND user_id = $2",
            group_id,
            user_id,
        )

    async def list_for_group(self, group_id: str) -> List[Membership]:
        return await self._fetch_all(
            f"SELECT * FROM {self.qualified_table} WHERE group_id = $1 ORDER BY joined_at",
            group_id,
        )
