"""
Mapping and Acknowledgement Repositories

Shuffle output and the santas' gift-sent confirmations.
"""

from typing import List
from typing import Optional
from typing import Sequence

import asyncpg
from loguru import logger

from santa_api.workflow.db.repository_base import BaseRepository
from santa_api.workflow.db.repository_base import affected_rows
from santa_api.workflow.models import Acknowledgement
from santa_api.workflow.models import Mapping


class MappingRepository(BaseRepository):
    """Mapping repository. Unique on (group, event, santa) and (group, event, recipient)."""

    model = Mapping

    def __init__(self, pool: asyncpg.Pool):
        super().__init__(pool, "mappings")

    async def replace(self, group_id: str, event_id: str, mappings: Sequence[Mapping]) -> int:
        """
        Delete the existing (group, event) mappings and insert the new set.

        Runs in one transaction. Rows colliding with a unique key are skipped.

        Returns:
            Number of rows actually inserted
        """
        inserted = 0
        async with self.pool.acquire() as conn:
            async with conn.transaction():
                deleted = await conn.execute(
                    f"DELETE FROM {self.qualified_table} WHERE group_id = $1 AND event_id = $2",
                    group_id,
                    event_id,
                )
                logger.debug(f"Cleared {affected_rows(deleted)} previous mappings", group_id=group_id)

                for mapping in mappings:
                    status = await conn.execute(
                        f"""
                        INSERT INTO {self.qualified_table} (group_id, event_id, santa_id, recipient_id)
                        VALUES ($1, $2, $3, $4)
                        ON CONFLICT DO NOTHING
                        """,
                        mapping.group_id,
                        mapping.event_id,
                        mapping.santa_id,
                        mapping.recipient_id,
                    )
                    inserted += affected_rows(status)
        return inserted

    async def list_for_event(self, group_id: str, event_id: str) -> List[Mapping]:
        return await self._fetch_all(
            f"SELECT * FROM {self.qualified_table} WHERE group_id = $1 AND event_id = $2",
            group_id,
            event_id,
        )

    async def get_for_santa(self, group_id: str, event_id: str, santa_id: str) -> Optional[Mapping]:
        return await self._fetch_one(
            f"SELECT * FROM {self.qualified_table} WHERE group_id = $1 AND event_id = $2 AND santa_id = $3",
            group_id,
            event_id,
            santa_id,
        )

    async def list_for_recipient(self, group_id: str, event_id: str, recipient_id: str) -> List[Mapping]:
        return await self._fetch_all(
            f"SELECT * FROM {self.qualified_table} WHERE group_id = $1 AND event_id = $2 AND recipient_id = $3",
            group_id,
            event_id,
            recipient_id,
        )


class AcknowledgementRepository(BaseRepository):
    """Acknowledgement repository (insert-only)."""

    model = Acknowledgement

    def __init__(self, pool: asyncpg.Pool):
        super().__init__(pool, "acknowledgements")

    async def create(self, ack: Acknowledgement) -> None:
        await self._insert(ack, (ack.group_id, ack.santa_id, ack.recipient_id))

    async def get(self, group_id: str, santa_id: str, recipient_id: str) -> Optional[Acknowledgement]:
        return await self._fetch_one(
            f"SELECT * FROM {self.qualified_table} WHERE group_id = $1 AND santa_id = $2 AND recipient_id = $3",
            group_id,
            santa_id,
            recipient_id,
        )

    async def list_for_group(self, group_id: str) -> List[Acknowledgement]:
        return await self._fetch_all(
            f"SELECT * FROM {self.qualified_table} WHERE group_id = $1 ORDER BY sent_at",
            group_id,
        )
