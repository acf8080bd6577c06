"""
Notification Repository

Repository for notification operations (append-only table).
"""

from datetime import datetime
from typing import List
from uuid import UUID

import asyncpg

from santa_api.workflow.db.repository_base import BaseRepository
from santa_api.workflow.models import NotificationRecord


class NotificationRepository(BaseRepository):
    """Notification repository (append-only)."""

    model = NotificationRecord

    def __init__(self, pool: asyncpg.Pool):
        super().__init__(pool, "notifications")

    async def create(self, record: NotificationRecord) -> None:
        """Create a new notification (PENDING status)."""
        await self._insert(record, (record.notification_id,))

    async def mark_sent(self, notification_id: UUID, sent_at: datetime) -> None:
        """Mark notification as SENT."""
        await self._execute(
            f"""
            UPDATE {self.qualified_table}
            SET status = 'SENT', sent_at = $2
            WHERE notification_id = $1
            """,
            notification_id,
            sent_at,
        )

    async def mark_failed(self, notification_id: UUID, error_message: str) -> None:
        """Mark notification as FAILED."""
        await self._execute(
            f"""
            UPDATE {self.qualified_table}
            SET status = 'FAILED', error_message = $2
            WHERE notification_id = $1
            """,
            notification_id,
            error_message,
        )

    async def list_for_group(self, group_id: str) -> List[NotificationRecord]:
        return await self._fetch_all(
            f"SELECT * FROM {self.qualified_table} WHERE group_id = $1 ORDER BY created_at",
            group_id,
        )
