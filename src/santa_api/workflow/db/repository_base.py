"""
Base Repository

Base class providing row-to-model helpers for all repositories.
Concrete repositories inherit from this class and add their own queries.
"""

from enum import Enum
from typing import Any
from typing import List
from typing import Optional
from typing import Type
from typing import TypeVar

import asyncpg
from loguru import logger
from pydantic import BaseModel

from santa_api.workflow.exceptions import DuplicateRecordError

ModelT = TypeVar("ModelT", bound=BaseModel)


def affected_rows(status: str) -> int:
    """Parse the row count from an asyncpg command status such as ``UPDATE 1``."""
    try:
        return int(status.split()[-1])
    except (AttributeError, IndexError, ValueError):
        return 0


class BaseRepository:
    """
    Base repository with common fetch/insert operations.

    All concrete repositories (GroupRepository, WishRepository, etc.) inherit from this.
    """

    model: Type[BaseModel]

    def __init__(self, pool: asyncpg.Pool, table_name: str):
        """
        Initialize base repository.

        Args:
            pool: asyncpg connection pool (or DomainDBPool)
            table_name: Database table name (without schema prefix)
        """
        self.pool = pool
        self.table = table_name

    @property
    def qualified_table(self) -> str:
        return f"santa.{self.table}"

    async def _fetch_one(self, query: str, *args: Any) -> Optional[Any]:
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(query, *args)
        return self.model.model_validate(dict(row)) if row else None

    async def _fetch_all(self, query: str, *args: Any) -> List[Any]:
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(query, *args)
        return [self.model.model_validate(dict(row)) for row in rows]

    async def _execute(self, query: str, *args: Any) -> int:
        """Run a write and return the number of affected rows."""
        async with self.pool.acquire() as conn:
            status = await conn.execute(query, *args)
        return affected_rows(status)

    async def _insert(self, record: ModelT, key: tuple) -> None:
        """
        Insert a model as a row, one column per field.

        Raises:
            DuplicateRecordError: A unique constraint rejected the row
        """
        data = record.model_dump()
        columns = ", ".join(data.keys())
        placeholders = ", ".join(f"${i}" for i in range(1, len(data) + 1))
        values = [v.value if isinstance(v, Enum) else v for v in data.values()]

        try:
            async with self.pool.acquire() as conn:
                await conn.execute(
                    f"INSERT INTO {self.qualified_table} ({columns}) VALUES ({placeholders})",
                    *values,
                )
        except asyncpg.UniqueViolationError as e:
            logger.debug(f"Unique violation on {self.table}: {getattr(e, 'constraint_name', None)}")
            raise DuplicateRecordError(self.table, key) from e
