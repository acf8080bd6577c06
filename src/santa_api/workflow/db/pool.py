"""
Workflow Domain Database Connection Pool

Manages the asyncpg connection pool for the exchange domain database.
Automatically creates the schema on initialization.

Schema Evolution:
-----------------
When adding/removing/renaming tables in schema.sql:
1. Update the schema.sql file with new DDL
2. Update DomainDBPool.EXPECTED_TABLES constant with new table names
3. For existing deployments, drop and recreate the schema:
   DROP SCHEMA santa CASCADE;
   (then restart app to auto-create)
"""

from pathlib import Path
from typing import Optional

import asyncpg
from loguru import logger

SCHEMA_NAME = "santa"


class DomainDBPool:
    """Exchange domain database connection pool manager."""

    # Update this set when schema evolves (add/remove/rename tables)
    EXPECTED_TABLES = {
        "groups",
        "memberships",
        "participations",
        "recipient_wishes",
        "mappings",
        "acknowledgements",
        "notifications",
    }

    def __init__(self, connection_string: str):
        """
        Initialize domain DB pool.

        Args:
            connection_string: PostgreSQL connection string for the domain database
        """
        self.connection_string = connection_string
        self.pool: Optional[asyncpg.Pool] = None
        self._pool_initialized = False

    async def initialize(self) -> None:
        """Create the pool, validate it and run migrations."""
        if self._pool_initialized and self.pool is not None:
            logger.debug("Domain DB pool already initialized")
            return

        try:
            logger.info("Initializing exchange domain database pool")

            self.pool = await asyncpg.create_pool(
                self.connection_string,
                min_size=2,
                max_size=10,
                command_timeout=60,
                timeout=15,
                max_cached_statement_lifetime=0,  # DDL runs on the same pool
            )

            async with self.pool.acquire() as conn:
                result = await conn.fetchval("SELECT 1")
                if result != 1:
                    raise RuntimeError("Pool validation query failed")

            logger.info("Domain DB pool validated")

            await self._run_migrations()

            self._pool_initialized = True
            logger.success("Exchange domain database initialized successfully")

        except Exception as e:
            logger.error(f"Failed to initialize domain DB pool: {e}")
            if self.pool:
                await self.pool.close()
                self.pool = None
            raise

    async def _existing_tables(self, conn) -> set:
        rows = await conn.fetch(
            """
            SELECT table_name
            FROM information_schema.tables
            WHERE table_schema = $1
            ORDER BY table_name
            """,
            SCHEMA_NAME,
        )
        return {row["table_name"] for row in rows}

    async def _run_migrations(self) -> None:
        """
        Execute schema.sql when the santa schema is absent.

        An existing schema must contain exactly EXPECTED_TABLES; anything else
        needs manual intervention.
        """
        async with self.pool.acquire() as conn:
            schema_exists = await conn.fetchval(
                "SELECT EXISTS (SELECT 1 FROM information_schema.schemata WHERE schema_name = $1)",
                SCHEMA_NAME,
            )

            if schema_exists:
                existing_tables = await self._existing_tables(conn)
                if existing_tables == self.EXPECTED_TABLES:
                    logger.info(f"Santa schema and all {len(existing_tables)} expected tables exist")
                    return

                missing_tables = self.EXPECTED_TABLES - existing_tables
                extra_tables = existing_tables - self.EXPECTED_TABLES
                logger.error(
                    f"Schema mismatch detected. Missing: {missing_tables or 'None'}, "
                    f"Extra: {extra_tables or 'None'}. "
                    f"Drop the schema and restart: DROP SCHEMA {SCHEMA_NAME} CASCADE;"
                )
                raise RuntimeError(
                    f"Schema mismatch: missing {missing_tables}, extra {extra_tables}. Manual migration required."
                )

            logger.info("Santa schema not found - running migrations")

            schema_path = Path(__file__).parent / "schema.sql"
            if not schema_path.exists():
                raise FileNotFoundError(f"schema.sql not found at {schema_path}")

            async with conn.transaction():
                await conn.execute(schema_path.read_text())

            existing_tables = await self._existing_tables(conn)
            if existing_tables != self.EXPECTED_TABLES:
                raise RuntimeError(
                    f"Migration incomplete: expected {sorted(self.EXPECTED_TABLES)}, found {sorted(existing_tables)}"
                )

            logger.success(f"All {len(self.EXPECTED_TABLES)} exchange tables verified successfully")

    async def close(self) -> None:
        """Close the connection pool gracefully."""
        if self.pool:
            logger.info("Closing exchange domain database pool")
            await self.pool.close()
            self.pool = None
            self._pool_initialized = False
            logger.info("Domain DB pool closed")

    def acquire(self):
        """
        Acquire a database connection from the pool.

        Usage:
            async with pool.acquire() as conn:
                result = await conn.fetchrow("SELECT * FROM ...")
        """
        if not self.pool:
            raise RuntimeError("Domain DB pool not initialized - call initialize() first")
        return self.pool.acquire()

    async def health_check(self) -> bool:
        """Return True when a trivial query succeeds."""
        try:
            if not self.pool:
                return False

            async with self.pool.acquire() as conn:
                result = await conn.fetchval("SELECT 1")
                return result == 1
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            logger.error(f"Domain DB health check failed: {e}")
            return False
