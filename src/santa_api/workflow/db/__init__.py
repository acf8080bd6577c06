"""
Workflow Database Module

Store implementations for the exchange workflow:
- DomainDBPool: asyncpg pool with schema bootstrap
- PostgresStore: repositories over the pool
- MemoryStore: process-local store for development and tests
"""

from santa_api.workflow.db.memory import MemoryStore
from santa_api.workflow.db.pool import DomainDBPool
from santa_api.workflow.db.postgres import PostgresStore
from santa_api.workflow.db.store import WorkflowStore

__all__ = [
    "DomainDBPool",
    "MemoryStore",
    "PostgresStore",
    "WorkflowStore",
]
