"""Transaction Discipline — hierarchy write lock and consistent read snapshots.

Invariants:
    - Every parent-pointer write or team delete runs inside hierarchy_write_lock(),
      and the caller loads the team snapshot AFTER entering it
    - The lock is held until the caller commits or rolls back: two concurrent
      reparents can never both validate against the same pre-write snapshot
    - A hierarchy read loads teams and memberships inside one transaction

Design Decisions:
    - Single-writer lock instead of SERIALIZABLE + retry: hierarchy writes are rare,
      and a retry loop would re-run validation the user already saw fail
    - pg_advisory_xact_lock on PostgreSQL (released by the database at commit/rollback,
      works across worker processes) plus a process-local asyncio.Lock so the
      same discipline holds on SQLite in tests and single-process deployments
    - REPEATABLE READ for reads on PostgreSQL: one snapshot for every statement of the render
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from teamboard.config import get_settings

logger = logging.getLogger(__name__)

_process_lock = asyncio.Lock()


def _dialect_name(db: AsyncSession) -> str:
    return db.get_bind().dialect.name


@asynccontextmanager
async def hierarchy_write_lock(db: AsyncSession) -> AsyncGenerator[None, None]:
    """Serialize hierarchy mutations. Commit (or roll back) before leaving the block."""
    async with _process_lock:
        if _dialect_name(db) == "postgresql":
            await db.execute(
                text("SELECT pg_advisory_xact_lock(:key)"),
                {"key": get_settings().hierarchy_lock_key},
            )
        try:
            yield
        finally:
            if db.in_transaction():
                # caller left without committing: release the advisory lock
                await db.rollback()


async def begin_snapshot_read(db: AsyncSession) -> None:
    """Pin the transaction to one snapshot before the first read query."""
    if db.in_transaction():
        return
    if _dialect_name(db) == "postgresql":
        await db.connection(
            execution_options={"isolation_level": "REPEATABLE READ"},
        )
