"""PostgreSQL-backed replay ledger shared by several frontends."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import asyncpg

from .base import AsyncReplayLedger

logger = logging.getLogger(__name__)

CREATE_SQL = """
CREATE TABLE IF NOT EXISTS xsrf_used_tokens (
    session_id TEXT NOT NULL,
    signature TEXT NOT NULL,
    expires_at BIGINT NOT NULL,
    PRIMARY KEY (session_id, signature)
)
"""

CLAIM_SQL = """
INSERT INTO xsrf_used_tokens (session_id, signature, expires_at)
VALUES ($1, $2, $3)
ON CONFLICT (session_id, signature) DO NOTHING
RETURNING signature
"""

PRUNE_SQL = "DELETE FROM xsrf_used_tokens WHERE expires_at < $1"


class PostgresReplayLedger(AsyncReplayLedger):
    """Ledger stored in PostgreSQL using ``asyncpg``.

    ``claim`` is a single ``INSERT ... ON CONFLICT DO NOTHING`` so two
    requests racing on the same signature cannot both succeed. The table is
    created on first connect from a DSN; an injected pool must already have it.
    """

    def __init__(
        self,
        dsn: Optional[str] = None,
        *,
        pool: Optional[asyncpg.Pool] = None,
        min_size: int = 1,
        max_size: int = 4,
    ) -> None:
        self._dsn = dsn
        self._pool = pool
        self._min_size = min_size
        self._max_size = max_size
        self._connect_lock = asyncio.Lock()

    async def connect(self) -> None:
        """Initialize a connection pool and the table if needed."""
        if self._pool is not None:
            return
        if not self._dsn:
            raise ValueError("Either `dsn` or `pool` must be provided for PostgresReplayLedger.")

        async with self._connect_lock:
            if self._pool is not None:
                return
            pool = await asyncpg.create_pool(dsn=self._dsn, min_size=self._min_size, max_size=self._max_size)
            async with pool.acquire() as conn:
                await conn.execute(CREATE_SQL)
            self._pool = pool

    async def contains(self, session_id: str, signature: str) -> bool:
        await self.connect()
        assert self._pool is not None
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT 1 FROM xsrf_used_tokens WHERE session_id=$1 AND signature=$2",
                session_id,
                signature,
            )
            return row is not None

    async def insert(self, session_id: str, signature: str, expires_at: int) -> None:
        await self.connect()
        assert self._pool is not None
        async with self._pool.acquire() as conn:
            await conn.execute(CLAIM_SQL, session_id, signature, expires_at)

    async def claim(self, session_id: str, signature: str, expires_at: int, now: int) -> bool:
        await self.connect()
        assert self._pool is not None
        async with self._pool.acquire() as conn:
            async with conn.transaction():
                await conn.execute(PRUNE_SQL, now)
                row = await conn.fetchrow(CLAIM_SQL, session_id, signature, expires_at)
                return row is not None

    async def prune(self, now: int) -> int:
        await self.connect()
        assert self._pool is not None
        async with self._pool.acquire() as conn:
            status = await conn.execute(PRUNE_SQL, now)
        removed = int(status.split()[-1]) if status else 0
        logger.debug("Pruned %d expired XSRF ledger entries", removed)
        return removed

    async def end_session(self, session_id: str) -> None:
        await self.connect()
        assert self._pool is not None
        async with self._pool.acquire() as conn:
            await conn.execute("DELETE FROM xsrf_used_tokens WHERE session_id=$1", session_id)

    async def close(self) -> None:
        """Close the underlying pool if it exists."""
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
