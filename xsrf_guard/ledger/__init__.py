"""Replay ledgers for single-use token tracking."""

from __future__ import annotations

import os
from typing import Union

from .base import AsyncReplayLedger, ReplayLedger
from .memory import InMemoryReplayLedger

__all__ = [
    "ReplayLedger",
    "AsyncReplayLedger",
    "InMemoryReplayLedger",
    "PostgresReplayLedger",
    "create_ledger_from_env",
]


def __getattr__(name: str):
    if name == "PostgresReplayLedger":
        from .postgres import PostgresReplayLedger

        return PostgresReplayLedger
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def create_ledger_from_env() -> Union[ReplayLedger, AsyncReplayLedger]:
    """Create a Postgres ledger if a DSN is configured, otherwise in-memory."""
    dsn = os.getenv("XSRF_GUARD_PG_DSN") or os.getenv("DATABASE_URL")
    if dsn:
        from .postgres import PostgresReplayLedger

        return PostgresReplayLedger(dsn=dsn)
    return InMemoryReplayLedger()
