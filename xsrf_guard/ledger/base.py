"""Replay ledger interfaces.

A ledger records, per session, the signatures of tokens that already passed
validation. Each entry carries the Unix time after which its token would be
rejected as expired anyway, so entries past that point can be dropped.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class ReplayLedger(ABC):
    """Synchronous per-session store of used token signatures."""

    @abstractmethod
    def contains(self, session_id: str, signature: str) -> bool:
        """Return True if the signature was already used in this session."""

    @abstractmethod
    def insert(self, session_id: str, signature: str, expires_at: int) -> None:
        """Record a signature as used."""

    @abstractmethod
    def claim(self, session_id: str, signature: str, expires_at: int, now: int) -> bool:
        """Atomically record an unused signature.

        Entries that expired before ``now`` may be pruned first. Return True if
        the signature was recorded now, False if it was already present.
        """

    @abstractmethod
    def prune(self, now: int) -> int:
        """Drop entries that expired before ``now``; return how many."""

    @abstractmethod
    def end_session(self, session_id: str) -> None:
        """Forget every signature recorded for a session."""


class AsyncReplayLedger(ABC):
    """Coroutine flavour of :class:`ReplayLedger` for shared backends."""

    @abstractmethod
    async def contains(self, session_id: str, signature: str) -> bool:
        """Return True if the signature was already used in this session."""

    @abstractmethod
    async def insert(self, session_id: str, signature: str, expires_at: int) -> None:
        """Record a signature as used."""

    @abstractmethod
    async def claim(self, session_id: str, signature: str, expires_at: int, now: int) -> bool:
        """Atomically record an unused signature; False if already present."""

    @abstractmethod
    async def prune(self, now: int) -> int:
        """Drop entries that expired before ``now``; return how many."""

    @abstractmethod
    async def end_session(self, session_id: str) -> None:
        """Forget every signature recorded for a session."""

    async def close(self) -> None:
        """Close backend resources if needed."""
