"""In-process replay ledger."""

from __future__ import annotations

import threading
from typing import Dict

from .base import ReplayLedger


class InMemoryReplayLedger(ReplayLedger):
    """Thread-safe ledger kept in process memory.

    Suitable for a single server process. Sessions are created lazily on the
    first recorded signature. A claim prunes only its own session; call
    ``prune`` periodically to sweep sessions that went quiet.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.sessions: Dict[str, Dict[str, int]] = {}

    def contains(self, session_id: str, signature: str) -> bool:
        with self._lock:
            return signature in self.sessions.get(session_id, {})

    def insert(self, session_id: str, signature: str, expires_at: int) -> None:
        with self._lock:
            self.sessions.setdefault(session_id, {})[signature] = expires_at

    def claim(self, session_id: str, signature: str, expires_at: int, now: int) -> bool:
        with self._lock:
            used = self.sessions.setdefault(session_id, {})
            for sig in [sig for sig, exp in used.items() if exp < now]:
                del used[sig]
            if signature in used:
                return False
            used[signature] = expires_at
            return True

    def prune(self, now: int) -> int:
        with self._lock:
            return self._prune_locked(now)

    def end_session(self, session_id: str) -> None:
        with self._lock:
            self.sessions.pop(session_id, None)

    def _prune_locked(self, now: int) -> int:
        removed = 0
        for session_id in list(self.sessions):
            used = self.sessions[session_id]
            expired = [sig for sig, exp in used.items() if exp < now]
            for sig in expired:
                used.pop(sig, None)
            removed += len(expired)
            if not used:
                self.sessions.pop(session_id, None)
        return removed
