"""Anti-forgery token datatypes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional


class ValidationResult(IntEnum):
    """Outcome of a single validation. ``SUCCESS`` is the only passing value."""

    SUCCESS = 0
    INVALID = 1
    EXPIRED = 2
    MISSING = 3
    REUSED = 4


@dataclass(frozen=True)
class IssuedToken:
    token: str
    signature: str
    issued_at: int


@dataclass(frozen=True)
class VerificationResult:
    """Result code plus an operator-facing diagnostic.

    ``message`` may help an attacker refine a forgery; log it, do not show it
    to the requester.
    """

    result: ValidationResult
    reason: str
    message: Optional[str] = None

    @property
    def valid(self) -> bool:
        return self.result is ValidationResult.SUCCESS
