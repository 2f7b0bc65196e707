"""Guard configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional, Union

DEFAULT_FIELD_NAME = "__xsrfprotect_tok"
DEFAULT_MAX_AGE = 3600

_TRUTHY = {"1", "true", "yes", "on"}


def _as_key(key: Union[str, bytes, None]) -> Optional[bytes]:
    if key is None or isinstance(key, bytes):
        return key
    return key.encode("utf-8")


@dataclass(frozen=True)
class GuardConfig:
    """Settings bound into every token.

    ``secret_key`` is shared by every frontend that must accept the same
    tokens. ``context_url`` and ``user_data`` are optional binding fields and
    must be reproducible at validation time.
    """

    secret_key: Optional[bytes] = None
    context_url: Optional[str] = None
    user_data: Optional[str] = None
    max_age: int = DEFAULT_MAX_AGE
    stateful: bool = False
    field_name: str = DEFAULT_FIELD_NAME

    def __post_init__(self) -> None:
        object.__setattr__(self, "secret_key", _as_key(self.secret_key))
        if self.max_age < 0:
            raise ValueError(f"max_age must be >= 0, got {self.max_age}.")
        if not self.field_name:
            raise ValueError("field_name must be a non-empty string.")

    @property
    def has_key(self) -> bool:
        return bool(self.secret_key)

    @classmethod
    def from_env(cls) -> "GuardConfig":
        """Build a configuration from ``XSRF_GUARD_*`` environment variables."""
        max_age = os.getenv("XSRF_GUARD_MAX_AGE")
        stateful = os.getenv("XSRF_GUARD_STATEFUL", "")
        return cls(
            secret_key=os.getenv("XSRF_GUARD_SECRET") or None,
            context_url=os.getenv("XSRF_GUARD_CONTEXT_URL"),
            user_data=os.getenv("XSRF_GUARD_USER_DATA"),
            max_age=int(max_age) if max_age else DEFAULT_MAX_AGE,
            stateful=stateful.strip().lower() in _TRUTHY,
            field_name=os.getenv("XSRF_GUARD_FIELD_NAME") or DEFAULT_FIELD_NAME,
        )
