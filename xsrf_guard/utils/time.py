"""Clock helpers."""

from __future__ import annotations

import time
from typing import Callable

Clock = Callable[[], int]


def unix_now() -> int:
    """Return whole seconds since the Unix epoch."""
    return int(time.time())
