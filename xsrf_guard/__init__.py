"""xsrf-guard package.

Stateless anti-forgery tokens for HTML form submissions, with optional
single-use tracking per session.
"""

import logging

from .config import GuardConfig
from .errors import MisconfiguredError
from .guard import TokenGuard
from .token.types import IssuedToken, ValidationResult, VerificationResult

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "TokenGuard",
    "GuardConfig",
    "MisconfiguredError",
    "IssuedToken",
    "ValidationResult",
    "VerificationResult",
]
