"""Exceptions raised for setup mistakes.

Rejected tokens are never reported through exceptions; see
:class:`xsrf_guard.token.types.VerificationResult`.
"""

from __future__ import annotations


class MisconfiguredError(RuntimeError):
    """The guard cannot operate safely with its current configuration."""
