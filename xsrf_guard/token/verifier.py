"""Anti-forgery token verification with optional replay protection."""

from __future__ import annotations

import hmac
import logging
from collections.abc import Mapping
from typing import Any, Optional, Tuple, Union

from ..config import GuardConfig
from ..errors import MisconfiguredError
from ..ledger.base import AsyncReplayLedger, ReplayLedger
from ..utils.time import Clock, unix_now
from .codec import build_payload, decode_token, sign, split_token
from .types import IssuedToken, ValidationResult, VerificationResult

logger = logging.getLogger(__name__)

AnyLedger = Union[ReplayLedger, AsyncReplayLedger]

SUCCESS = VerificationResult(ValidationResult.SUCCESS, "ok")


def _reject(result: ValidationResult, reason: str, message: str) -> VerificationResult:
    logger.warning("XSRF validation failed: %s (%s)", message, reason)
    return VerificationResult(result, reason, message)


class TokenVerifier:
    """Run the validation pipeline against a request's field mapping.

    Checks run in a fixed order and the first failure wins: key, request,
    token presence, base64, structure, signature, expiry, then replay. Expiry
    and replay are only reported for tokens whose signature checked out.
    """

    def __init__(self, config: GuardConfig, *, clock: Clock = unix_now) -> None:
        self.config = config
        self._clock = clock

    def verify(
        self,
        fields: Any,
        *,
        now: Optional[int] = None,
        ledger: Optional[ReplayLedger] = None,
        session_id: Optional[str] = None,
    ) -> VerificationResult:
        if self.config.stateful and isinstance(ledger, AsyncReplayLedger):
            raise TypeError("Async replay ledgers require verify_async().")
        current = self._clock() if now is None else int(now)
        rejected, token = self._authenticate(fields, current, ledger, session_id)
        if rejected is not None:
            return rejected

        assert token is not None
        if self.config.stateful:
            assert ledger is not None and session_id is not None
            if not ledger.claim(session_id, token.signature, token.issued_at + self.config.max_age, current):
                return _reject(ValidationResult.REUSED, "token_reused", "Token has already been used")
        return SUCCESS

    async def verify_async(
        self,
        fields: Any,
        *,
        now: Optional[int] = None,
        ledger: Optional[AnyLedger] = None,
        session_id: Optional[str] = None,
    ) -> VerificationResult:
        current = self._clock() if now is None else int(now)
        rejected, token = self._authenticate(fields, current, ledger, session_id)
        if rejected is not None:
            return rejected

        assert token is not None
        if self.config.stateful:
            assert ledger is not None and session_id is not None
            expires_at = token.issued_at + self.config.max_age
            if isinstance(ledger, AsyncReplayLedger):
                claimed = await ledger.claim(session_id, token.signature, expires_at, current)
            else:
                claimed = ledger.claim(session_id, token.signature, expires_at, current)
            if not claimed:
                return _reject(ValidationResult.REUSED, "token_reused", "Token has already been used")
        return SUCCESS

    def _authenticate(
        self,
        fields: Any,
        now: int,
        ledger: Optional[AnyLedger],
        session_id: Optional[str],
    ) -> Tuple[Optional[VerificationResult], Optional[IssuedToken]]:
        config = self.config
        if not config.has_key:
            logger.error("XSRF validation failed: No secret key has been set")
            return VerificationResult(ValidationResult.INVALID, "no_secret_key", "No secret key has been set"), None

        assert config.secret_key is not None
        if config.stateful and (ledger is None or session_id is None):
            raise MisconfiguredError("Stateful validation needs a replay ledger and a session id.")

        if not isinstance(fields, Mapping):
            return _reject(ValidationResult.MISSING, "missing_request", "Missing request array"), None

        value = fields.get(config.field_name)
        if value is None:
            return _reject(ValidationResult.MISSING, "missing_token", "Missing token"), None

        decoded = decode_token(value) if isinstance(value, (str, bytes)) else None
        if decoded is None:
            return _reject(ValidationResult.INVALID, "token_decode_failed", "Undecodable token data"), None

        parts = split_token(decoded)
        if parts is None:
            return _reject(ValidationResult.INVALID, "malformed_token", "Broken token data"), None

        supplied_sig, timestamp = parts
        # The claimed timestamp is signed verbatim, so "01000" and "1000" differ.
        expected_sig = sign(config.secret_key, build_payload(timestamp, config.context_url, config.user_data))
        if not hmac.compare_digest(supplied_sig, expected_sig.encode("ascii")):
            return _reject(ValidationResult.INVALID, "invalid_signature", "Invalid token"), None

        issued_at = int(timestamp)
        if issued_at < now - config.max_age:
            return _reject(ValidationResult.EXPIRED, "token_expired", "Token has expired"), None

        raw = value if isinstance(value, str) else value.decode("ascii")
        token = IssuedToken(token=raw, signature=expected_sig, issued_at=issued_at)
        return None, token
