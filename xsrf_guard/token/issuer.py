"""HMAC-backed anti-forgery token issuer."""

from __future__ import annotations

from typing import Optional

from ..config import GuardConfig
from ..errors import MisconfiguredError
from ..utils.time import Clock, unix_now
from .codec import build_payload, encode_token, sign
from .types import IssuedToken


class TokenIssuer:
    """Issue tokens bound to a timestamp and the configured context."""

    def __init__(self, config: GuardConfig, *, clock: Clock = unix_now) -> None:
        self.config = config
        self._clock = clock

    def issue(self, now: Optional[int] = None) -> IssuedToken:
        if not self.config.has_key:
            raise MisconfiguredError("No secret key has been set")

        assert self.config.secret_key is not None
        issued_at = self._clock() if now is None else int(now)
        payload = build_payload(issued_at, self.config.context_url, self.config.user_data)
        signature = sign(self.config.secret_key, payload)
        return IssuedToken(token=encode_token(signature, issued_at), signature=signature, issued_at=issued_at)
