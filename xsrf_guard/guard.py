"""Facade tying configuration, issuance and validation together."""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Optional, Union

from .config import GuardConfig
from .ledger.base import AsyncReplayLedger, ReplayLedger
from .render.templates import hidden_field_template
from .token.issuer import TokenIssuer
from .token.types import IssuedToken, ValidationResult, VerificationResult
from .token.verifier import TokenVerifier
from .utils.time import Clock, unix_now


class TokenGuard:
    """Protect form submissions against cross-site request forgery.

    Typical use::

        guard = TokenGuard(GuardConfig(secret_key=b"...", user_data=user_id))
        html = guard.render_field()            # when rendering the form
        outcome = guard.validate(request.form) # when handling the submission

    In stateless mode any frontend sharing the secret key can validate a token
    issued by another one. Stateful mode additionally rejects a token the
    second time it is seen within a session; it needs a replay ledger and the
    caller's session id.
    """

    def __init__(
        self,
        config: Optional[GuardConfig] = None,
        *,
        ledger: Optional[Union[ReplayLedger, AsyncReplayLedger]] = None,
        clock: Clock = unix_now,
    ) -> None:
        self.config = config or GuardConfig()
        self.ledger = ledger
        self._clock = clock
        self._last: Optional[VerificationResult] = None

    def set_key(self, key: Union[str, bytes]) -> None:
        self.config = replace(self.config, secret_key=key)

    def set_url(self, url: Optional[str]) -> None:
        self.config = replace(self.config, context_url=url)

    def set_user_data(self, data: Optional[str]) -> None:
        self.config = replace(self.config, user_data=data)

    def set_stateful(self, stateful: bool = True) -> None:
        self.config = replace(self.config, stateful=stateful)

    def set_timeout(self, max_age: int) -> None:
        self.config = replace(self.config, max_age=max_age)

    def set_field_name(self, field_name: str) -> None:
        """Use another request field; it must not carry anything else."""
        self.config = replace(self.config, field_name=field_name)

    def issue_token(self, now: Optional[int] = None) -> IssuedToken:
        return TokenIssuer(self.config, clock=self._clock).issue(now)

    def issue_token_value(self, now: Optional[int] = None) -> str:
        """Return the opaque token value, e.g. for a header or GET parameter.

        Raises :class:`~xsrf_guard.errors.MisconfiguredError` without a key.
        """
        return self.issue_token(now).token

    def render_field(self) -> str:
        """Return the hidden ``<input>`` tag carrying a fresh token."""
        return hidden_field_template(self.config.field_name, self.issue_token_value())

    def validate(
        self,
        fields: Any,
        *,
        now: Optional[int] = None,
        session_id: Optional[str] = None,
    ) -> VerificationResult:
        """Validate the token in a request's field mapping.

        Never raises for bad input; inspect ``result`` on the returned value.
        """
        verifier = TokenVerifier(self.config, clock=self._clock)
        outcome = verifier.verify(fields, now=now, ledger=self.ledger, session_id=session_id)  # type: ignore[arg-type]
        self._last = outcome
        return outcome

    async def validate_async(
        self,
        fields: Any,
        *,
        now: Optional[int] = None,
        session_id: Optional[str] = None,
    ) -> VerificationResult:
        verifier = TokenVerifier(self.config, clock=self._clock)
        outcome = await verifier.verify_async(fields, now=now, ledger=self.ledger, session_id=session_id)
        self._last = outcome
        return outcome

    @property
    def last_error(self) -> Optional[str]:
        """Why the most recent validation failed, or None after a success.

        Meant for operator logs. Showing it to the requester helps an attacker
        refine a forgery.
        """
        if self._last is None or self._last.result is ValidationResult.SUCCESS:
            return None
        return self._last.message

    def error(self) -> Optional[str]:
        return self.last_error
