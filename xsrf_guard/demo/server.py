"""Demo form page with XSRF protection and replay detection."""

from __future__ import annotations

import logging
from typing import Mapping, Optional

from xsrf_guard import GuardConfig, TokenGuard
from xsrf_guard.ledger import InMemoryReplayLedger
from xsrf_guard.render import demo_form_template
from xsrf_guard.utils.time import Clock, unix_now

logger = logging.getLogger(__name__)


class DemoFormServer:
    """Render a form on GET and process it on POST, one user, one session."""

    def __init__(
        self,
        *,
        secret_key: str = "CHANGE_THIS_KEY_TO_SOMETHING_ONLY_YOU_KNOW",
        user: str = "demo-user",
        url: str = "http://www.test.com/xsrf/example",
        clock: Clock = unix_now,
    ) -> None:
        config = GuardConfig(secret_key=secret_key, user_data=user, context_url=url, max_age=3600, stateful=True)
        self.guard = TokenGuard(config, ledger=InMemoryReplayLedger(), clock=clock)

    def get(self) -> str:
        """Form page with the hidden token field."""
        return demo_form_template(self.guard.render_field())

    def post(self, form: Mapping[str, str], *, session_id: str, now: Optional[int] = None) -> dict:
        """Process a submission, rejecting forged or replayed tokens."""
        outcome = self.guard.validate(form, now=now, session_id=session_id)
        if not outcome.valid:
            # Fine for a demo; production code should not echo the reason.
            logger.info("Rejected submission: %s", self.guard.last_error)
            return {"status": "rejected", "result": outcome.result.name, "reason": self.guard.last_error}
        return {"status": "accepted", "test": form.get("test")}
