"""Run the demo form flow: submit, replay, then forge."""

from __future__ import annotations

import base64
import logging

from .server import DemoFormServer


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    server = DemoFormServer()
    field_name = server.guard.config.field_name
    print("FORM:\n" + server.get())

    token = server.guard.issue_token_value()
    form = {"test": "foobar", field_name: token}
    print("FIRST SUBMIT:", server.post(form, session_id="demo-session"))
    print("REPLAY SUBMIT:", server.post(form, session_id="demo-session"))

    forged = base64.b64encode(b"0" * 64 + b":" + str(server.guard.issue_token().issued_at).encode()).decode()
    print("FORGED SUBMIT:", server.post({"test": "foobar", field_name: forged}, session_id="demo-session"))
    print("MISSING TOKEN:", server.post({"test": "foobar"}, session_id="demo-session"))


if __name__ == "__main__":
    main()
