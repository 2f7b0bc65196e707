"""Markup templates for embedding tokens in HTML forms."""

from __future__ import annotations

from html import escape


def hidden_field_template(field_name: str, value: str) -> str:
    return f"<input type='hidden' name='{escape(field_name, quote=True)}' value='{escape(value, quote=True)}'>"


def demo_form_template(hidden_field: str, test_value: str = "foobar") -> str:
    return (
        "<form method='post'>\n"
        f"<input type='text' name='test' value='{escape(test_value, quote=True)}'>\n"
        "<input type='submit' name='doit' value='Submit'>\n"
        f"{hidden_field}\n"
        "</form>\n"
    )
