"""HTML rendering helpers."""

from .templates import demo_form_template, hidden_field_template

__all__ = ["hidden_field_template", "demo_form_template"]
