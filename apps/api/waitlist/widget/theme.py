"""Widget theming and the shared base stylesheet."""

from __future__ import annotations

import re
from dataclasses import dataclass, fields
from typing import Any, Mapping

from pydantic.alias_generators import to_snake

DEFAULT_PRIMARY_COLOR = "#4F46E5"
DEFAULT_BORDER_RADIUS = "0.375rem"
DEFAULT_FONT_FAMILY = "Inter, sans-serif"
DEFAULT_BUTTON_TEXT = "Join Waitlist"

# Characters that would let a theme value escape its declaration
_CSS_UNSAFE = re.compile(r"[;{}<>\\]")


@dataclass(frozen=True)
class Theme:
    primary_color: str = DEFAULT_PRIMARY_COLOR
    border_radius: str = DEFAULT_BORDER_RADIUS
    font_family: str = DEFAULT_FONT_FAMILY
    button_text: str = DEFAULT_BUTTON_TEXT

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "Theme":
        """Build from camelCase or snake_case keys. Empty values fall back to defaults."""
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in data.items():
            name = to_snake(key)
            if name in known and value:
                values[name] = str(value)
        return cls(**values)

    def custom_properties(self) -> str:
        """Inline ``style`` value that scopes the theme to one widget root."""
        return (
            f"--waitlist-primary-color: {_css_value(self.primary_color, DEFAULT_PRIMARY_COLOR)}; "
            f"--waitlist-border-radius: {_css_value(self.border_radius, DEFAULT_BORDER_RADIUS)}; "
            f"--waitlist-font-family: {_css_value(self.font_family, DEFAULT_FONT_FAMILY)}"
        )


def _css_value(value: str, default: str) -> str:
    cleaned = _CSS_UNSAFE.sub("", value or "").strip()
    return cleaned or default


BASE_STYLESHEET_ID = "waitlist-sdk-styles"

BASE_STYLESHEET = """
.waitlist-sdk-form {
  font-family: var(--waitlist-font-family, 'Inter', sans-serif);
  max-width: 100%;
  box-sizing: border-box;
}
.waitlist-title {
  font-size: 1.25rem;
  font-weight: 600;
  color: #1a202c;
  margin-bottom: 0.5rem;
}
.waitlist-description {
  font-size: 0.875rem;
  color: #4a5568;
  margin-bottom: 1.5rem;
}
.waitlist-form {
  display: flex;
  flex-direction: column;
  gap: 1rem;
}
.waitlist-field {
  display: flex;
  flex-direction: column;
  gap: 0.25rem;
  text-align: left;
}
.waitlist-field label {
  font-size: 0.875rem;
  font-weight: 500;
  color: #4a5568;
}
.waitlist-field input {
  padding: 0.5rem;
  border: 1px solid #cbd5e0;
  border-radius: var(--waitlist-border-radius, 0.375rem);
  font-size: 0.875rem;
  width: 100%;
  box-sizing: border-box;
  outline: none;
}
.waitlist-field input:focus {
  border-color: var(--waitlist-primary-color, #4F46E5);
  box-shadow: 0 0 0 1px var(--waitlist-primary-color, #4F46E5);
}
.waitlist-submit-button {
  background-color: var(--waitlist-primary-color, #4F46E5);
  color: white;
  border: none;
  padding: 0.5rem 1rem;
  border-radius: var(--waitlist-border-radius, 0.375rem);
  font-weight: 500;
  cursor: pointer;
}
.waitlist-submit-button:disabled {
  opacity: 0.7;
  cursor: not-allowed;
}
.waitlist-success {
  background-color: #f0fff4;
  border: 1px solid #c6f6d5;
  border-radius: var(--waitlist-border-radius, 0.375rem);
  padding: 1rem;
  text-align: center;
  color: #2f855a;
}
.waitlist-error {
  background-color: #fff5f5;
  border: 1px solid #fed7d7;
  border-radius: var(--waitlist-border-radius, 0.375rem);
  padding: 0.5rem;
  text-align: center;
  color: #e53e3e;
  margin-bottom: 1rem;
}
"""
