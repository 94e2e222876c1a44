"""Headless embeddable waitlist widget."""

from waitlist.widget.runtime import VERSION, WaitlistWidget, WidgetConfig, WidgetState, init
from waitlist.widget.theme import Theme

__all__ = ["VERSION", "Theme", "WaitlistWidget", "WidgetConfig", "WidgetState", "init"]
