"""Per-instance event listeners for the widget."""

import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)

EVENT_NAMES = ("submit", "success", "error")


class EventEmitter:
    def __init__(self) -> None:
        self._listeners: dict[str, list[Callable[[Any], Any]]] = {name: [] for name in EVENT_NAMES}

    def on(self, event: str, callback: Callable[[Any], Any]) -> None:
        if event not in self._listeners:
            logger.warning("Ignoring listener for unknown widget event %r", event)
            return
        self._listeners[event].append(callback)

    def emit(self, event: str, payload: Any = None) -> None:
        """Call listeners in registration order; one failing listener does not stop the rest."""
        for callback in list(self._listeners.get(event, [])):
            invoke_safely(callback, payload, label=f"{event} listener")


def invoke_safely(callback: Callable[[Any], Any] | None, payload: Any, label: str) -> None:
    if callback is None:
        return
    try:
        callback(payload)
    except Exception:
        logger.exception("Widget %s raised", label)
