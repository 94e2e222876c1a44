"""Structured logging helpers (PII-safe)."""

from typing import Any


def build_log_context(
    *,
    account_id: int | None = None,
    form_id: int | None = None,
    request_id: str | None = None,
    route: str | None = None,
    method: str | None = None,
) -> dict[str, Any]:
    """Return a PII-safe log context dict."""
    context: dict[str, Any] = {}
    if account_id is not None:
        context["account_id"] = account_id
    if form_id is not None:
        context["form_id"] = form_id
    if request_id:
        context["request_id"] = request_id
    if route:
        context["route"] = route
    if method:
        context["method"] = method
    return context
