"""Presentation helpers for turning activity rows into display text.

Writes are lenient (any activity type is stored), reads are strict: only the
``ActivityType`` vocabulary gets a dedicated title and description. Anything
else falls back to a generic rendering instead of failing.
"""

from __future__ import annotations

from typing import Any, Callable

from waitlist.db.enums import ActivityType


GENERIC_TITLE = "Activity"
GENERIC_DESCRIPTION = "New activity on your account"


def _get(data: dict[str, Any] | None, key: str, default: str) -> str:
    if not isinstance(data, dict):
        return default
    value = data.get(key)
    return str(value) if value else default


_TITLES: dict[str, str] = {
    ActivityType.NEW_SUBSCRIBER.value: "New subscriber joined",
    ActivityType.FORM_CREATED.value: "New form created",
    ActivityType.FORM_UPDATED.value: "Form updated",
    ActivityType.FORM_DELETED.value: "Form deleted",
    ActivityType.SDK_INTEGRATED.value: "SDK integrated",
    ActivityType.MESSAGE.value: "New message",
}

_DESCRIPTIONS: dict[str, Callable[[dict[str, Any] | None], str]] = {
    ActivityType.NEW_SUBSCRIBER.value: lambda d: (
        f"{_get(d, 'email', 'A subscriber')} subscribed to {_get(d, 'formName', 'your form')}"
    ),
    ActivityType.FORM_CREATED.value: lambda d: (
        f"You created a new form: {_get(d, 'formName', 'new form')}"
    ),
    ActivityType.FORM_UPDATED.value: lambda d: (
        f"You updated the form {_get(d, 'formName', 'your form')}"
    ),
    ActivityType.FORM_DELETED.value: lambda d: (
        f"You deleted the form {_get(d, 'formName', 'your form')}"
    ),
    ActivityType.SDK_INTEGRATED.value: lambda d: (
        f"SDK was successfully integrated with {_get(d, 'website', 'your website')}"
    ),
    ActivityType.MESSAGE.value: lambda d: (
        f"{_get(d, 'subscriber', 'A subscriber')} replied to your welcome message"
    ),
}


def describe_activity(activity_type: str, data: dict[str, Any] | None) -> tuple[str, str]:
    """Return ``(title, description)`` for an activity.

    Examples:
        ("form_created", {"formName": "Launch"})
            -> ("New form created", "You created a new form: Launch")
        ("something_new", {}) -> ("Activity", "New activity on your account")
    """
    if not ActivityType.has_value(activity_type):
        return GENERIC_TITLE, GENERIC_DESCRIPTION
    return _TITLES[activity_type], _DESCRIPTIONS[activity_type](data)
