"""Enum definitions for application constants."""

from enum import Enum


class ActivityType(str, Enum):
    """Activity timeline vocabulary.

    The recorder accepts any string; only these values get dedicated
    presentation on the read side.
    """

    FORM_CREATED = "form_created"
    FORM_UPDATED = "form_updated"
    FORM_DELETED = "form_deleted"
    NEW_SUBSCRIBER = "new_subscriber"
    SDK_INTEGRATED = "sdk_integrated"
    MESSAGE = "message"

    @classmethod
    def has_value(cls, value: str) -> bool:
        return value in cls._value2member_map_
