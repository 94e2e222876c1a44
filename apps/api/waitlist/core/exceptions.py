"""Domain error taxonomy.

Services raise these; the handlers registered in ``waitlist.main`` turn them
into ``{"detail": ...}`` JSON responses. ``detail`` is always safe to show to
the caller.
"""


class WaitlistError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = 500
    default_detail: str = "Internal server error"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(WaitlistError):
    """Malformed or missing input."""

    status_code = 400
    default_detail = "Validation error"


class UnauthenticatedError(WaitlistError):
    """No session, or the session is invalid."""

    status_code = 401
    default_detail = "Not authenticated"


class ForbiddenError(WaitlistError):
    """Caller does not own the resource."""

    status_code = 403
    default_detail = "You don't have permission to access this resource"


class NotFoundError(WaitlistError):
    """Entity does not exist."""

    status_code = 404
    default_detail = "Not found"


class StorageUnavailableError(WaitlistError):
    """Backing store failure. Never carries internal detail."""

    status_code = 503
    default_detail = "Storage unavailable"
