"""Application error taxonomy.

Every failure a handler can report is one of these classes. Each carries a
machine-readable ``kind`` and a human-readable ``message``; the HTTP status and
body shape are decided once, by the exception handler registered in
``src.main``.
"""


class AppError(Exception):
    """Base class for errors that map to an HTTP response."""

    status_code: int = 500
    kind: str = "internal_error"

    def __init__(self, message: str | None = None):
        self.message = message or self.kind.replace("_", " ")
        super().__init__(self.message)


class BadRequest(AppError):
    """Malformed or missing input, invalid enum values, non-positive amounts."""

    status_code = 400
    kind = "bad_request"


class Unauthorized(AppError):
    """Missing, malformed, unknown or expired session."""

    status_code = 401
    kind = "unauthorized"


class Forbidden(AppError):
    """Authenticated but lacking the required role."""

    status_code = 403
    kind = "forbidden"


class NotFound(AppError):
    """Referenced entity is absent or not owned by the caller."""

    status_code = 404
    kind = "not_found"


class Conflict(AppError):
    """Duplicate unique key."""

    status_code = 409
    kind = "conflict"


class BadGateway(AppError):
    """Upstream third-party service failed."""

    status_code = 502
    kind = "bad_gateway"
