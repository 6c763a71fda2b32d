"""Error categories and status classification for service responses."""

from enum import Enum


class ErrorKind(str, Enum):
    """Coarse failure kind, used by callers to decide how to react.

    Validation failures happen before any network activity, transport and
    timeout failures come from a single request, stream failures from a
    long-lived event connection.
    """

    VALIDATION = "validation"
    TRANSPORT = "transport"
    TIMEOUT = "timeout"
    STREAM = "stream"


class ErrorCategory(str, Enum):
    """Machine-readable category attached to classified failures."""

    INVALID_REQUEST = "invalid_request"
    """HTTP 400."""

    AUTHENTICATION_ERROR = "authentication_error"
    """HTTP 401: missing, expired or rejected bearer token."""

    PERMISSION_ERROR = "permission_error"
    """HTTP 403."""

    NOT_FOUND = "not_found"
    """HTTP 404."""

    CONFLICT = "conflict"
    """HTTP 409."""

    RATE_LIMIT_ERROR = "rate_limit_error"
    """HTTP 429."""

    API_ERROR = "api_error"
    """HTTP 500."""

    UNKNOWN_ERROR = "unknown_error"
    """Any other non-success status."""

    TIMEOUT_ERROR = "timeout_error"
    """The configured request deadline elapsed."""

    CONNECTION_ERROR = "connection_error"
    """The request failed before a status was received."""


_STATUS_CATEGORIES: dict[int, ErrorCategory] = {
    400: ErrorCategory.INVALID_REQUEST,
    401: ErrorCategory.AUTHENTICATION_ERROR,
    403: ErrorCategory.PERMISSION_ERROR,
    404: ErrorCategory.NOT_FOUND,
    409: ErrorCategory.CONFLICT,
    429: ErrorCategory.RATE_LIMIT_ERROR,
    500: ErrorCategory.API_ERROR,
}


def classify_status(status_code: int | None) -> ErrorCategory:
    """Map a response status to its error category.

    Args:
        status_code: HTTP status, or None when no response was received

    Returns:
        The matching category; unlisted statuses are UNKNOWN_ERROR
    """
    if status_code is None:
        return ErrorCategory.CONNECTION_ERROR
    return _STATUS_CATEGORIES.get(status_code, ErrorCategory.UNKNOWN_ERROR)
