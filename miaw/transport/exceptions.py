"""Client exception hierarchy.

All exceptions inherit from MessagingError, which carries the ErrorKind
used by callers to tell validation, transport, timeout and stream
failures apart without inspecting messages.
"""

from miaw.transport.errors import ErrorCategory, ErrorKind, classify_status


class MessagingError(Exception):
    """Base exception for all client errors."""

    kind: ErrorKind = ErrorKind.TRANSPORT

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationFailedError(MessagingError):
    """Raised before any network call when caller input is unusable."""

    kind = ErrorKind.VALIDATION


class ConfigurationError(ValidationFailedError):
    """Raised when a required client configuration value is missing."""

    def __init__(self, message: str, parameter: str | None = None) -> None:
        super().__init__(message)
        self.parameter = parameter


class MalformedResponseError(ValidationFailedError):
    """Raised when a successful response lacks the fields we normalize."""

    def __init__(self, message: str, operation: str) -> None:
        super().__init__(message)
        self.operation = operation


class ApiError(MessagingError):
    """Raised when the service answers with a non-success status."""

    kind = ErrorKind.TRANSPORT

    def __init__(self, status_code: int, operation: str) -> None:
        super().__init__(f"Error in {operation}: {status_code}")
        self.status_code = status_code
        self.operation = operation
        self.category = classify_status(status_code)


class TransportError(MessagingError):
    """Raised when a request fails without producing a response."""

    kind = ErrorKind.TRANSPORT
    category = ErrorCategory.CONNECTION_ERROR

    def __init__(self, message: str, operation: str) -> None:
        super().__init__(message)
        self.operation = operation
        self.status_code: int | None = None


class RequestTimeoutError(MessagingError):
    """Raised when a request exceeds its configured deadline."""

    kind = ErrorKind.TIMEOUT
    category = ErrorCategory.TIMEOUT_ERROR

    def __init__(self, operation: str, timeout: float | None = None) -> None:
        super().__init__(f"Request timeout for operation: {operation}")
        self.operation = operation
        self.timeout = timeout


class StreamError(MessagingError):
    """Delivered to a stream's error callback; never raised by the controller."""

    kind = ErrorKind.STREAM

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.category = classify_status(status_code)
