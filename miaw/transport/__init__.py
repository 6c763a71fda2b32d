"""Request execution and error classification shared by all services."""

from miaw.transport.errors import ErrorCategory, ErrorKind, classify_status
from miaw.transport.exceptions import (
    ApiError,
    ConfigurationError,
    MalformedResponseError,
    MessagingError,
    RequestTimeoutError,
    StreamError,
    TransportError,
    ValidationFailedError,
)
from miaw.transport.executor import RequestExecutor, RequestSpec

__all__ = [
    # Classification
    "ErrorCategory",
    "ErrorKind",
    "classify_status",
    # Exceptions
    "MessagingError",
    "ValidationFailedError",
    "ConfigurationError",
    "MalformedResponseError",
    "ApiError",
    "TransportError",
    "RequestTimeoutError",
    "StreamError",
    # Execution
    "RequestExecutor",
    "RequestSpec",
]
