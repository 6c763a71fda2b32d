"""Observability: structured logging.

Provides the logger interface the client components consume and a
structlog-based implementation of it.
"""

from miaw.observability.logging import Logger, PIIRedactor, get_logger, setup_logging

__all__ = ["Logger", "PIIRedactor", "get_logger", "setup_logging"]
