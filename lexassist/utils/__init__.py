"""Utility modules for lexassist.

- **errors** -- Exception hierarchy rooted at LexAssistError; each gateway
  raises its own subclass so callers can react to the failing stage.
- **logging** -- structlog setup with coloured console output in
  development and JSON in production.
- **concurrency** -- semaphore-bounded ``asyncio.gather`` used by the
  ingestion fan-out.
"""

from lexassist.utils.concurrency import bounded_gather
from lexassist.utils.errors import (
    CompletionError,
    ConfigurationError,
    DocumentExtractionError,
    EmbeddingError,
    LexAssistError,
    ResponseParseError,
    RetrievalError,
    UnsupportedInputError,
)
from lexassist.utils.logging import configure_logging, get_logger

__all__ = [
    "CompletionError",
    "ConfigurationError",
    "DocumentExtractionError",
    "EmbeddingError",
    "LexAssistError",
    "ResponseParseError",
    "RetrievalError",
    "UnsupportedInputError",
    "bounded_gather",
    "configure_logging",
    "get_logger",
]
