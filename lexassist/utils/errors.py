"""Custom exception hierarchy for lexassist.

All application exceptions inherit from :class:`LexAssistError`, which
carries an optional ``provider_name`` so error handlers can identify which
external service (e.g. "gemini", "openai", "chromadb") caused the failure.

The hierarchy is organized by the stage of the request that failed:

    LexAssistError  (base -- catch-all for any lexassist error)
    +-- EmbeddingError           (embedding gateway call failed)
    +-- RetrievalError           (vector store upsert / query failed)
    +-- CompletionError          (completion model call failed)
    +-- ResponseParseError       (model output was not the agreed JSON)
    +-- UnsupportedInputError    (empty query, unsupported file type)
    +-- DocumentExtractionError  (file missing or unreadable)
    +-- ConfigurationError       (startup / missing config)

None of these are fatal to the process.  The API layer turns each one into
a structured ``ErrorResponse`` and the CLI prints it and exits non-zero.
"""


class LexAssistError(Exception):
    """Base exception for all lexassist errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which external service triggered the
    error.  The ``__str__`` method prefixes the provider name in brackets
    for structured log output, e.g. ``[gemini] quota exceeded``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# External gateway errors
# ---------------------------------------------------------------------------

class EmbeddingError(LexAssistError):
    """Raised when the embedding service cannot produce a vector."""

    def __init__(
        self,
        message: str = "Embedding request failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class RetrievalError(LexAssistError):
    """Raised when the vector store rejects an upsert or a similarity query."""

    def __init__(
        self,
        message: str = "Vector store request failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class CompletionError(LexAssistError):
    """Raised when the completion model call fails or returns no text."""

    def __init__(
        self,
        message: str = "Completion request failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Output / input errors
# ---------------------------------------------------------------------------

class ResponseParseError(LexAssistError):
    """Raised when model output is not valid JSON of the expected shape.

    The offending text is kept on ``raw_text`` so it can be logged or shown
    to an operator for diagnosis.
    """

    def __init__(
        self,
        message: str = "Model response could not be parsed",
        raw_text: str = "",
        provider_name: str | None = None,
    ) -> None:
        self._raw_text = raw_text
        super().__init__(message=message, provider_name=provider_name)

    @property
    def raw_text(self) -> str:
        return self._raw_text


class UnsupportedInputError(LexAssistError):
    """Raised for input the assistant cannot act on (blank query, unknown file type)."""

    def __init__(
        self,
        message: str = "Unsupported input",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class DocumentExtractionError(LexAssistError):
    """Raised when a document file is missing or its reader fails."""

    def __init__(
        self,
        message: str = "Document text extraction failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

class ConfigurationError(LexAssistError):
    """Raised when required configuration is missing or invalid."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
