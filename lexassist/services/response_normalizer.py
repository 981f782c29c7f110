"""Turn raw completion text into parsed JSON.

Models are told to answer with a bare JSON object, but they routinely wrap
it in a Markdown code fence anyway::

    ```json
    {"response": "hi"}
    ```

:func:`strip_code_fences` removes one leading fence (with or without a
language tag) and one trailing fence (with or without a preceding
newline).  :func:`normalize` then parses what is left.  Any parse failure
comes out as :class:`~lexassist.utils.errors.ResponseParseError` with the
original text attached; no ``json`` exception escapes this module.
"""

from __future__ import annotations

import json
import re
from typing import Any

import structlog

from lexassist.utils.errors import ResponseParseError

logger = structlog.get_logger(logger_name=__name__)

# Opening fence at the very start: ``` plus an optional language tag.
_LEADING_FENCE_RE = re.compile(r"\A\s*```[A-Za-z0-9_-]*[ \t]*\n?")
# Closing fence at the very end.
_TRAILING_FENCE_RE = re.compile(r"\n?[ \t]*```\s*\Z")


def strip_code_fences(raw_text: str) -> str:
    """Remove a surrounding triple-backtick fence and trim whitespace."""
    text = _LEADING_FENCE_RE.sub("", raw_text, count=1)
    text = _TRAILING_FENCE_RE.sub("", text, count=1)
    return text.strip()


def normalize(raw_text: str) -> Any:
    """Parse model output as JSON after stripping code fences.

    Returns the parsed value unchanged; checking its shape is up to the
    caller.

    Raises
    ------
    ResponseParseError
        If the cleaned text is not valid JSON or nests too deeply to
        decode.  ``raw_text`` on the error holds the untouched input.
    """
    if raw_text is None:
        raise ResponseParseError(message="Model returned no text", raw_text="")

    cleaned = strip_code_fences(raw_text)
    try:
        return json.loads(cleaned)
    except (ValueError, RecursionError, TypeError) as exc:
        logger.warning(
            "response_parse_failed",
            error=str(exc),
            raw_length=len(raw_text),
            preview=raw_text[:200],
        )
        raise ResponseParseError(
            message=f"Model response is not valid JSON: {exc}",
            raw_text=raw_text,
        ) from exc
