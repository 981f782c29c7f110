"""Rule-based text chunking for contracts and policies.

Splits document text into :class:`~lexassist.models.document.DocumentChunk`
objects that are small enough to retrieve precisely: one chunk per numbered
section header, one chunk per sentence of body text.

The algorithm runs in two passes:

1. **Header pass** -- the text is split on numbered section headers of the
   form ``"<integer>. <heading>"``.  The headers are kept as their own
   fragments, so the result interleaves header and body fragments in
   document order.

2. **Sentence pass** -- each body fragment is split wherever a ``.``, ``!``
   or ``?`` is followed by whitespace and then an uppercase letter.  The
   terminator stays with its sentence.

The sentence rule knows nothing about abbreviations: "Mr. Smith" splits
after "Mr.", while "e.g. the buyer" stays whole because a lowercase letter
follows the period.

A heading runs to the end of its line, or stops earlier when a capitalised
sentence starts on the same line.  So ``"1. Intro Hello world."`` yields a
``"1. Intro"`` header and a ``"Hello world."`` sentence, while a heading on
its own line such as ``"4. Limitation Of Liability"`` stays whole.  The
same rule cuts a Title Case heading after its first word when a sentence
follows on its line: ``"3. How We Use Your Information We may ..."`` gives
a ``"3. How"`` header.
"""

from __future__ import annotations

import re
import uuid
from typing import Any

import structlog

from lexassist.models.document import DocumentChunk

logger = structlog.get_logger(logger_name=__name__)

# Start of a numbered header: digits, a period, horizontal whitespace.  The
# lookbehind keeps the search from retrying inside a run of digits.
_HEADER_PREFIX_RE = re.compile(r"(?<!\d)\d+\.[ \t]+")

# Where a capitalised sentence starts inside a heading line.  Only the first
# character of a whitespace run is tried.
_INLINE_SENTENCE_RE = re.compile(r"(?<![ \t])[ \t]+(?=[A-Z])")

# Used with match(): the greedy run lands on the last terminator of the line
# that is followed by whitespace or the end of the line.
_LAST_TERMINATOR_RE = re.compile(r"[^\n]*[.!?](?=\s|\Z)")

# A trimmed fragment counts as a header only if it still starts with the
# numeral + period + space prefix.  "10)" or "3.5%" fall through to the
# sentence pass.
_HEADER_START_RE = re.compile(r"\d+\.[ \t]")

# Sentence boundary: terminator, whitespace, uppercase letter.  Lookarounds
# keep the terminator and the uppercase letter out of the consumed split.
_SENTENCE_BOUNDARY_RE = re.compile(r"(?<=[.!?])\s+(?=[A-Z])")


class TextChunker:
    """Splits text into header and sentence chunks with fresh uuid4 ids.

    The chunker is stateless; one instance can be shared by every request.
    """

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def chunk(self, text: str, metadata: dict[str, Any] | None = None) -> list[DocumentChunk]:
        """Split *text* into an ordered list of chunks.

        Parameters
        ----------
        text:
            Raw document text.
        metadata:
            Document-level metadata copied onto every chunk.

        Returns
        -------
        list[DocumentChunk]
            Chunks in document order.  Empty or whitespace-only input
            returns ``[]``.
        """
        if not text or not text.strip():
            return []

        meta = dict(metadata or {})
        chunks: list[DocumentChunk] = []
        header_count = 0

        for fragment in self.split_sections(text):
            if self.is_header(fragment):
                chunks.append(self._make_chunk(fragment, meta))
                header_count += 1
                continue
            for sentence in self.split_sentences(fragment):
                chunks.append(self._make_chunk(sentence, meta))

        logger.debug(
            "chunking_complete",
            input_chars=len(text),
            chunks=len(chunks),
            headers=header_count,
        )
        return chunks

    @staticmethod
    def split_sections(text: str) -> list[str]:
        """Split *text* at numbered headers, keeping headers as fragments.

        Returned fragments are trimmed; empty fragments are dropped.

        A single forward pass: each line's last sentence terminator is found
        once, and every header is cut where its heading ends, so long lines
        cost time linear in their length.
        """
        fragments: list[str] = []
        body_start = 0
        pos = 0
        line_end = -1
        last_terminator = -1

        while True:
            match = _HEADER_PREFIX_RE.search(text, pos)
            if match is None:
                break
            start = match.end()
            pos = start

            if start > line_end:
                line_end = text.find("\n", start)
                if line_end == -1:
                    line_end = len(text)
                tail = _LAST_TERMINATOR_RE.match(text, start, line_end)
                last_terminator = tail.end() - 1 if tail else -1
            if start >= line_end:
                # "<n>." with nothing after it on the line.
                continue

            inline = _INLINE_SENTENCE_RE.search(text, start, line_end)
            if inline is not None and inline.end() < last_terminator:
                end = inline.start()
            else:
                end = line_end
                while end > start + 1 and text[end - 1] in " \t":
                    end -= 1

            fragments.append(text[body_start : match.start()])
            fragments.append(text[match.start() : end])
            body_start = pos = end

        fragments.append(text[body_start:])
        return [f.strip() for f in fragments if f.strip()]

    @staticmethod
    def is_header(fragment: str) -> bool:
        """Return ``True`` if the trimmed *fragment* starts with ``"<n>. "``."""
        return bool(_HEADER_START_RE.match(fragment.strip()))

    @staticmethod
    def split_sentences(fragment: str) -> list[str]:
        """Split a body fragment into trimmed, non-empty sentences."""
        pieces = (piece.strip() for piece in _SENTENCE_BOUNDARY_RE.split(fragment))
        return [p for p in pieces if p]

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _make_chunk(text: str, metadata: dict[str, Any]) -> DocumentChunk:
        return DocumentChunk(
            chunk_id=str(uuid.uuid4()),
            text=text.strip(),
            metadata=dict(metadata),
        )
