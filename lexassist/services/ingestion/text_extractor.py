"""Plain-text extraction from uploaded contract files.

Supported formats and readers:

    .pdf   PyMuPDF (``fitz``), page by page
    .docx  python-docx, paragraph by paragraph
    .txt   read as UTF-8

Line structure is preserved (pages and paragraphs are joined with
newlines) because the chunker relies on numbered headings sitting on their
own lines.  Whitespace collapsing, where a caller wants it, is a separate
step (:func:`collapse_whitespace`).
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Callable

import fitz  # PyMuPDF -- the "fitz" import name is a PyMuPDF convention
import structlog
from docx import Document as DocxDocument

from lexassist.utils.errors import DocumentExtractionError, UnsupportedInputError

logger = structlog.get_logger(logger_name=__name__)

_WHITESPACE_RE = re.compile(r"\s+")

SUPPORTED_EXTENSIONS = frozenset({".pdf", ".docx", ".txt"})


def collapse_whitespace(text: str) -> str:
    """Replace every whitespace run with one space and trim."""
    return _WHITESPACE_RE.sub(" ", text).strip()


class TextExtractor:
    """Dispatches a file to the reader for its extension."""

    def __init__(self) -> None:
        self._readers: dict[str, Callable[[Path], str]] = {
            ".pdf": self._read_pdf,
            ".docx": self._read_docx,
            ".txt": self._read_txt,
        }

    def extract_text(self, file_path: str | Path) -> str:
        """Return the text content of *file_path*.

        Raises
        ------
        UnsupportedInputError
            If the extension is not .pdf, .docx or .txt.
        DocumentExtractionError
            If the file does not exist or its reader fails.
        """
        path = Path(file_path)
        suffix = path.suffix.lower()

        reader = self._readers.get(suffix)
        if reader is None:
            raise UnsupportedInputError(message=f"Unsupported file type: {suffix or '(none)'}")
        if not path.is_file():
            raise DocumentExtractionError(message=f"File not found: {path}")

        try:
            text = reader(path)
        except DocumentExtractionError:
            raise
        except Exception as exc:
            raise DocumentExtractionError(
                message=f"Error extracting text from {suffix.lstrip('.').upper()}: {exc}",
            ) from exc

        logger.info("text_extracted", file=path.name, format=suffix, chars=len(text))
        return text

    # ------------------------------------------------------------------
    # Readers
    # ------------------------------------------------------------------

    @staticmethod
    def _read_pdf(path: Path) -> str:
        doc = fitz.open(str(path))
        try:
            pages = [doc[i].get_text("text") for i in range(len(doc))]
        finally:
            doc.close()
        if not any(p.strip() for p in pages):
            logger.warning("pdf_no_text_extracted", file=path.name)
        return "\n".join(pages)

    @staticmethod
    def _read_docx(path: Path) -> str:
        doc = DocxDocument(str(path))
        return "\n".join(para.text for para in doc.paragraphs)

    @staticmethod
    def _read_txt(path: Path) -> str:
        return path.read_text(encoding="utf-8")
