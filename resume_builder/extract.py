"""Text extraction from uploaded resume files (PDF, DOCX, TXT)."""

from __future__ import annotations

import io
import logging
from pathlib import Path

import fitz  # PyMuPDF
from docx import Document

from .errors import ExtractionError, UnsupportedFileTypeError

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".pdf", ".docx", ".txt")
MIN_IMPORT_CHARS = 50

UNSUPPORTED_MESSAGE = "Unsupported file type. Please upload a PDF, DOCX, or TXT file."
TOO_LITTLE_TEXT_MESSAGE = (
    "We couldn't extract enough text from that file. Try a different PDF/DOCX, or upload a TXT version."
)


def extract_text(filename: str, content: bytes) -> str:
    """Return the text of an uploaded file, dispatching on its extension."""
    suffix = Path(filename or "").suffix.lower()
    if suffix not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFileTypeError(UNSUPPORTED_MESSAGE)

    try:
        if suffix == ".pdf":
            text = _extract_pdf(content)
        elif suffix == ".docx":
            text = _extract_docx(content)
        else:
            text = _extract_txt(content)
    except ExtractionError:
        raise
    except Exception as e:
        logger.warning("Failed to read %s: %s", filename, e)
        raise ExtractionError(f"Could not read {suffix[1:].upper()} file: {e}") from e

    logger.info("Extracted %d characters from %s", len(text), filename)
    return text


def ensure_importable(text: str) -> str:
    """Reject extraction results too short to be a resume; return the stripped text."""
    stripped = text.strip()
    if len(stripped) < MIN_IMPORT_CHARS:
        raise ExtractionError(TOO_LITTLE_TEXT_MESSAGE)
    return stripped


def _extract_pdf(content: bytes) -> str:
    doc = fitz.open(stream=content, filetype="pdf")
    try:
        text_parts = [page.get_text() for page in doc]
    finally:
        doc.close()
    return "\n".join(text_parts)


def _extract_docx(content: bytes) -> str:
    doc = Document(io.BytesIO(content))
    text_parts = []

    for para in doc.paragraphs:
        if para.text.strip():
            text_parts.append(para.text)

    # Also extract from tables
    for table in doc.tables:
        for row in table.rows:
            row_text = "\t".join(cell.text.strip() for cell in row.cells if cell.text.strip())
            if row_text:
                text_parts.append(row_text)

    return "\n".join(text_parts)


def _extract_txt(content: bytes) -> str:
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ExtractionError("Text file is not valid UTF-8.") from e
