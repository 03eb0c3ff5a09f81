"""Tests for text extraction from uploaded files."""

import io

import fitz
import pytest
from docx import Document

from resume_builder.errors import ExtractionError, UnsupportedFileTypeError
from resume_builder.extract import ensure_importable, extract_text


def _docx_bytes(*paragraphs: str) -> bytes:
    doc = Document()
    for text in paragraphs:
        doc.add_paragraph(text)
    table = doc.add_table(rows=1, cols=2)
    table.rows[0].cells[0].text = "Python"
    table.rows[0].cells[1].text = "Go"
    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


def _pdf_bytes(text: str) -> bytes:
    doc = fitz.open()
    page = doc.new_page()
    page.insert_text((72, 72), text, fontsize=11)
    data = doc.tobytes()
    doc.close()
    return data


class TestExtractText:
    def test_txt(self):
        assert extract_text("resume.TXT", "\ufeffJane Doe\nEngineer".encode("utf-8")) == "Jane Doe\nEngineer"

    def test_invalid_utf8(self):
        with pytest.raises(ExtractionError, match="UTF-8"):
            extract_text("resume.txt", b"\xff\xfe\xfa")

    def test_docx_paragraphs_and_tables(self):
        text = extract_text("resume.docx", _docx_bytes("Jane Doe", "", "Senior Engineer"))
        assert text.splitlines() == ["Jane Doe", "Senior Engineer", "Python\tGo"]

    def test_pdf(self):
        assert "Jane Doe" in extract_text("resume.pdf", _pdf_bytes("Jane Doe"))

    def test_corrupt_pdf(self):
        with pytest.raises(ExtractionError, match="Could not read PDF"):
            extract_text("resume.pdf", b"not a pdf")

    @pytest.mark.parametrize("filename", ["resume.rtf", "resume", ""])
    def test_unsupported_type(self, filename):
        with pytest.raises(UnsupportedFileTypeError):
            extract_text(filename, b"whatever")


class TestEnsureImportable:
    def test_short_text_is_rejected(self):
        with pytest.raises(ExtractionError, match="couldn't extract enough text"):
            ensure_importable("   " + "x" * 49 + "   ")

    def test_returns_stripped_text(self):
        text = "x" * 50
        assert ensure_importable(f"\n{text}\n") == text
