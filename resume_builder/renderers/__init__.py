"""Renderers: every output walks the same section plan from ``domain.sections``."""

from .docx import render_docx
from .html import render_preview
from .pdf import layout_pdf, render_pdf
from .text import render_text

__all__ = ["render_docx", "render_preview", "layout_pdf", "render_pdf", "render_text"]
