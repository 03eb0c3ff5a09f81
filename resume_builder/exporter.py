"""Export orchestration: precondition check, rendering and file output."""

from __future__ import annotations

import logging
import os
import tempfile
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Optional, Union

from .domain.formatting import export_filename
from .domain.layout import LayoutFormat
from .domain.models import ResumeDocument
from .errors import ExportPreconditionError, RenderError
from .observability import RenderObserver
from .renderers.docx import render_docx
from .renderers.html import render_preview
from .renderers.pdf import render_pdf
from .renderers.text import render_text

logger = logging.getLogger(__name__)


class ExportKind(str, Enum):
    PDF = "pdf"
    DOCX = "docx"
    TXT = "txt"
    HTML = "html"

    @classmethod
    def parse(cls, value: Union[str, "ExportKind"]) -> "ExportKind":
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower().lstrip(".")
        if normalized == "text":
            normalized = "txt"
        try:
            return cls(normalized)
        except ValueError:
            allowed = ", ".join(k.value for k in cls)
            raise ValueError(f"Unknown export kind {value!r} (expected one of: {allowed})") from None


MIME_TYPES: Dict[ExportKind, str] = {
    ExportKind.PDF: "application/pdf",
    ExportKind.DOCX: "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ExportKind.TXT: "text/plain; charset=utf-8",
    ExportKind.HTML: "text/html; charset=utf-8",
}


@dataclass(frozen=True)
class ExportArtifact:
    filename: str
    content: bytes
    mime_type: str
    kind: ExportKind


_RENDERERS: Dict[ExportKind, Callable[[ResumeDocument, LayoutFormat], bytes]] = {
    ExportKind.PDF: render_pdf,
    ExportKind.DOCX: render_docx,
    ExportKind.TXT: lambda document, _fmt: render_text(document).encode("utf-8"),
    ExportKind.HTML: lambda document, fmt: render_preview(document, fmt).encode("utf-8"),
}


def check_exportable(document: ResumeDocument) -> None:
    if not document.full_name:
        raise ExportPreconditionError("Please enter your name before exporting.")


def render_artifact(
    document: ResumeDocument,
    kind: Union[str, ExportKind],
    layout_format: Union[str, LayoutFormat] = LayoutFormat.STANDARD,
    observer: Optional[RenderObserver] = None,
) -> ExportArtifact:
    """Render *document* as *kind*.

    Raises :class:`ExportPreconditionError` before any rendering when the
    document has no name, and :class:`RenderError` when a renderer fails.
    """
    kind = ExportKind.parse(kind)
    layout_format = LayoutFormat.parse(layout_format)
    check_exportable(document)

    start = time.perf_counter()
    try:
        content = _RENDERERS[kind](document, layout_format)
    except Exception as e:
        logger.exception("Failed to render %s", kind.value)
        if observer:
            observer.log_error("render", str(e), {"kind": kind.value})
        raise RenderError(kind.value, str(e)) from e
    duration_ms = (time.perf_counter() - start) * 1000

    artifact = ExportArtifact(
        filename=export_filename(document.full_name, kind.value),
        content=content,
        mime_type=MIME_TYPES[kind],
        kind=kind,
    )
    if observer:
        observer.log_export(kind.value, artifact.filename, len(content), duration_ms)
    else:
        logger.info("Rendered %s (%d bytes) in %.0fms", artifact.filename, len(content), duration_ms)
    return artifact


def write_artifact(artifact: ExportArtifact, directory: Union[str, Path]) -> Path:
    """Write *artifact* into *directory* atomically and return the final path.

    The bytes go to a temporary file in the same directory first, so a failed
    write never leaves a partial file under the final name.
    """
    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    target = target_dir / artifact.filename

    fd, tmp_name = tempfile.mkstemp(prefix=f".{artifact.filename}.", suffix=".tmp", dir=target_dir)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(artifact.content)
        os.replace(tmp_name, target)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise

    logger.info("Wrote %s", target)
    return target


def export_document(
    document: ResumeDocument,
    kind: Union[str, ExportKind],
    directory: Union[str, Path],
    layout_format: Union[str, LayoutFormat] = LayoutFormat.STANDARD,
    observer: Optional[RenderObserver] = None,
) -> Path:
    """Render and write in one step."""
    return write_artifact(render_artifact(document, kind, layout_format, observer=observer), directory)
