"""Document rendering endpoints: preview, export, text, validation and scoring.

Rendering is CPU-bound and synchronous, so these handlers are plain ``def``
and run in the threadpool.
"""

from __future__ import annotations

from typing import Any, Dict, List
from urllib.parse import quote

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, Response
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .....domain.ats_scorer import score_document
from .....domain.layout import LayoutFormat
from .....domain.models import ResumeDocument
from .....domain.resume_validator import validate_document
from .....exporter import ExportKind, render_artifact
from .....observability import RenderObserver
from .....renderers.html import render_preview
from ....errors import APIError
from ..deps import get_observer

router = APIRouter(prefix="/documents", tags=["documents"])


class _Request(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)


class DocumentRequest(_Request):
    document: ResumeDocument
    format: LayoutFormat = LayoutFormat.STANDARD


class ScoreRequest(_Request):
    document: ResumeDocument
    job_description: str = ""


class TextResponse(BaseModel):
    filename: str
    text: str


class ValidationResponse(BaseModel):
    valid: bool
    errors: List[Dict[str, str]]
    warnings: List[Dict[str, str]]


def content_disposition(filename: str) -> str:
    quoted = quote(filename)
    if quoted != filename:
        return f"attachment; filename*=utf-8''{quoted}"
    return f'attachment; filename="{filename}"'


@router.post("/preview", response_class=HTMLResponse)
def preview_document(request: DocumentRequest) -> HTMLResponse:
    return HTMLResponse(render_preview(request.document, request.format))


@router.post("/export/{kind}")
def export_document(
    kind: str,
    request: DocumentRequest,
    observer: RenderObserver = Depends(get_observer),
) -> Response:
    try:
        export_kind = ExportKind.parse(kind)
    except ValueError as e:
        raise APIError(404, "UNKNOWN_EXPORT_KIND", str(e), {"kind": kind}) from e

    artifact = render_artifact(request.document, export_kind, request.format, observer=observer)
    return Response(
        content=artifact.content,
        media_type=artifact.mime_type,
        headers={"Content-Disposition": content_disposition(artifact.filename)},
    )


@router.post("/text", response_model=TextResponse)
def document_text(
    request: DocumentRequest,
    observer: RenderObserver = Depends(get_observer),
) -> TextResponse:
    artifact = render_artifact(request.document, ExportKind.TXT, request.format, observer=observer)
    return TextResponse(filename=artifact.filename, text=artifact.content.decode("utf-8"))


@router.post("/validate", response_model=ValidationResponse)
def validate(request: DocumentRequest) -> ValidationResponse:
    result = validate_document(request.document)
    return ValidationResponse(**result.to_dict())


@router.post("/ats-score")
def ats_score(request: ScoreRequest) -> Dict[str, Any]:
    score = score_document(request.document, request.job_description)
    return score.model_dump(mode="json", by_alias=True)
