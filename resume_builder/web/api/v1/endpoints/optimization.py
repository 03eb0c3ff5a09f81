"""Optimization service endpoints: optimize, compress, import and tailor."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .....config import AppConfig
from .....domain.models import ResumeDocument
from .....optimizer import ResumeOptimizer
from .....session import ResumeSession
from ....errors import APIError
from ..deps import get_config, get_optimizer
from ..upload import read_resume_upload

router = APIRouter(tags=["optimization"])


class OptimizeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    document: ResumeDocument
    job_description: Optional[str] = None


class CompressRequest(BaseModel):
    document: ResumeDocument


def _dump(model: BaseModel) -> Dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True)


def _analysis_payload(session: ResumeSession) -> Dict[str, Any]:
    return {
        "document": _dump(session.document),
        "analysis": _dump(session.analysis) if session.analysis else None,
        "atsScore": _dump(session.ats_score),
        "extractedKeywords": list(session.extracted_keywords),
    }


@router.post("/optimize")
async def optimize(
    request: OptimizeRequest,
    optimizer: ResumeOptimizer = Depends(get_optimizer),
) -> Dict[str, Any]:
    session = ResumeSession(request.document, optimizer=optimizer)
    await session.optimize(request.job_description)
    return {
        "document": _dump(session.document),
        "atsScore": _dump(session.ats_score),
        "extractedKeywords": list(session.extracted_keywords),
    }


@router.post("/compress")
async def compress(
    request: CompressRequest,
    optimizer: ResumeOptimizer = Depends(get_optimizer),
) -> Dict[str, Any]:
    session = ResumeSession(request.document, optimizer=optimizer)
    await session.compress()
    return {"document": _dump(session.document)}


@router.post("/import")
async def import_resume(
    file: UploadFile = File(...),
    config: AppConfig = Depends(get_config),
    optimizer: ResumeOptimizer = Depends(get_optimizer),
) -> Dict[str, Any]:
    raw_text = await read_resume_upload(file, config.max_upload_bytes)

    session = ResumeSession(optimizer=optimizer)
    await session.import_text(raw_text)
    return _analysis_payload(session)


@router.post("/tailor")
async def tailor_resume(
    file: UploadFile = File(...),
    job_description: str = Form(...),
    config: AppConfig = Depends(get_config),
    optimizer: ResumeOptimizer = Depends(get_optimizer),
) -> Dict[str, Any]:
    if not job_description.strip():
        raise APIError(400, "BAD_REQUEST", "Job description is required for tailoring")

    raw_text = await read_resume_upload(file, config.max_upload_bytes)

    session = ResumeSession(optimizer=optimizer)
    await session.tailor(raw_text, job_description)
    return _analysis_payload(session)
