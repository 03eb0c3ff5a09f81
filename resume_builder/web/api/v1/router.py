"""Top-level v1 API router."""

from __future__ import annotations

from fastapi import APIRouter

from .endpoints.documents import router as documents_router
from .endpoints.optimization import router as optimization_router

api_v1_router = APIRouter(prefix="/api/v1")
api_v1_router.include_router(documents_router)
api_v1_router.include_router(optimization_router)
