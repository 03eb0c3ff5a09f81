"""API error helpers and exception handlers."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..errors import (
    ExportPreconditionError,
    ExtractionError,
    OptimizationResponseError,
    OptimizationServiceError,
    RenderError,
    ResumeBuilderError,
    UnsupportedFileTypeError,
)


class APIError(Exception):
    """Application-level API error with status/code mapping."""

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": jsonable_encoder(self.details),
            }
        }


# Order matters: subclasses before their bases.
_DOMAIN_ERRORS = (
    (ExportPreconditionError, 422, "EXPORT_PRECONDITION_FAILED"),
    (UnsupportedFileTypeError, 415, "UNSUPPORTED_FILE_TYPE"),
    (ExtractionError, 422, "EXTRACTION_FAILED"),
    (OptimizationResponseError, 502, "INVALID_SERVICE_RESPONSE"),
    (OptimizationServiceError, 502, "SERVICE_UNAVAILABLE"),
    (RenderError, 500, "RENDER_FAILED"),
)


def to_api_error(exc: ResumeBuilderError) -> APIError:
    """Map a domain exception onto the API error envelope."""
    for exc_type, status_code, code in _DOMAIN_ERRORS:
        if isinstance(exc, exc_type):
            break
    else:
        status_code, code = 500, "INTERNAL_ERROR"

    details: Dict[str, Any] = {}
    if isinstance(exc, OptimizationResponseError):
        details = {"operation": exc.operation, "errors": exc.errors}
    elif isinstance(exc, RenderError):
        details = {"kind": exc.kind}
    return APIError(status_code, code, str(exc), details)


async def api_error_handler(_: Request, exc: APIError) -> JSONResponse:
    """Render contract-compliant error response."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def domain_error_handler(request: Request, exc: ResumeBuilderError) -> JSONResponse:
    return await api_error_handler(request, to_api_error(exc))


async def validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    """Normalize FastAPI validation errors to API contract shape."""
    errors = [{k: v for k, v in err.items() if k not in ("ctx", "url")} for err in exc.errors()]
    return JSONResponse(
        status_code=400,
        content={
            "error": {
                "code": "BAD_REQUEST",
                "message": "Invalid request payload",
                "details": {"errors": jsonable_encoder(errors)},
            }
        },
    )
