"""FastAPI app entrypoint for the resume-builder web API."""

from __future__ import annotations

import logging
from time import perf_counter
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError

from ..config import AppConfig, load_config
from ..errors import ResumeBuilderError
from ..observability import RenderObserver
from .api.v1.router import api_v1_router
from .errors import APIError, api_error_handler, domain_error_handler, validation_error_handler

logger = logging.getLogger("resume_builder.web.api")


def create_app(config: Optional[AppConfig] = None, observer: Optional[RenderObserver] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    config = config or load_config()

    app = FastAPI(title="Resume Builder API", version="0.1.0")
    app.state.config = config
    app.state.observer = observer or RenderObserver()
    app.state.optimizer = None
    app.include_router(api_v1_router)

    @app.middleware("http")
    async def request_logging_middleware(request: Request, call_next):
        start = perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            duration_ms = (perf_counter() - start) * 1000
            logger.info(
                "api_request method=%s path=%s status=%s duration_ms=%.2f provider=%s model=%s",
                request.method,
                request.url.path,
                500,
                duration_ms,
                config.provider,
                config.model,
            )
            raise

        duration_ms = (perf_counter() - start) * 1000
        logger.info(
            "api_request method=%s path=%s status=%s duration_ms=%.2f provider=%s model=%s",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            config.provider,
            config.model,
        )
        return response

    @app.get("/healthz", tags=["system"])
    async def healthz() -> dict:
        return {"status": "ok"}

    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(ResumeBuilderError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    return app


def main(host: str = "127.0.0.1", port: int = 8000, config: Optional[AppConfig] = None) -> None:
    """Run development API server."""
    import uvicorn

    uvicorn.run(create_app(config), host=host, port=port)
