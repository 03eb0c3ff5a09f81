"""Client side of the optimization service.

``ResumeOptimizer`` sends one prompt per operation through a
:class:`~resume_builder.providers.JSONCompletionProvider` and validates the
answer against the response schemas. It never retries and never repairs
JSON: transport failures raise :class:`OptimizationServiceError`, schema
mismatches raise :class:`OptimizationResponseError`.
"""

from __future__ import annotations

import logging
import time
from typing import Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from . import prompts
from .domain.models import ResumeDocument
from .domain.optimization import CompressResult, ImportAnalysisResult, OptimizationResult
from .errors import OptimizationResponseError, OptimizationServiceError
from .observability import RenderObserver
from .providers.base import JSONCompletionProvider

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class ResumeOptimizer:
    def __init__(self, provider: JSONCompletionProvider, observer: Optional[RenderObserver] = None):
        self.provider = provider
        self.observer = observer

    async def optimize(self, document: ResumeDocument, job_description: Optional[str] = None) -> OptimizationResult:
        """Ask for an optimized summary, strengths and bullets for *document*."""
        return await self._call(
            "optimize",
            prompts.OPTIMIZE_PROMPT,
            prompts.optimize_message(document, job_description),
            OptimizationResult,
        )

    async def analyze(self, raw_text: str) -> ImportAnalysisResult:
        """Parse extracted resume text into a document plus a quality analysis."""
        return await self._call("import", prompts.IMPORT_PROMPT, prompts.import_message(raw_text), ImportAnalysisResult)

    async def tailor(self, raw_text: str, job_description: str) -> ImportAnalysisResult:
        """Parse resume text and tailor it to *job_description* in one step."""
        return await self._call(
            "tailor",
            prompts.TAILOR_PROMPT,
            prompts.tailor_message(raw_text, job_description),
            ImportAnalysisResult,
        )

    async def compress(self, document: ResumeDocument) -> ResumeDocument:
        """Condense *document* to fit on one page."""
        result = await self._call("compress", prompts.COMPRESS_PROMPT, prompts.compress_message(document), CompressResult)
        return result.compressed_resume_data

    async def _call(self, operation: str, system_prompt: str, user_message: str, schema: Type[T]) -> T:
        start = time.perf_counter()
        try:
            raw = await self.provider.complete_json(system_prompt, user_message)
        except OptimizationServiceError:
            self._record(operation, start, success=False)
            raise
        except Exception as e:
            self._record(operation, start, success=False)
            if self.observer:
                self.observer.log_error("service", str(e), {"operation": operation})
            raise OptimizationServiceError(f"Optimization service failed during {operation}: {e}") from e

        try:
            result = schema.model_validate_json(raw)
        except ValidationError as e:
            self._record(operation, start, success=False)
            if self.observer:
                self.observer.log_error("response", str(e), {"operation": operation})
            raise OptimizationResponseError(
                operation,
                f"{e.error_count()} validation error(s)",
                e.errors(include_url=False, include_context=False),
            ) from e

        self._record(operation, start, success=True)
        return result

    def _record(self, operation: str, start: float, success: bool) -> None:
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info("Optimization %s %s in %.0fms", operation, "succeeded" if success else "failed", duration_ms)
        if self.observer:
            self.observer.log_service_call(operation, duration_ms, success=success)
