"""Exception hierarchy shared by the domain, exporter, optimizer and web layers."""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class ResumeBuilderError(Exception):
    """Base class for all resume-builder errors."""


class ExportPreconditionError(ResumeBuilderError):
    """The document cannot be exported as-is (e.g. no name set)."""


class RenderError(ResumeBuilderError):
    """A renderer failed while producing an artifact."""

    def __init__(self, kind: str, message: str) -> None:
        super().__init__(f"Failed to generate {kind.upper()}: {message}")
        self.kind = kind


class ExtractionError(ResumeBuilderError):
    """Text could not be extracted from an uploaded file."""


class UnsupportedFileTypeError(ExtractionError):
    """The uploaded file type is not one of PDF, DOCX or TXT."""


class OptimizationServiceError(ResumeBuilderError):
    """The external optimization service failed or was unreachable."""


class OptimizationResponseError(OptimizationServiceError):
    """The optimization service answered with a payload that does not match the schema."""

    def __init__(self, operation: str, message: str, errors: Optional[List[Dict[str, Any]]] = None) -> None:
        super().__init__(f"Invalid {operation} response: {message}")
        self.operation = operation
        self.errors = errors or []
