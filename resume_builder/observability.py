"""Observability for exports and service calls - logging and simple metrics."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(verbose: bool = False, level: Optional[Union[int, str]] = None) -> logging.Logger:
    """Attach one stream handler to the ``resume_builder`` logger.

    *level* wins over *verbose*; without either the logger shows warnings only.
    """
    root = logging.getLogger("resume_builder")
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        root.addHandler(handler)
    if level is None:
        level = logging.INFO if verbose else logging.WARNING
    root.setLevel(level.upper() if isinstance(level, str) else level)
    return root


@dataclass
class RenderEvent:
    """A single recorded event."""

    timestamp: datetime
    event_type: str  # "export", "service_call", "error"
    data: Dict[str, Any]
    duration_ms: Optional[float] = None


class RenderObserver:
    """
    Records export and optimization-service events.

    The exporter and the optimizer report here; the CLI prints the stats and
    the web app keeps one observer per process.
    """

    def __init__(self) -> None:
        self.events: List[RenderEvent] = []
        self.logger = logging.getLogger("resume_builder")

    def log_export(self, kind: str, filename: str, size_bytes: int, duration_ms: float) -> None:
        """
        Log a finished export.

        Args:
            kind: Export kind ("pdf", "docx", "txt", "html")
            filename: Suggested download filename
            size_bytes: Size of the rendered artifact
            duration_ms: Rendering time in milliseconds
        """
        self.events.append(
            RenderEvent(
                timestamp=datetime.now(),
                event_type="export",
                data={"kind": kind, "filename": filename, "size_bytes": size_bytes},
                duration_ms=duration_ms,
            )
        )
        self.logger.info(f"Export: {kind} -> {filename} ({size_bytes} bytes, {duration_ms:.2f}ms)")

    def log_service_call(self, operation: str, duration_ms: float, success: bool = True) -> None:
        """
        Log a call to the optimization service.

        Args:
            operation: "optimize", "import", "tailor" or "compress"
            duration_ms: Round-trip time in milliseconds
            success: Whether a valid response came back
        """
        self.events.append(
            RenderEvent(
                timestamp=datetime.now(),
                event_type="service_call",
                data={"operation": operation, "success": success},
                duration_ms=duration_ms,
            )
        )
        status = "ok" if success else "failed"
        self.logger.info(f"Service: {operation} {status} ({duration_ms:.2f}ms)")

    def log_error(self, error_type: str, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        """
        Log an error event.

        Args:
            error_type: Type of error (e.g., "render", "service", "response")
            message: Error message
            context: Additional context about the error
        """
        self.events.append(
            RenderEvent(
                timestamp=datetime.now(),
                event_type="error",
                data={"error_type": error_type, "message": message, "context": context or {}},
            )
        )
        self.logger.error(f"Error ({error_type}): {message}")

    def get_stats(self) -> Dict[str, Any]:
        """
        Get aggregated statistics for the recorded events.

        Returns:
            Dictionary with event counts and total duration
        """
        exports = [e for e in self.events if e.event_type == "export"]
        calls = [e for e in self.events if e.event_type == "service_call"]
        errors = [e for e in self.events if e.event_type == "error"]

        by_kind: Dict[str, int] = {}
        for event in exports:
            kind = event.data["kind"]
            by_kind[kind] = by_kind.get(kind, 0) + 1

        return {
            "event_count": len(self.events),
            "exports": len(exports),
            "exports_by_kind": by_kind,
            "service_calls": len(calls),
            "failed_service_calls": sum(1 for e in calls if not e.data.get("success", True)),
            "errors": len(errors),
            "total_duration_ms": sum(e.duration_ms or 0 for e in self.events),
        }

    def clear(self) -> None:
        """Clear all recorded events."""
        self.events.clear()
