"""Provider-agnostic request and response types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class GenerationConfig:
    """Common generation settings passed to providers."""

    max_tokens: int = 4000
    temperature: Optional[float] = 0.7


@dataclass
class LLMResponse:
    """Normalized response from a provider."""

    text: str = ""
    finish_reason: Optional[str] = None
    usage: Optional[Dict[str, int]] = None
    raw: Any = None
