"""Provider protocol definition."""

from __future__ import annotations

from typing import Protocol


class JSONCompletionProvider(Protocol):
    """Anything that answers a system prompt plus one user message with JSON text."""

    async def complete_json(self, system_prompt: str, user_message: str) -> str: ...
