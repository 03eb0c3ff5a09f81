"""OpenAI-compatible provider implementation."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI

from ..errors import OptimizationServiceError
from .types import GenerationConfig, LLMResponse

logger = logging.getLogger(__name__)


class OpenAICompatibleProvider:
    """Provider for OpenAI-compatible chat APIs in JSON mode.

    One request per call. Failures propagate to the caller; there is no retry.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        api_base: str = "",
        config: Optional[GenerationConfig] = None,
    ) -> None:
        self.model = model
        self.api_base = api_base or ""
        self.config = config or GenerationConfig()
        self.client = AsyncOpenAI(api_key=api_key, base_url=api_base or None)
        self.last_response: Optional[LLMResponse] = None

    async def complete_json(self, system_prompt: str, user_message: str) -> str:
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_message},
        ]
        completion = await self.client.chat.completions.create(**self._build_chat_kwargs(messages))
        response = self._from_openai_completion(completion)
        self.last_response = response
        if response.usage:
            logger.debug(
                "LLM %s usage: %d prompt + %d completion tokens",
                self.model,
                response.usage["prompt_tokens"],
                response.usage["completion_tokens"],
            )
        return response.text

    def _build_chat_kwargs(self, messages: List[Dict[str, Any]]) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "response_format": {"type": "json_object"},
        }
        if self.config.max_tokens and self.config.max_tokens > 0:
            kwargs["max_tokens"] = self.config.max_tokens
        if self.config.temperature is not None:
            kwargs["temperature"] = self.config.temperature

        extra_body = self._build_extra_body()
        if extra_body:
            kwargs["extra_body"] = extra_body
        return kwargs

    def _build_extra_body(self) -> Optional[Dict[str, Any]]:
        api_base_lower = self.api_base.lower()
        model_lower = (self.model or "").lower()

        # Moonshot Kimi K2 reasoning output breaks JSON mode.
        if "moonshot.cn" in api_base_lower and model_lower.startswith("kimi-k2"):
            return {"thinking": {"type": "disabled"}}

        return None

    def _from_openai_completion(self, completion) -> LLMResponse:
        if not completion.choices:
            raise OptimizationServiceError("Empty LLM response: no choices")

        choice = completion.choices[0]
        text = self._normalize_message_content(getattr(choice.message, "content", ""))

        usage_data = getattr(completion, "usage", None)
        usage = None
        if usage_data:
            usage = {
                "prompt_tokens": int(getattr(usage_data, "prompt_tokens", 0) or 0),
                "completion_tokens": int(getattr(usage_data, "completion_tokens", 0) or 0),
                "total_tokens": int(getattr(usage_data, "total_tokens", 0) or 0),
            }

        return LLMResponse(
            text=text,
            finish_reason=getattr(choice, "finish_reason", None),
            usage=usage,
            raw=completion,
        )

    def _normalize_message_content(self, content: Any) -> str:
        if content is None:
            return ""
        if isinstance(content, str):
            return content
        if isinstance(content, list):
            text_chunks: List[str] = []
            for item in content:
                if isinstance(item, dict):
                    text_chunks.append(str(item.get("text", "") or ""))
                else:
                    text_chunks.append(str(getattr(item, "text", "") or ""))
            return "".join(text_chunks)
        return str(content)
