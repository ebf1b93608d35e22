"""OpenAI-compatible chat completion provider over httpx."""

from __future__ import annotations

from typing import Any

import httpx
from loguru import logger

from streamhost.errors import GenerationError
from streamhost.providers.base import LLMProvider, LLMResponse


class OpenAICompatProvider(LLMProvider):
    """Provider for any endpoint speaking the ``/chat/completions`` protocol."""

    def __init__(
        self,
        api_base: str,
        api_key: str = "",
        models: dict[str, str] | None = None,
        default_model: str = "gpt-4o-mini",
        max_tokens: int = 512,
        temperature: float = 0.8,
        timeout_s: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(models)
        self.default_model = default_model
        self.max_tokens = max_tokens
        self.temperature = temperature
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        self._client = httpx.AsyncClient(
            base_url=api_base.rstrip("/"), headers=headers, timeout=timeout_s, transport=transport
        )

    def get_default_model(self) -> str:
        return self.default_model

    async def aclose(self) -> None:
        await self._client.aclose()

    async def chat(
        self,
        messages: list[dict[str, Any]],
        model: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> LLMResponse:
        body = {
            "model": model or self.default_model,
            "messages": messages,
            "max_tokens": max_tokens or self.max_tokens,
            "temperature": self.temperature if temperature is None else temperature,
        }
        try:
            r = await self._client.post("/chat/completions", json=body)
            r.raise_for_status()
            data = r.json()
        except httpx.HTTPStatusError as e:
            raise GenerationError(
                f"Completion request failed: {e.response.status_code} {e.response.text[:200]}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise GenerationError(f"Completion request failed: {e}") from e

        try:
            choice = data["choices"][0]
            content = choice["message"].get("content")
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            raise GenerationError(f"Malformed completion response: {e}") from e

        logger.debug("Completion ({}): {} chars", body["model"], len(content or ""))
        return LLMResponse(
            content=content,
            finish_reason=choice.get("finish_reason") or "stop",
            usage=data.get("usage") or {},
        )
