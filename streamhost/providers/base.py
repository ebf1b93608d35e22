"""Base LLM provider interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Literal

from streamhost.errors import GenerationError

SizeClass = Literal["small", "medium", "large"]


@dataclass
class LLMResponse:
    """Response from an LLM provider."""
    content: str | None
    finish_reason: str = "stop"
    usage: dict[str, int] = field(default_factory=dict)


class LLMProvider(ABC):
    """Abstract completion provider.

    Implementations only need :meth:`chat`; :meth:`complete` maps a size
    class onto a model and wraps a single user turn.
    """

    def __init__(self, models: dict[str, str] | None = None):
        self.models: dict[str, str] = models or {}

    @abstractmethod
    async def chat(
        self,
        messages: list[dict[str, Any]],
        model: str | None = None,
        max_tokens: int = 512,
        temperature: float = 0.8,
    ) -> LLMResponse:
        """Send a chat completion request."""

    @abstractmethod
    def get_default_model(self) -> str:
        """Get the default model for this provider."""

    def model_for(self, size: SizeClass) -> str:
        return self.models.get(size) or self.get_default_model()

    async def complete(self, context: str, size: SizeClass = "small") -> str:
        """Turn a prompt into text, raising GenerationError on empty output."""
        response = await self.chat(
            messages=[{"role": "user", "content": context}],
            model=self.model_for(size),
        )
        text = (response.content or "").strip()
        if not text:
            raise GenerationError(f"Empty completion (finish_reason={response.finish_reason})")
        return text
