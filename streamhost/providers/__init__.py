"""Text generation providers."""

from streamhost.providers.base import LLMProvider, LLMResponse, SizeClass
from streamhost.providers.openai_compat import OpenAICompatProvider

__all__ = ["LLMProvider", "LLMResponse", "SizeClass", "OpenAICompatProvider"]
