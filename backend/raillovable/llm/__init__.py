# LLM Providers
from .base import (
    LLMProvider,
    GenerationError,
    ConfigError,
    TransportError,
    ProviderError,
    Cancelled,
)
from .openai_provider import OpenAIProvider
from .anthropic_provider import AnthropicProvider
from .gemini_provider import GeminiProvider
from .router import get_llm_provider
from .gateway import ProviderGateway

__all__ = [
    "LLMProvider",
    "GenerationError",
    "ConfigError",
    "TransportError",
    "ProviderError",
    "Cancelled",
    "OpenAIProvider",
    "AnthropicProvider",
    "GeminiProvider",
    "get_llm_provider",
    "ProviderGateway",
]
