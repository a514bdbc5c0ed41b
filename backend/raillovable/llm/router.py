"""
LLM Router

Provider factory. Maps a configured provider name to its variant and
reuses one instance per provider.
"""
from typing import Dict
import logging

from .base import LLMProvider
from .openai_provider import OpenAIProvider
from .anthropic_provider import AnthropicProvider
from .gemini_provider import GeminiProvider

logger = logging.getLogger(__name__)


PROVIDER_CLASSES: Dict[str, type[LLMProvider]] = {
    "openai": OpenAIProvider,
    "anthropic": AnthropicProvider,
    "gemini": GeminiProvider,
}

# Provider instances, created on first use
_provider_instances: Dict[str, LLMProvider] = {}


def get_llm_provider(name: str) -> LLMProvider:
    """
    Get or create the provider variant for a provider name.

    Variants hold no credentials; keys are passed per call, so one
    instance per provider is enough.
    """
    if name not in _provider_instances:
        provider_cls = PROVIDER_CLASSES.get(name)
        if provider_cls is None:
            raise ValueError(f"Unknown LLM provider: {name}")
        logger.info(f"Initializing {provider_cls.__name__}")
        _provider_instances[name] = provider_cls()

    return _provider_instances[name]
