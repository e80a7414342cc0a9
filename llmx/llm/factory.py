"""LLM provider factory for creating provider instances.

This module maps user-facing provider names (with a few short aliases) to
provider implementations. Lookup is case-sensitive and exact.

Example:
    >>> provider = create_llm_provider("claude")
    >>> provider.name
    'anthropic'
    >>> create_llm_provider("mistral")
    Traceback (most recent call last):
    ...
    llmx.types.errors.UnknownProviderError: unknown provider: 'mistral' (known providers: openai, anthropic, gemini, openai-compat)
"""

from typing import Callable, Dict, List

from llmx.llm.anthropic import AnthropicProvider
from llmx.llm.base import LLMProvider
from llmx.llm.gemini import GeminiProvider
from llmx.llm.openai import OpenAIProvider
from llmx.llm.openai_compat import OpenAICompatProvider
from llmx.types.errors import UnknownProviderError

PROVIDERS: Dict[str, Callable[[], LLMProvider]] = {
    "openai": OpenAIProvider,
    "anthropic": AnthropicProvider,
    "gemini": GeminiProvider,
    "openai-compat": OpenAICompatProvider,
}

# The empty name selects the default provider
PROVIDER_ALIASES: Dict[str, str] = {
    "": "openai",
    "default": "openai",
    "oa": "openai",
    "claude": "anthropic",
    "anth": "anthropic",
    "google": "gemini",
    "gai": "gemini",
    "compat": "openai-compat",
}


def known_providers() -> List[str]:
    """Return canonical provider names in registration order."""
    return list(PROVIDERS)


def create_llm_provider(name: str) -> LLMProvider:
    """Create LLM provider instance based on provider name.

    Args:
        name: Canonical provider name or alias

    Returns:
        LLMProvider implementation

    Raises:
        UnknownProviderError: If the name matches no provider or alias
    """
    canonical = PROVIDER_ALIASES.get(name, name)
    factory = PROVIDERS.get(canonical)
    if factory is None:
        raise UnknownProviderError(name, known_providers())
    return factory()
