"""LLM provider abstractions for OpenAI, Anthropic, Gemini and compatible APIs"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from llmx.llm.anthropic import AnthropicProvider
    from llmx.llm.base import LLMProvider
    from llmx.llm.factory import create_llm_provider, known_providers
    from llmx.llm.gemini import GeminiProvider
    from llmx.llm.openai import OpenAIProvider
    from llmx.llm.openai_compat import OpenAICompatProvider

__all__ = [
    "LLMProvider",
    "OpenAIProvider",
    "AnthropicProvider",
    "GeminiProvider",
    "OpenAICompatProvider",
    "create_llm_provider",
    "known_providers",
]

_LAZY_IMPORTS = {
    "LLMProvider": "llmx.llm.base",
    "OpenAIProvider": "llmx.llm.openai",
    "AnthropicProvider": "llmx.llm.anthropic",
    "GeminiProvider": "llmx.llm.gemini",
    "OpenAICompatProvider": "llmx.llm.openai_compat",
    "create_llm_provider": "llmx.llm.factory",
    "known_providers": "llmx.llm.factory",
}


def __getattr__(name: str):
    """Lazy load provider modules on first attribute access."""
    module_path = _LAZY_IMPORTS.get(name)
    if module_path is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    import importlib

    return getattr(importlib.import_module(module_path), name)
