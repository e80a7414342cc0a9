"""Anthropic Messages API provider.

The Messages API has no mechanical schema enforcement, so structured output
is requested through a strict-JSON hint appended to the system prompt. The
result is best effort: the model is instructed, not constrained.

Example:
    >>> provider = AnthropicProvider()
    >>> provider.default_options().max_tokens
    8192
    >>> provider.default_options("claude-sonnet-4-0").max_tokens
    64000
"""

import logging
from typing import List, Mapping, Optional

import httpx
from pydantic import BaseModel

from llmx.llm.base import (
    encode_payload,
    join_url,
    json_headers,
    merge_headers,
    parse_envelope,
    resolve_api_key,
)
from llmx.llm.schema_hint import build_strict_json_system
from llmx.types.fields import RequestOptions

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-3-5-haiku-latest"
ANTHROPIC_VERSION = "2023-06-01"
FALLBACK_MAX_TOKENS = 4_096
TEXT_BLOCK_TYPE = "text"

# Ordered: the first matching substring wins, so more specific families come first
MAX_TOKENS_BY_FAMILY = (
    (("opus-4-1",), 32_000),
    (("opus-4",), 32_000),
    (("sonnet-4-0", "sonnet-4"), 64_000),
    (("3-7-sonnet",), 64_000),
    (("3-5-sonnet",), 8_192),
    (("3-5-haiku", "haiku-latest"), 8_192),
    (("3-haiku",), 4_096),
)


def default_max_tokens(model: str) -> int:
    """Return the output token ceiling for a model family.

    Matches case-insensitive substrings of the model name and falls back to
    a conservative minimum for unknown models.

    Args:
        model: Anthropic model name

    Returns:
        Default max_tokens value
    """
    lowered = model.lower()
    for needles, limit in MAX_TOKENS_BY_FAMILY:
        if any(needle in lowered for needle in needles):
            return limit
    return FALLBACK_MAX_TOKENS


class Message(BaseModel):
    role: str
    content: str


class AnthropicPayload(BaseModel):
    """Request body for POST /messages."""

    model: str
    max_tokens: int
    messages: List[Message]
    system: Optional[str] = None


class ContentBlock(BaseModel):
    type: Optional[str] = None
    text: Optional[str] = None


class AnthropicResponse(BaseModel):
    content: Optional[List[ContentBlock]] = None


class AnthropicProvider:
    """Anthropic Messages API adapter.

    Implements the LLMProvider protocol. Authenticates with the x-api-key
    header (read from ANTHROPIC_API_KEY unless given) and pins the API
    version header.
    """

    name = "anthropic"
    env_var = "ANTHROPIC_API_KEY"
    default_base_url = "https://api.anthropic.com/v1"

    def default_options(self, model: str = "") -> RequestOptions:
        model = model or DEFAULT_MODEL
        return RequestOptions(model=model, max_tokens=default_max_tokens(model))

    def build_payload(self, options: RequestOptions) -> AnthropicPayload:
        system = options.instructions if options.instructions.strip() else ""
        if options.fields:
            system = build_strict_json_system(options.fields, system)

        max_tokens = options.max_tokens or default_max_tokens(options.model)
        return AnthropicPayload(
            model=options.model,
            max_tokens=max_tokens,
            messages=[Message(role="user", content=options.message)],
            system=system or None,
        )

    def build_request(
        self,
        payload: BaseModel,
        base_url: str = "",
        api_key: Optional[str] = None,
        extra_headers: Optional[Mapping[str, str]] = None,
    ) -> httpx.Request:
        key = resolve_api_key(self.name, self.env_var, api_key)
        headers = json_headers()
        headers["anthropic-version"] = ANTHROPIC_VERSION
        headers["x-api-key"] = key
        return httpx.Request(
            "POST",
            join_url(base_url or self.default_base_url, "/messages"),
            headers=merge_headers(headers, extra_headers),
            content=encode_payload(payload),
        )

    def parse_response(self, raw: bytes) -> str:
        envelope = parse_envelope(AnthropicResponse, raw, self.name)
        # tool_use and other non-text blocks are skipped
        return "".join(
            block.text
            for block in envelope.content or []
            if block.type == TEXT_BLOCK_TYPE and block.text
        )
