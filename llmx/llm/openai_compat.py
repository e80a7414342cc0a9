"""OpenAI-compatible Chat Completions provider.

For servers that speak the `/chat/completions` dialect (local inference
servers, gateways, other vendors). Structured output is requested through
the same strict-JSON system hint the Anthropic provider uses, since
`response_format` support varies between compatible servers.
"""

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

DEFAULT_MODEL = "gpt-4o-mini"


class ChatMessage(BaseModel):
    role: str
    content: str


class ChatPayload(BaseModel):
    """Request body for POST /chat/completions."""

    model: str
    messages: List[ChatMessage]
    max_tokens: Optional[int] = None


class ChoiceMessage(BaseModel):
    content: Optional[str] = None


class Choice(BaseModel):
    message: Optional[ChoiceMessage] = None


class ChatResponse(BaseModel):
    choices: Optional[List[Choice]] = None


class OpenAICompatProvider:
    """Chat Completions adapter for OpenAI-compatible endpoints."""

    name = "openai-compat"
    env_var = "OPENAI_API_KEY"
    default_base_url = "https://api.openai.com/v1"

    def default_options(self, model: str = "") -> RequestOptions:
        return RequestOptions(model=model or DEFAULT_MODEL)

    def build_payload(self, options: RequestOptions) -> ChatPayload:
        messages = []
        system = build_strict_json_system(options.fields, options.instructions)
        if system:
            messages.append(ChatMessage(role="system", content=system))
        messages.append(ChatMessage(role="user", content=options.message))

        return ChatPayload(
            model=options.model,
            messages=messages,
            max_tokens=options.max_tokens if options.max_tokens > 0 else None,
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
        headers["Authorization"] = f"Bearer {key}"
        return httpx.Request(
            "POST",
            join_url(base_url or self.default_base_url, "/chat/completions"),
            headers=merge_headers(headers, extra_headers),
            content=encode_payload(payload),
        )

    def parse_response(self, raw: bytes) -> str:
        envelope = parse_envelope(ChatResponse, raw, self.name)
        if not envelope.choices:
            return ""
        message = envelope.choices[0].message
        return (message.content or "") if message else ""
