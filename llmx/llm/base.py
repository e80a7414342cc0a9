"""LLM provider protocol for abstraction layer.

This module defines the Protocol every backend implements, plus the small
helpers the implementations share (credential resolution, header merging,
response envelope validation). Adding a backend means writing one class that
satisfies `LLMProvider` and registering it in `llmx.llm.factory`; the
orchestrator never changes.

Example:
    >>> provider: LLMProvider = create_llm_provider("anthropic")
    >>> options = provider.default_options().model_copy(update={"message": "hi"})
    >>> request = provider.build_request(provider.build_payload(options))
    >>> text = provider.parse_response(raw_bytes)
"""

import os
from typing import Dict, Mapping, Optional, Protocol, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from llmx.types.errors import MissingAPIKeyError, ResponseParseError
from llmx.types.fields import RequestOptions

EnvelopeT = TypeVar("EnvelopeT", bound=BaseModel)

JSON_CONTENT_TYPE = "application/json"


class LLMProvider(Protocol):
    """Protocol for LLM providers using duck typing.

    Implementations:
        - OpenAIProvider: Responses API with strict JSON Schema output
        - AnthropicProvider: Messages API with schema hints in the system prompt
        - GeminiProvider: generateContent with JSON mode and responseSchema
        - OpenAICompatProvider: Chat Completions for OpenAI-compatible servers

    Attributes:
        name: Canonical provider name
        env_var: Environment variable holding the API key
        default_base_url: Base URL used when the caller supplies none
    """

    name: str
    env_var: str
    default_base_url: str

    def default_options(self, model: str = "") -> RequestOptions:
        """Return provider defaults used to fill settings the caller left blank.

        Args:
            model: Model the caller selected, for model-dependent defaults
                such as max tokens. Empty means the provider's default model.

        Returns:
            RequestOptions carrying at least the default model name
        """
        ...

    def build_payload(self, options: RequestOptions) -> BaseModel:
        """Build the provider-native request body.

        Args:
            options: Fully resolved request options (never mutated)

        Returns:
            Pydantic model that serializes to the provider's JSON body
        """
        ...

    def build_request(
        self,
        payload: BaseModel,
        base_url: str = "",
        api_key: Optional[str] = None,
        extra_headers: Optional[Mapping[str, str]] = None,
    ) -> httpx.Request:
        """Build the HTTP request carrying the payload.

        Args:
            payload: Model returned by build_payload
            base_url: API base URL; provider default when empty
            api_key: Explicit key; falls back to the provider's env var
            extra_headers: Additional headers; empty names/values are skipped

        Returns:
            Unsent httpx.Request

        Raises:
            MissingAPIKeyError: If no key is supplied or found in the environment
        """
        ...

    def parse_response(self, raw: bytes) -> str:
        """Extract plain text from a successful response body.

        Args:
            raw: Raw response bytes

        Returns:
            Extracted text; "" for a well-formed but empty response

        Raises:
            ResponseParseError: If the body is not JSON of the expected shape
        """
        ...


def resolve_api_key(provider: str, env_var: str, api_key: Optional[str]) -> str:
    """Return the explicit key, or the env var value, or raise.

    Raises:
        MissingAPIKeyError: If neither source yields a non-empty key
    """
    key = (api_key or os.getenv(env_var, "")).strip()
    if not key:
        raise MissingAPIKeyError(provider=provider, env_var=env_var)
    return key


def merge_headers(
    base: Dict[str, str], extra_headers: Optional[Mapping[str, str]]
) -> Dict[str, str]:
    headers = dict(base)
    for name, value in (extra_headers or {}).items():
        if not name or not value:
            continue
        headers[name] = value
    return headers


def json_headers() -> Dict[str, str]:
    return {"Content-Type": JSON_CONTENT_TYPE, "Accept": JSON_CONTENT_TYPE}


def encode_payload(payload: BaseModel) -> bytes:
    """Serialize a payload model using wire names, dropping unset optionals."""
    return payload.model_dump_json(by_alias=True, exclude_none=True).encode("utf-8")


def join_url(base_url: str, path: str) -> str:
    return base_url.rstrip("/") + path


def parse_envelope(envelope: Type[EnvelopeT], raw: bytes, provider: str) -> EnvelopeT:
    """Validate raw response bytes against a provider's envelope model.

    Raises:
        ResponseParseError: If the bytes are not valid JSON of that shape
    """
    try:
        return envelope.model_validate_json(raw)
    except ValidationError as e:
        raise ResponseParseError(
            f"failed to parse response: {e.error_count()} error(s), "
            f"first: {e.errors()[0]['msg']}",
            provider=provider,
        ) from e
