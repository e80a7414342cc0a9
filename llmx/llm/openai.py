"""OpenAI Responses API provider.

Structured output is enforced mechanically: fields become a strict JSON
Schema under `text.format`, with every property required and no additional
properties allowed.

Example:
    >>> provider = OpenAIProvider()
    >>> options = RequestOptions(model="gpt-5-nano", message="Say hi")
    >>> request = provider.build_request(provider.build_payload(options), api_key="sk-...")
    >>> request.url
    URL('https://api.openai.com/v1/responses')
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field

from llmx.llm.base import (
    encode_payload,
    join_url,
    json_headers,
    merge_headers,
    parse_envelope,
    resolve_api_key,
)
from llmx.types.fields import RequestOptions

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-5-nano"
DEFAULT_VERBOSITY = "low"
DEFAULT_REASONING_EFFORT = "minimal"
OUTPUT_TEXT_TYPE = "output_text"


class JSONSchemaFormat(BaseModel):
    """`text.format` block requesting strict JSON Schema output."""

    type: str = "json_schema"
    name: str = "response"
    strict: bool = True
    schema_: Dict[str, Any] = Field(..., alias="schema")

    model_config = ConfigDict(populate_by_name=True)


class TextOptions(BaseModel):
    verbosity: Optional[str] = None
    format: Optional[JSONSchemaFormat] = None


class Reasoning(BaseModel):
    effort: str


class OpenAIPayload(BaseModel):
    """Request body for POST /responses."""

    model: str
    instructions: Optional[str] = None
    input: str
    store: bool = False
    text: TextOptions = Field(default_factory=TextOptions)
    reasoning: Optional[Reasoning] = None
    max_output_tokens: Optional[int] = None


class ContentBlock(BaseModel):
    type: Optional[str] = None
    text: Optional[str] = None


class OutputItem(BaseModel):
    content: Optional[List[ContentBlock]] = None


class OpenAIResponse(BaseModel):
    output_text: Optional[str] = None
    output: Optional[List[OutputItem]] = None


class OpenAIProvider:
    """OpenAI Responses API adapter.

    Implements the LLMProvider protocol. Authenticates with a bearer token
    read from OPENAI_API_KEY unless an explicit key is given.
    """

    name = "openai"
    env_var = "OPENAI_API_KEY"
    default_base_url = "https://api.openai.com/v1"

    def default_options(self, model: str = "") -> RequestOptions:
        return RequestOptions(
            model=model or DEFAULT_MODEL,
            verbosity=DEFAULT_VERBOSITY,
            reasoning_effort=DEFAULT_REASONING_EFFORT,
        )

    def build_payload(self, options: RequestOptions) -> OpenAIPayload:
        text = TextOptions(
            verbosity=options.verbosity or None,
            # No fields means free-form text: no schema is sent
            format=(
                JSONSchemaFormat(schema=build_json_schema(options))
                if options.fields
                else None
            ),
        )

        return OpenAIPayload(
            model=options.model,
            instructions=options.instructions or None,
            input=options.message,
            text=text,
            reasoning=(
                Reasoning(effort=options.reasoning_effort)
                if options.reasoning_effort
                else None
            ),
            max_output_tokens=options.max_tokens if options.max_tokens > 0 else None,
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
            join_url(base_url or self.default_base_url, "/responses"),
            headers=merge_headers(headers, extra_headers),
            content=encode_payload(payload),
        )

    def parse_response(self, raw: bytes) -> str:
        envelope = parse_envelope(OpenAIResponse, raw, self.name)
        if envelope.output_text:
            return envelope.output_text

        # Fall back to the first output_text block across output items
        for item in envelope.output or []:
            for block in item.content or []:
                if block.type == OUTPUT_TEXT_TYPE and block.text:
                    return block.text

        logger.debug("OpenAI response carried no output text")
        return ""


def build_json_schema(options: RequestOptions) -> Dict[str, Any]:
    """Render fields as a strict object JSON Schema.

    Example:
        >>> build_json_schema(RequestOptions(fields=(NormalizedField(name="tags", kind="array", element_kind="string"),)))
        {'type': 'object', 'properties': {'tags': {'type': 'array', 'items': {'type': 'string'}}}, 'required': ['tags'], 'additionalProperties': False}
    """
    properties: Dict[str, Any] = {}
    for field in options.fields:
        if field.is_array:
            properties[field.name] = {"type": "array", "items": {"type": field.element_kind}}
        else:
            properties[field.name] = {"type": field.kind}

    return {
        "type": "object",
        "properties": properties,
        "required": [field.name for field in options.fields],
        "additionalProperties": False,
    }
