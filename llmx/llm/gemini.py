"""Google Gemini generateContent provider.

Structured output uses Gemini's JSON mode: `generationConfig` carries
`responseMimeType: application/json` and a `responseSchema` whose type tags
are upper-cased (STRING, INTEGER, ARRAY, ...). The model name travels in the
URL path and the API key in the `key` query parameter, not in headers.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import quote

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
from llmx.types.errors import ProviderError
from llmx.types.fields import NormalizedField, RequestOptions

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.0-flash"
JSON_MIME_TYPE = "application/json"

GEMINI_TYPE_TAGS = {
    "string": "STRING",
    "integer": "INTEGER",
    "number": "NUMBER",
    "boolean": "BOOLEAN",
    "object": "OBJECT",
    "array": "ARRAY",
}


def to_gemini_type(kind: str) -> str:
    """Map a JSON type name to Gemini's upper-case tag.

    Unknown names are upper-cased as-is; an empty name means STRING.
    """
    normalized = kind.strip().lower()
    if normalized in GEMINI_TYPE_TAGS:
        return GEMINI_TYPE_TAGS[normalized]
    if not normalized:
        return "STRING"
    return kind.upper()


def build_response_schema(fields: List[NormalizedField]) -> Dict[str, Any]:
    """Render fields as a Gemini OBJECT schema with every field required."""
    properties: Dict[str, Any] = {}
    for field in fields:
        if field.is_array:
            properties[field.name] = {
                "type": "ARRAY",
                "items": {"type": to_gemini_type(field.element_kind or "")},
            }
        else:
            properties[field.name] = {"type": to_gemini_type(field.kind)}
    return {
        "type": "OBJECT",
        "properties": properties,
        "required": [field.name for field in fields],
    }


class Part(BaseModel):
    text: str


class Content(BaseModel):
    parts: List[Part]


class GenerationConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    max_output_tokens: Optional[int] = Field(default=None, alias="maxOutputTokens")
    response_mime_type: Optional[str] = Field(default=None, alias="responseMimeType")
    response_schema: Optional[Dict[str, Any]] = Field(default=None, alias="responseSchema")


class GeminiPayload(BaseModel):
    """Request body for :generateContent.

    `model` is kept on the payload for URL construction but excluded from
    the serialized body.
    """

    model_config = ConfigDict(populate_by_name=True)

    model: str = Field(..., exclude=True)
    contents: List[Content]
    system_instruction: Optional[Content] = Field(default=None, alias="systemInstruction")
    generation_config: Optional[GenerationConfig] = Field(
        default=None, alias="generationConfig"
    )


class ResponsePart(BaseModel):
    text: Optional[str] = None


class ResponseContent(BaseModel):
    parts: Optional[List[ResponsePart]] = None


class Candidate(BaseModel):
    content: Optional[ResponseContent] = None


class GeminiResponse(BaseModel):
    candidates: Optional[List[Candidate]] = None


class GeminiProvider:
    """Gemini generateContent adapter.

    Implements the LLMProvider protocol. The API key is read from
    GEMINI_API_KEY unless given and is sent as a query parameter.
    """

    name = "gemini"
    env_var = "GEMINI_API_KEY"
    default_base_url = "https://generativelanguage.googleapis.com"

    def default_options(self, model: str = "") -> RequestOptions:
        # No max token default: Gemini applies its own when unset
        return RequestOptions(model=model or DEFAULT_MODEL)

    def build_payload(self, options: RequestOptions) -> GeminiPayload:
        system_instruction = None
        if options.instructions.strip():
            system_instruction = Content(parts=[Part(text=options.instructions)])

        generation_config = None
        if options.max_tokens > 0 or options.fields:
            generation_config = GenerationConfig(
                max_output_tokens=options.max_tokens if options.max_tokens > 0 else None,
                response_mime_type=JSON_MIME_TYPE if options.fields else None,
                response_schema=(
                    build_response_schema(list(options.fields)) if options.fields else None
                ),
            )

        return GeminiPayload(
            model=options.model,
            contents=[Content(parts=[Part(text=options.message)])],
            system_instruction=system_instruction,
            generation_config=generation_config,
        )

    def build_request(
        self,
        payload: BaseModel,
        base_url: str = "",
        api_key: Optional[str] = None,
        extra_headers: Optional[Mapping[str, str]] = None,
    ) -> httpx.Request:
        model = getattr(payload, "model", "")
        if not model or not model.strip():
            raise ProviderError("gemini: model is required", provider=self.name)

        key = resolve_api_key(self.name, self.env_var, api_key)
        url = join_url(
            base_url or self.default_base_url,
            f"/v1beta/models/{quote(model, safe='')}:generateContent",
        )
        return httpx.Request(
            "POST",
            url,
            params={"key": key},
            headers=merge_headers(json_headers(), extra_headers),
            content=encode_payload(payload),
        )

    def parse_response(self, raw: bytes) -> str:
        envelope = parse_envelope(GeminiResponse, raw, self.name)
        if not envelope.candidates:
            return ""

        # Only the first candidate is used
        content = envelope.candidates[0].content
        if content is None:
            return ""
        return "".join(part.text for part in content.parts or [] if part.text)
