"""Type definitions and shared models"""

from llmx.types.errors import (
    ConfigError,
    ErrorFieldGated,
    FormatSyntaxError,
    HTTPStatusError,
    LlmxError,
    MissingAPIKeyError,
    MissingKeyError,
    ProviderError,
    ResponseParseError,
    StructuredOutputError,
    TransportError,
    UnknownProviderError,
)
from llmx.types.fields import NormalizedField, RequestOptions

__all__ = [
    # Models
    "NormalizedField",
    "RequestOptions",
    # Errors
    "LlmxError",
    "FormatSyntaxError",
    "UnknownProviderError",
    "MissingAPIKeyError",
    "ProviderError",
    "TransportError",
    "HTTPStatusError",
    "ResponseParseError",
    "StructuredOutputError",
    "MissingKeyError",
    "ErrorFieldGated",
    "ConfigError",
]
