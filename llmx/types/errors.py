"""Custom exception classes for llmx.

Every failure an invocation can hit maps to one class here, so the CLI can
report each category distinctly. Nothing in llmx retries or downgrades these
errors; they terminate the single request.

Example:
    >>> from llmx.types.errors import MissingAPIKeyError
    >>> try:
    ...     provider.build_request(payload)
    ... except MissingAPIKeyError as e:
    ...     print(f"set {e.env_var}")
"""

from typing import Optional, Sequence


class LlmxError(Exception):
    """Base exception for all llmx errors.

    Attributes:
        message: Error message describing what went wrong
        provider: Optional provider name the error relates to

    Example:
        >>> try:
        ...     run(message, settings)
        ... except LlmxError as e:
        ...     logger.error(f"llmx failed: {e}")
    """

    def __init__(self, message: str, provider: Optional[str] = None):
        """Initialize llmx error.

        Args:
            message: Error message
            provider: Optional provider name for context
        """
        self.message = message
        self.provider = provider
        super().__init__(message)

    def __str__(self) -> str:
        """String representation with context."""
        parts = [self.message]
        if self.provider:
            parts.append(f"provider={self.provider}")
        return " | ".join(parts)


class FormatSyntaxError(LlmxError):
    """The --format shorthand string is malformed.

    Attributes:
        pair: The offending comma-separated fragment, verbatim

    Example:
        >>> raise FormatSyntaxError("empty key in format pair", pair=":string")
    """

    def __init__(self, message: str, pair: str):
        self.pair = pair
        super().__init__(f"{message}: {pair!r}")


class UnknownProviderError(LlmxError):
    """Provider name does not match any registered backend."""

    def __init__(self, name: str, known: Sequence[str]):
        self.name = name
        self.known = list(known)
        super().__init__(
            f"unknown provider: {name!r} (known providers: {', '.join(self.known)})"
        )


class MissingAPIKeyError(LlmxError):
    """No API key was supplied and the provider's environment variable is empty.

    The message names the environment variable so the user knows exactly what
    to set. The secret itself is never part of the message.

    Example:
        >>> raise MissingAPIKeyError(provider="anthropic", env_var="ANTHROPIC_API_KEY")
    """

    def __init__(self, provider: str, env_var: str):
        self.env_var = env_var
        super().__init__(f"{env_var} is not set", provider=provider)


class ProviderError(LlmxError):
    """A provider could not build a request from the given payload."""


class TransportError(LlmxError):
    """The HTTP request could not be completed (DNS, connect, timeout, ...)."""


class HTTPStatusError(LlmxError):
    """The backend answered with a non-2xx status.

    Attributes:
        status_code: HTTP status code returned by the backend
        body: Raw response body, decoded leniently for display
    """

    def __init__(self, status_code: int, body: str, provider: Optional[str] = None):
        self.status_code = status_code
        self.body = body
        super().__init__(
            f"request failed with status {status_code}:\n{body}", provider=provider
        )


class ResponseParseError(LlmxError):
    """The HTTP call succeeded but the body is not in the provider's promised shape."""


class StructuredOutputError(LlmxError):
    """Structured JSON output was required but the model did not produce it."""


class MissingKeyError(StructuredOutputError):
    """The requested --only key is absent from the model's JSON object."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"key not found: {key}")


class ErrorFieldGated(LlmxError):
    """The model reported an application-level error through its error field.

    The HTTP request and response parsing both succeeded, but the structured
    output carries a non-empty error string, so the invocation is a failure.
    """


class ConfigError(LlmxError):
    """The profiles configuration file could not be read or is invalid."""
