"""Single-request orchestration over the provider interface.

Flow for one invocation:

1. Resolve the provider and merge settings over its defaults
2. Compile the format shorthand and build the provider payload/request
3. Perform exactly one HTTP round-trip (no retries)
4. Parse the provider envelope into text
5. Fail if the model filled in the configured error field
6. Optionally reduce the output to a single JSON key

Example:
    >>> settings = InvocationSettings(provider="openai", format="command,explanation", only="command")
    >>> run("list go files recursively", settings)
    'find . -name "*.go"'
"""

import json
import logging
from typing import Any, Dict, Optional

import httpx

from llmx.llm.base import LLMProvider
from llmx.llm.factory import create_llm_provider
from llmx.orchestration.settings import InvocationSettings
from llmx.parser.shorthand import compile_format
from llmx.types.errors import (
    ErrorFieldGated,
    HTTPStatusError,
    MissingKeyError,
    StructuredOutputError,
    TransportError,
)
from llmx.types.fields import RequestOptions
from llmx.utils.redaction import describe_request

logger = logging.getLogger(__name__)

CODE_FENCE = "```"


def resolve_options(
    provider: LLMProvider, settings: InvocationSettings, message: str
) -> RequestOptions:
    """Merge caller settings over provider defaults.

    Args:
        provider: Selected provider
        settings: Caller settings (flags and profile already merged)
        message: Prompt body

    Returns:
        Fully populated RequestOptions

    Raises:
        FormatSyntaxError: If the format shorthand is malformed
    """
    defaults = provider.default_options(settings.model)
    fields = compile_format(settings.format)
    return RequestOptions(
        model=settings.model or defaults.model,
        instructions=settings.instructions or defaults.instructions,
        message=message,
        verbosity=settings.verbosity or defaults.verbosity,
        reasoning_effort=settings.reasoning_effort or defaults.reasoning_effort,
        max_tokens=settings.max_tokens or defaults.max_tokens,
        fields=tuple(fields),
    )


def send_request(
    request: httpx.Request, client: httpx.Client, provider: Optional[str] = None
) -> bytes:
    """Send one request and return the body of a 2xx response.

    Raises:
        TransportError: If the backend could not be reached or timed out
        HTTPStatusError: If the status is not 2xx (body kept verbatim)
    """
    host = request.url.host
    # Requests built outside client.build_request() carry no timeout of their own
    request.extensions.setdefault("timeout", client.timeout.as_dict())
    try:
        response = client.send(request)
    except httpx.TimeoutException as e:
        raise TransportError(f"request to {host} timed out: {e}", provider=provider) from e
    except httpx.ConnectError as e:
        raise TransportError(f"could not reach host {host}: {e}", provider=provider) from e
    except httpx.HTTPError as e:
        raise TransportError(f"request to {host} failed: {e}", provider=provider) from e

    logger.debug(f"Received HTTP {response.status_code} ({len(response.content)} bytes)")
    if not response.is_success:
        raise HTTPStatusError(response.status_code, response.text, provider=provider)
    return response.content


def strip_code_fences(text: str) -> str:
    """Remove a markdown code fence wrapping the whole text.

    The fence is only removed when the first non-empty line opens it and the
    last non-empty line is a bare closing fence. Otherwise the text comes
    back with trailing whitespace trimmed.

    Example:
        >>> strip_code_fences('```json\\n{"a": 1}\\n```\\n')
        '{"a": 1}'
    """
    lines = text.strip().split("\n")
    if len(lines) >= 2 and lines[0].startswith(CODE_FENCE) and lines[-1].strip() == CODE_FENCE:
        return "\n".join(lines[1:-1]).strip()
    return text.rstrip()


def _decode_object(text: str) -> Optional[Dict[str, Any]]:
    try:
        decoded = json.loads(strip_code_fences(text))
    except json.JSONDecodeError:
        return None
    return decoded if isinstance(decoded, dict) else None


def check_error_field(text: str, error_key: str) -> None:
    """Fail when structured output reports an error.

    Free-form (non-JSON) text never trips the gate. A value of "", a
    whitespace-only string, the literal "null", or a non-string value
    counts as no error.

    Raises:
        ErrorFieldGated: If the error field holds a real error message
    """
    if not error_key:
        return
    decoded = _decode_object(text)
    if decoded is None:
        return
    value = decoded.get(error_key)
    if isinstance(value, str) and value.strip() and value.strip() != "null":
        raise ErrorFieldGated(value)


def extract_only_key(text: str, key: str) -> str:
    """Return one top-level value from the model's JSON object.

    Strings are returned verbatim, everything else as compact JSON.

    Raises:
        StructuredOutputError: If the text is not a JSON object
        MissingKeyError: If the key is absent
    """
    try:
        decoded = json.loads(strip_code_fences(text))
    except json.JSONDecodeError as e:
        raise StructuredOutputError(
            f"--only requires structured JSON output; failed to parse JSON: {e}"
        ) from e
    if not isinstance(decoded, dict):
        raise StructuredOutputError(
            f"--only requires a JSON object, got {type(decoded).__name__}"
        )
    if key not in decoded:
        raise MissingKeyError(key)

    value = decoded[key]
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def run(
    message: str,
    settings: InvocationSettings,
    client: Optional[httpx.Client] = None,
) -> str:
    """Execute one prompt against the configured provider.

    Args:
        message: Prompt body
        settings: Resolved invocation settings
        client: Optional httpx client; one is created (and closed) when omitted

    Returns:
        Final output text

    Raises:
        LlmxError: Any subclass, depending on which step failed
    """
    provider = create_llm_provider(settings.provider)
    options = resolve_options(provider, settings, message)
    logger.debug(
        f"Using provider={provider.name} model={options.model} "
        f"fields={[f.name for f in options.fields]} max_tokens={options.max_tokens}"
    )

    payload = provider.build_payload(options)
    request = provider.build_request(
        payload,
        base_url=settings.base_url,
        api_key=settings.api_key,
        extra_headers=settings.extra_headers,
    )
    logger.debug(f"Sending {describe_request(request)}")

    if client is None:
        with httpx.Client(timeout=settings.timeout) as owned_client:
            raw = send_request(request, owned_client, provider=provider.name)
    else:
        raw = send_request(request, client, provider=provider.name)

    text = provider.parse_response(raw)
    check_error_field(text, settings.error_key)
    if settings.only:
        text = extract_only_key(text, settings.only)
    return text
