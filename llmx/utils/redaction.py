"""Masking helpers for debug logging.

Requests are logged at DEBUG level with credentials replaced, so that
`--debug` output can be pasted into a bug report safely.

Example:
    >>> redact_headers({"Authorization": "Bearer sk-abc123", "Accept": "application/json"})
    {'Authorization': 'Bearer ***', 'Accept': 'application/json'}
"""

from typing import Dict, Mapping

import httpx

MASK = "***"
SECRET_HEADERS = {"authorization", "x-api-key", "api-key", "x-goog-api-key"}
SECRET_QUERY_PARAMS = {"key", "api_key"}


def redact_value(value: str) -> str:
    # Keep the auth scheme so "Bearer" vs raw key is still visible
    scheme, sep, _ = value.partition(" ")
    if sep and scheme.lower() == "bearer":
        return f"{scheme} {MASK}"
    return MASK


def redact_headers(headers: Mapping[str, str]) -> Dict[str, str]:
    return {
        name: redact_value(value) if name.lower() in SECRET_HEADERS else value
        for name, value in headers.items()
    }


def redact_url(url: httpx.URL) -> str:
    """Return the URL as text with secret query parameters masked."""
    for name in SECRET_QUERY_PARAMS:
        if name in url.params:
            url = url.copy_set_param(name, "REDACTED")
    return str(url)


def describe_request(request: httpx.Request) -> str:
    """One-line summary of a request suitable for DEBUG logs."""
    headers = redact_headers(dict(request.headers))
    return (
        f"{request.method} {redact_url(request.url)} "
        f"headers={headers} body_bytes={len(request.content)}"
    )
