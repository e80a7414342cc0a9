"""Orchestration of a single llmx request"""

from llmx.orchestration.runner import (
    check_error_field,
    extract_only_key,
    resolve_options,
    run,
    send_request,
    strip_code_fences,
)
from llmx.orchestration.settings import InvocationSettings

__all__ = [
    "InvocationSettings",
    "check_error_field",
    "extract_only_key",
    "resolve_options",
    "run",
    "send_request",
    "strip_code_fences",
]
