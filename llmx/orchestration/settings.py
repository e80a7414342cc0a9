"""Resolved settings for one llmx invocation.

The CLI merges flags, the selected profile and built-in defaults into a
single immutable `InvocationSettings` before anything touches a provider.
"""

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_TIMEOUT = 120.0


class InvocationSettings(BaseModel):
    """Everything the orchestrator needs besides the prompt text."""

    model_config = ConfigDict(frozen=True)

    provider: str = Field(default="openai", description="Provider name or alias")
    model: str = Field(default="", description="Model name, provider default when empty")
    instructions: str = Field(default="", description="System instructions")
    format: str = Field(default="", description="Output field shorthand")
    base_url: str = Field(default="", description="API base URL override")
    max_tokens: int = Field(default=0, ge=0, description="Output token ceiling, 0 = default")
    verbosity: str = Field(default="", description="Verbosity hint")
    reasoning_effort: str = Field(default="", description="Reasoning effort hint")
    only: str = Field(default="", description="Print only this top-level JSON key")
    error_key: str = Field(default="", description="JSON key whose value signals failure")
    api_key: Optional[str] = Field(default=None, repr=False, description="Explicit API key")
    extra_headers: Dict[str, str] = Field(default_factory=dict, repr=False)
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0, description="HTTP timeout in seconds")
