"""Provider-agnostic request models.

`NormalizedField` is the compiled form of one `--format` shorthand entry and
`RequestOptions` is the full bag of settings handed to a provider's payload
builder. Both are frozen: they are built once per invocation and never
mutated afterwards.

Example:
    >>> from llmx.types.fields import NormalizedField, RequestOptions
    >>> tags = NormalizedField(name="tags", kind="array", element_kind="string")
    >>> options = RequestOptions(model="gpt-5-nano", message="hi", fields=(tags,))
"""

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

STRING = "string"
INTEGER = "integer"
NUMBER = "number"
BOOLEAN = "boolean"
OBJECT = "object"
ARRAY = "array"

KNOWN_KINDS = (STRING, INTEGER, NUMBER, BOOLEAN, OBJECT, ARRAY)


class NormalizedField(BaseModel):
    """One declared output key.

    Attributes:
        name: Field name (non-empty)
        kind: JSON type name; unknown names are passed through untouched
        element_kind: Element type, set only when kind is "array"
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Output key name")
    kind: str = Field(default=STRING, description="JSON type of the value")
    element_kind: Optional[str] = Field(
        default=None, description="Element type for array fields"
    )

    @model_validator(mode="after")
    def validate_element_kind(self) -> "NormalizedField":
        """Keep element_kind consistent with kind.

        Raises:
            ValueError: If an array has no element kind, a nested array
                element kind, or a scalar carries an element kind
        """
        if self.kind == ARRAY:
            if not self.element_kind:
                raise ValueError(f"array field {self.name!r} requires an element kind")
            if self.element_kind == ARRAY or self.element_kind.endswith("[]"):
                raise ValueError(f"array field {self.name!r} cannot nest arrays")
        elif self.element_kind is not None:
            raise ValueError(f"element_kind is only valid for array fields ({self.name!r})")
        return self

    @property
    def is_array(self) -> bool:
        return self.kind == ARRAY

    def type_label(self) -> str:
        """Human-readable type used in natural-language schema hints."""
        if self.is_array:
            return f"array<{self.element_kind}>"
        return self.kind


class RequestOptions(BaseModel):
    """Settings for one provider call.

    Attributes:
        model: Model name (provider default fills it when empty)
        instructions: Free-form system instructions
        message: Prompt body; required, may be the empty string
        verbosity: Provider-specific verbosity hint
        reasoning_effort: Provider-specific reasoning effort hint
        max_tokens: Output token ceiling, 0 means provider default
        fields: Structured output fields, empty for free-form text
    """

    model_config = ConfigDict(frozen=True)

    model: str = ""
    instructions: str = ""
    message: str = ""
    verbosity: str = ""
    reasoning_effort: str = ""
    max_tokens: int = Field(default=0, ge=0)
    fields: Tuple[NormalizedField, ...] = ()
