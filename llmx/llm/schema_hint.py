"""Natural-language schema hints for providers without mechanical enforcement.

Backends that cannot enforce a JSON Schema are told about the expected
object in their system prompt. The hint lists fields sorted by name so the
rendered text is stable across runs.
"""

from typing import Sequence

from llmx.types.fields import NormalizedField

STRICT_JSON_PREAMBLE = (
    "RETURN ONLY A STRICT JSON OBJECT. NO PROSE, NO EXPLANATIONS, NO MARKDOWN."
)


def build_schema_hint(fields: Sequence[NormalizedField]) -> str:
    """Render fields as an instruction block, or "" when there are none.

    Example:
        >>> build_schema_hint([NormalizedField(name="b"), NormalizedField(name="a", kind="integer")])
        'RETURN ONLY A STRICT JSON OBJECT. NO PROSE, NO EXPLANATIONS, NO MARKDOWN.\\nFields (all required): a: integer, b: string'
    """
    if not fields:
        return ""
    ordered = sorted(fields, key=lambda f: f.name)
    described = ", ".join(f"{f.name}: {f.type_label()}" for f in ordered)
    return f"{STRICT_JSON_PREAMBLE}\nFields (all required): {described}"


def build_strict_json_system(fields: Sequence[NormalizedField], instructions: str) -> str:
    """Merge caller instructions with the schema hint.

    Args:
        fields: Structured output fields
        instructions: Caller instructions, possibly blank

    Returns:
        Instructions, hint, or both separated by a blank line
    """
    instructions = instructions.strip()
    hint = build_schema_hint(fields)
    if not hint:
        return instructions
    if not instructions:
        return hint
    return f"{instructions}\n\n{hint}"
