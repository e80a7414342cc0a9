"""Compiler for the `--format` shorthand grammar.

The shorthand is a comma-separated list of `key` or `key:type` pairs, where
`type` may carry a `[]` suffix to declare an array of that element type:

    name:string,age:integer,tags:string[],nickname

Example:
    >>> fields = compile_format("name,age:integer,tags:string[]")
    >>> [(f.name, f.kind, f.element_kind) for f in fields]
    [('name', 'string', None), ('age', 'integer', None), ('tags', 'array', 'string')]
"""

import logging
from typing import Dict, List

from llmx.types.errors import FormatSyntaxError
from llmx.types.fields import ARRAY, STRING, NormalizedField

logger = logging.getLogger(__name__)

ARRAY_SUFFIX = "[]"
LEGACY_ARRAY_PREFIX = "array["


def compile_format(shorthand: str) -> List[NormalizedField]:
    """Parse a shorthand string into normalized fields.

    The empty string compiles to an empty list; whether that means "no
    schema" is up to the caller. Later pairs overwrite earlier pairs that
    declare the same key. Parsing is all-or-nothing.

    Args:
        shorthand: Shorthand string such as "name:string,tags:string[]"

    Returns:
        List of NormalizedField with unique names

    Raises:
        FormatSyntaxError: If any pair is malformed
    """
    if shorthand == "":
        return []

    fields: Dict[str, NormalizedField] = {}
    for pair in shorthand.split(","):
        field = _compile_pair(pair)
        fields[field.name] = field

    logger.debug(f"Compiled format {shorthand!r} into {len(fields)} field(s)")
    return list(fields.values())


def _compile_pair(pair: str) -> NormalizedField:
    trimmed = pair.strip()
    if not trimmed:
        raise FormatSyntaxError("invalid format pair", pair=pair)

    key, sep, type_part = trimmed.partition(":")
    key = key.strip()
    if not key:
        raise FormatSyntaxError("empty key in format pair", pair=pair)

    type_str = STRING
    if sep:
        if ":" in type_part:
            raise FormatSyntaxError("invalid format pair", pair=pair)
        if type_part.strip():
            type_str = type_part.strip()

    if type_str.endswith(ARRAY_SUFFIX):
        element = type_str[: -len(ARRAY_SUFFIX)].strip()
        if not element:
            raise FormatSyntaxError("empty element type in array specification", pair=pair)
        if element.endswith(ARRAY_SUFFIX) or element == ARRAY:
            raise FormatSyntaxError("nested array types are not supported", pair=pair)
        return NormalizedField(name=key, kind=ARRAY, element_kind=element)

    if type_str == ARRAY or type_str.startswith(LEGACY_ARRAY_PREFIX):
        raise FormatSyntaxError(
            "invalid array specification, use type[] syntax", pair=pair
        )

    return NormalizedField(name=key, kind=type_str)
