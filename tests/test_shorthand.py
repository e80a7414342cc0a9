"""Tests for the --format shorthand compiler."""

import pytest
from pydantic import ValidationError

from llmx.parser import compile_format
from llmx.types.errors import FormatSyntaxError, LlmxError
from llmx.types.fields import NormalizedField


def as_tuples(fields):
    return [(f.name, f.kind, f.element_kind) for f in fields]


class TestCompileFormat:
    """Test valid shorthand strings."""

    def test_empty_string(self):
        """Test that the empty string compiles to no fields."""
        assert compile_format("") == []

    def test_bare_keys_default_to_string(self):
        """Test that keys without a type are strings."""
        assert as_tuples(compile_format("command,explanation")) == [
            ("command", "string", None),
            ("explanation", "string", None),
        ]

    def test_scalar_types(self):
        """Test explicit scalar types are kept."""
        fields = compile_format("name:string,age:integer,score:number,active:boolean,meta:object")
        assert as_tuples(fields) == [
            ("name", "string", None),
            ("age", "integer", None),
            ("score", "number", None),
            ("active", "boolean", None),
            ("meta", "object", None),
        ]

    def test_array_suffix(self):
        """Test that type[] declares an array of that element type."""
        fields = compile_format("tags:string[]")
        assert len(fields) == 1
        assert fields[0].name == "tags"
        assert fields[0].kind == "array"
        assert fields[0].element_kind == "string"
        assert fields[0].is_array

    def test_whitespace_is_trimmed(self):
        """Test whitespace around keys, types and pairs."""
        fields = compile_format("  name : string , tags: integer [] ")
        assert as_tuples(fields) == [("name", "string", None), ("tags", "array", "integer")]

    def test_empty_type_after_colon(self):
        """Test that 'key:' and 'key:   ' mean string."""
        assert as_tuples(compile_format("a:,b:   ")) == [
            ("a", "string", None),
            ("b", "string", None),
        ]

    def test_last_duplicate_wins(self):
        """Test that a repeated key keeps the last declaration."""
        fields = compile_format("a:string,a:integer")
        assert as_tuples(fields) == [("a", "integer", None)]

    def test_unknown_type_passes_through(self):
        """Test that unrecognized type names are not rejected."""
        assert as_tuples(compile_format("when:date")) == [("when", "date", None)]

    def test_names_match_key_list(self):
        """Test that compiled names equal the stripped, de-duplicated key list."""
        shorthand = " x:integer, y ,z:string[], x:number "
        names = {f.name for f in compile_format(shorthand)}
        assert names == {"x", "y", "z"}

    def test_idempotent(self):
        """Test that compiling the same input twice gives equal results."""
        shorthand = "name:string,tags:string[],age:integer"
        assert compile_format(shorthand) == compile_format(shorthand)


class TestCompileFormatErrors:
    """Test malformed shorthand strings."""

    @pytest.mark.parametrize(
        "shorthand",
        [
            ":string",
            "tags:string[][]",
            "name:string:string",
            "name:string, ,age:integer",
            "a,,b",
            ",",
            "tags:[]",
            "tags:array",
            "tags:array[string]",
            "tags:array[]",
        ],
    )
    def test_invalid_shorthand(self, shorthand):
        """Test that each malformed shorthand is rejected."""
        with pytest.raises(FormatSyntaxError):
            compile_format(shorthand)

    def test_error_names_offending_pair(self):
        """Test that the error carries the bad pair verbatim."""
        with pytest.raises(FormatSyntaxError) as exc_info:
            compile_format("ok:string,:integer")
        assert exc_info.value.pair == ":integer"
        assert "':integer'" in str(exc_info.value)

    def test_error_is_llmx_error(self):
        """Test that grammar errors share the llmx base class."""
        with pytest.raises(LlmxError, match="nested array"):
            compile_format("grid:integer[][]")

    def test_whitespace_only_is_rejected(self):
        """Test that a non-empty string with no pairs is an error."""
        with pytest.raises(FormatSyntaxError, match="invalid format pair"):
            compile_format("   ")


class TestNormalizedField:
    """Test NormalizedField invariants."""

    def test_array_requires_element_kind(self):
        """Test that an array without an element kind is invalid."""
        with pytest.raises(ValidationError):
            NormalizedField(name="tags", kind="array")

    def test_scalar_rejects_element_kind(self):
        """Test that scalars cannot carry an element kind."""
        with pytest.raises(ValidationError):
            NormalizedField(name="age", kind="integer", element_kind="string")

    def test_no_nested_arrays(self):
        """Test that element kind cannot be array."""
        with pytest.raises(ValidationError):
            NormalizedField(name="grid", kind="array", element_kind="array")

    def test_type_label(self):
        """Test human-readable labels."""
        assert NormalizedField(name="a", kind="integer").type_label() == "integer"
        assert (
            NormalizedField(name="t", kind="array", element_kind="string").type_label()
            == "array<string>"
        )
