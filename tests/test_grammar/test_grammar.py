"""Tests for the declaration grammar."""

import pytest

from cssctrl.errors import ErrorKind, StructuralError
from cssctrl.grammar import Declaration, is_declaration, parse_declaration


# ---------------------------------------------------------------------------
# Valid declarations
# ---------------------------------------------------------------------------


class TestParseDeclaration:
    def test_plain(self):
        assert parse_declaration("bg[red]") == Declaration(name="bg", value="red")

    def test_value_with_spaces(self):
        decl = parse_declaration("ts[all 0.3s ease-in]")
        assert decl.name == "ts"
        assert decl.value == "all 0.3s ease-in"

    def test_value_with_nested_brackets(self):
        decl = parse_declaration("bg-img[url(a[1].png)]")
        assert decl.name == "bg-img"
        assert decl.value == "url(a[1].png)"

    def test_empty_value(self):
        assert parse_declaration("ct[]").value == ""

    def test_important(self):
        decl = parse_declaration("c[blue]!")
        assert decl.important
        assert decl.value == "blue"

    def test_runtime_variable(self):
        decl = parse_declaration("$bg[red]")
        assert decl.is_runtime
        assert decl.name == "bg"
        assert decl.value == "red"

    def test_local_variable(self):
        decl = parse_declaration("--&pad[8px]")
        assert decl.is_local
        assert not decl.is_custom
        assert decl.name == "pad"

    def test_custom_property(self):
        decl = parse_declaration("--gap[4px]")
        assert decl.is_custom
        assert not decl.is_local
        assert decl.name == "gap"

    def test_vendor_name(self):
        assert parse_declaration("-webkit-box[1]").name == "-webkit-box"

    def test_condition_clause(self):
        decl = parse_declaration("min-w[600px]")
        assert decl == Declaration(name="min-w", value="600px")


class TestInvalidDeclarations:
    @pytest.mark.parametrize("statement", ["bg", "[red]", "bg[red]x", "bg red", "$[red]", "bg[red]!!"])
    def test_rejected(self, statement):
        with pytest.raises(StructuralError) as exc_info:
            parse_declaration(statement)
        assert exc_info.value.kind is ErrorKind.INVALID_SYNTAX
        assert statement in str(exc_info.value)


class TestIsDeclaration:
    def test_flat(self):
        assert is_declaration("bg[red]")

    def test_function_in_value(self):
        assert is_declaration("bg[rgb(0,0,0)]")

    def test_block(self):
        assert not is_declaration("hover(bg[red])")

    def test_no_brackets(self):
        assert not is_declaration("hover")
