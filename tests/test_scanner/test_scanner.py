"""Tests for the bracket-aware scanner."""

import pytest

from cssctrl.errors import ErrorKind, StructuralError
from cssctrl.scanner import (
    ScanState,
    Scanner,
    find_matching_brace,
    split_statements,
    split_top_level,
)


# ---------------------------------------------------------------------------
# Statement splitting
# ---------------------------------------------------------------------------


class TestSplitStatements:
    def test_splits_on_whitespace(self):
        assert split_statements("bg[red] c[blue]") == ["bg[red]", "c[blue]"]

    def test_several_tokens_and_block_on_one_line(self):
        assert split_statements("bg[red] hover(bg[blue])") == ["bg[red]", "hover(bg[blue])"]

    def test_whitespace_inside_value_kept(self):
        assert split_statements("ts[all 0.3s ease] w[10px]") == ["ts[all 0.3s ease]", "w[10px]"]

    def test_newlines_separate_statements(self):
        assert split_statements("\n  bg[red]\n\n  c[blue]\n") == ["bg[red]", "c[blue]"]

    def test_multiline_block_is_one_statement(self):
        statements = split_statements("hover(\n  bg[red]\n  c[blue]\n)\nw[1px]")
        assert len(statements) == 2
        assert statements[0].startswith("hover(")
        assert statements[0].endswith(")")
        assert "\n" not in statements[0]
        assert statements[1] == "w[1px]"

    def test_function_call_in_value(self):
        assert split_statements("bg[rgb(0, 0, 0)] c[red]") == ["bg[rgb(0, 0, 0)]", "c[red]"]

    def test_function_call_inside_block(self):
        assert split_statements("hover(w[calc(100% - 4px)])") == ["hover(w[calc(100% - 4px)])"]

    def test_empty_text(self):
        assert split_statements("   \n  ") == []


class TestScanErrors:
    def test_nested_block_rejected(self):
        with pytest.raises(StructuralError, match="Nested blocks"):
            split_statements("hover(focus(bg[red]))")

    def test_stray_closing_bracket(self):
        with pytest.raises(StructuralError) as exc_info:
            split_statements("bg[red]]")
        assert exc_info.value.kind is ErrorKind.UNBALANCED

    def test_stray_closing_paren(self):
        with pytest.raises(StructuralError) as exc_info:
            split_statements("bg[red])")
        assert exc_info.value.kind is ErrorKind.UNBALANCED

    def test_unclosed_bracket(self):
        with pytest.raises(StructuralError) as exc_info:
            split_statements("bg[red")
        assert exc_info.value.kind is ErrorKind.UNTERMINATED_BLOCK

    def test_unclosed_block(self):
        with pytest.raises(StructuralError) as exc_info:
            split_statements("hover(bg[red]")
        assert exc_info.value.kind is ErrorKind.UNTERMINATED_BLOCK

    def test_brace_inside_block(self):
        with pytest.raises(StructuralError, match="not allowed inside a block"):
            split_statements("hover(bg[red] })")

    def test_directive_inside_block(self):
        with pytest.raises(StructuralError, match="not allowed inside a block"):
            split_statements("hover(@query .x)")

    def test_error_message_has_prefix(self):
        with pytest.raises(StructuralError, match=r"^\[CSS-CTRL-ERR\]"):
            split_statements("bg[red")


# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------


class TestScanner:
    def _states(self, text: str) -> list[ScanState]:
        scanner = Scanner(text)
        states = []
        while not scanner.at_end():
            scanner.step()
            states.append(scanner.state)
        return states

    def test_value_state(self):
        assert self._states("a[b]") == [
            ScanState.PLAIN,
            ScanState.VALUE,
            ScanState.VALUE,
            ScanState.PLAIN,
        ]

    def test_function_inside_value(self):
        states = self._states("a[f(x)]")
        assert ScanState.FUNCTION in states
        assert states[-1] is ScanState.PLAIN

    def test_block_state(self):
        states = self._states("hover(a[b])")
        assert states[5] is ScanState.BLOCK
        assert states[-1] is ScanState.PLAIN

    def test_depths_never_negative(self):
        scanner = Scanner("hover(w[calc(1px + min(2px, 3px))])")
        while not scanner.at_end():
            scanner.step()
            assert scanner.paren_depth >= 0
            assert scanner.bracket_depth >= 0
        assert scanner.at_top_level
        scanner.finish()

    def test_function_parens_counted_separately(self):
        scanner = Scanner("hover(w[calc(1px)]")
        while not scanner.at_end():
            scanner.step()
        assert scanner.state is ScanState.BLOCK
        with pytest.raises(StructuralError):
            scanner.finish()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestSplitTopLevel:
    def test_first_comma_outside_brackets(self):
        assert split_top_level("md, w[1px]", ",") == ("md", " w[1px]")

    def test_comma_inside_brackets_ignored(self):
        assert split_top_level("w[rgb(1,2,3)]", ",") is None

    def test_only_first_split(self):
        assert split_top_level("a,b,c", ",") == ("a", "b,c")


class TestFindMatchingBrace:
    def test_nested(self):
        assert find_matching_brace("a { b { c } } d", 2) == 12

    def test_brace_in_value_ignored(self):
        assert find_matching_brace("{ ct[}] }", 0) == 8

    def test_unterminated(self):
        with pytest.raises(StructuralError) as exc_info:
            find_matching_brace("a {\n b { c }\n", 2)
        assert exc_info.value.kind is ErrorKind.UNTERMINATED_BLOCK
        assert exc_info.value.line == 1
