"""Tests for the block extractor."""

import pytest

from cssctrl.errors import ErrorKind, StructuralError
from cssctrl.extractor import extract_blocks, resolve_scope
from cssctrl.model import ClassBlock, Directive


SOURCE = """\
@scope app

@const base {
  d[flex]
  p[8px] hover(c[red])
}

@keyframe fade {
  from(op[0])
  to(op[1])
}

@bind pair .a .b

.a {
  @use base
  c[blue]
}

.b { m[4px] }
"""


# ---------------------------------------------------------------------------
# Full file
# ---------------------------------------------------------------------------


class TestExtractBlocks:
    def test_consts(self):
        blocks = extract_blocks(SOURCE)
        assert len(blocks.consts) == 1
        assert blocks.consts[0].name == "base"
        assert blocks.consts[0].statements == ("d[flex]", "p[8px]", "hover(c[red])")

    def test_keyframes_keep_raw_body(self):
        blocks = extract_blocks(SOURCE)
        assert [k.name for k in blocks.keyframes] == ["fade"]
        assert "from(op[0])" in blocks.keyframes[0].body
        assert "to(op[1])" in blocks.keyframes[0].body

    def test_directives_in_source_order(self):
        blocks = extract_blocks(SOURCE)
        assert blocks.directives == [Directive("scope", "app"), Directive("bind", "pair .a .b")]

    def test_classes_in_source_order(self):
        blocks = extract_blocks(SOURCE)
        assert [c.name for c in blocks.classes] == ["a", "b"]
        assert "@use base" in blocks.classes[0].body
        assert blocks.classes[1] == ClassBlock("b", " m[4px] ")

    def test_empty_source(self):
        blocks = extract_blocks("")
        assert blocks.consts == []
        assert blocks.classes == []
        assert blocks.directives == []

    def test_braces_inside_values_ignored(self):
        blocks = extract_blocks(".a { ct[{] }")
        assert blocks.classes[0].body == " ct[{] "

    def test_reserved_marker_rejected(self):
        with pytest.raises(StructuralError, match="Reserved"):
            extract_blocks(".a { c[⟦x⟧] }")


# ---------------------------------------------------------------------------
# @const
# ---------------------------------------------------------------------------


class TestConstErrors:
    def test_query_in_const(self):
        with pytest.raises(StructuralError, match="@query"):
            extract_blocks("@const base {\n  @query .x { c[red] }\n}")

    def test_nested_braces_in_const(self):
        with pytest.raises(StructuralError, match="Nested blocks") as exc_info:
            extract_blocks("\n@const base {\n  { c[red] }\n}")
        assert exc_info.value.line == 2

    def test_duplicate_const(self):
        source = "@const a { c[red] }\n@const a { c[blue] }\n"
        with pytest.raises(StructuralError) as exc_info:
            extract_blocks(source)
        assert exc_info.value.kind is ErrorKind.DUPLICATE_NAME

    def test_duplicate_keyframe(self):
        source = "@keyframe k { from(op[0]) }\n@keyframe k { to(op[1]) }\n"
        with pytest.raises(StructuralError, match='"k"') as exc_info:
            extract_blocks(source)
        assert exc_info.value.kind is ErrorKind.DUPLICATE_NAME
        assert exc_info.value.line == 2


# ---------------------------------------------------------------------------
# Directives
# ---------------------------------------------------------------------------


class TestDirectives:
    def test_invalid_scope_name(self):
        with pytest.raises(StructuralError, match="Scope name") as exc_info:
            extract_blocks("\n\n@scope my.app\n")
        assert exc_info.value.line == 3

    def test_second_scope(self):
        with pytest.raises(StructuralError, match="Only one @scope") as exc_info:
            extract_blocks("@scope a\n@scope b\n")
        assert exc_info.value.kind is ErrorKind.DUPLICATE_NAME

    def test_directive_inside_class_not_extracted(self):
        blocks = extract_blocks(".a {\n  @use base\n}\n")
        assert blocks.directives == []
        assert "@use base" in blocks.classes[0].body

    def test_top_level_use_is_stray_text(self):
        with pytest.raises(StructuralError, match="Unexpected top-level text"):
            extract_blocks("@use base\n.a { c[red] }\n")


class TestResolveScope:
    def test_default_is_none(self):
        assert resolve_scope([]) == "none"

    def test_declared_scope(self):
        assert resolve_scope([Directive("bind", "x .a"), Directive("scope", "app")]) == "app"

    def test_explicit_none(self):
        blocks = extract_blocks("@scope none\n.a { c[red] }")
        assert resolve_scope(blocks.directives) == "none"


# ---------------------------------------------------------------------------
# Classes
# ---------------------------------------------------------------------------


class TestClassErrors:
    def test_duplicate_class(self):
        with pytest.raises(StructuralError, match=r"\.a") as exc_info:
            extract_blocks(".a { c[red] }\n\n.a { c[blue] }\n")
        assert exc_info.value.kind is ErrorKind.DUPLICATE_NAME
        assert exc_info.value.line == 3

    def test_stray_text_reports_line(self):
        source = "@const base { c[red] }\n\n.a { c[red] }\nstray words\n"
        with pytest.raises(StructuralError, match="stray words") as exc_info:
            extract_blocks(source)
        assert exc_info.value.line == 4

    def test_unterminated_class(self):
        with pytest.raises(StructuralError) as exc_info:
            extract_blocks("\n.a {\n  c[red]\n")
        assert exc_info.value.kind is ErrorKind.UNTERMINATED_BLOCK
        assert exc_info.value.line == 2

    def test_missing_dot(self):
        with pytest.raises(StructuralError, match="Unexpected top-level text"):
            extract_blocks("a { c[red] }")
