"""Tests for runtime-variable scoping."""

import pytest

from cssctrl import placeholders
from cssctrl.dispatcher import Context, DispatchContext, dispatch_all
from cssctrl.errors import CompileError, ErrorKind, SemanticError
from cssctrl.model import StyleDefinition
from cssctrl.theme import ThemeSnapshot
from cssctrl.transformer import local_var_name, runtime_var_name, transform_variables

CTX = DispatchContext(Context.CLASS, ThemeSnapshot())


def _style(text: str) -> StyleDefinition:
    return dispatch_all(text, StyleDefinition(), CTX)


class TestNames:
    def test_base_runtime_name(self):
        assert runtime_var_name("bg", "app_box") == "--bg-app_box"

    def test_block_runtime_name(self):
        assert runtime_var_name("bg", "app_box", "hover") == "--bg-app_box-hover"

    def test_local_name(self):
        assert local_var_name("space", "app_box") == "--space-app_box"


class TestTransformVariables:
    def test_base_variable(self):
        style = _style("$bg[red]")
        transform_variables(style, "app_box", "app")
        assert style.root_vars == {"--bg-app_box": "red"}
        assert style.base == {"background-color": "var(--bg-app_box)"}

    def test_state_and_pseudo_variables(self):
        style = _style("hover($c[blue]) before($c[gray])")
        transform_variables(style, "app_box", "app")
        assert style.root_vars == {
            "--c-app_box-hover": "blue",
            "--c-app_box-before": "gray",
        }
        assert style.states["hover"] == {"color": "var(--c-app_box-hover)"}
        assert style.pseudos["before"] == {"color": "var(--c-app_box-before)"}

    def test_same_abbreviation_in_two_blocks(self):
        style = _style("$c[red] hover($c[blue])")
        transform_variables(style, "app_box", "app")
        assert style.base["color"] == "var(--c-app_box)"
        assert style.states["hover"]["color"] == "var(--c-app_box-hover)"

    def test_plugin_state_and_container(self):
        style = _style("option-active($bg[red]) drawer-container($w[10px])")
        transform_variables(style, "app_box", "app")
        assert style.root_vars == {
            "--bg-app_box-option-active": "red",
            "--w-app_box-drawerPluginContainer": "10px",
        }
        assert style.plugin_states["option-active"].props == {
            "background-color": "var(--bg-app_box-option-active)"
        }

    def test_multi_property_abbreviation(self):
        style = _style("$sq[4px]")
        transform_variables(style, "app_box", "app")
        assert style.base == {"width": "var(--sq-app_box)", "height": "var(--sq-app_box)"}

    def test_important_kept(self):
        style = _style("$c[red]!")
        transform_variables(style, "app_box", "app")
        assert style.base["color"] == "var(--c-app_box) !important"

    def test_buckets_drained(self):
        style = _style("$c[red] hover($c[blue])")
        transform_variables(style, "app_box", "app")
        assert not style.has_pending_vars
        assert placeholders.leftover(str(style.property_maps())) is None

    def test_no_variables(self):
        style = _style("c[red]")
        transform_variables(style, "box", "none")
        assert style.root_vars == {}
        assert style.base == {"color": "red"}

    def test_scope_none_rejected(self):
        style = _style("$c[red]")
        with pytest.raises(SemanticError, match="scope=none") as exc_info:
            transform_variables(style, "box", "none")
        assert exc_info.value.kind is ErrorKind.DISALLOWED_CONTEXT

    def test_placeholder_without_default(self):
        style = StyleDefinition(
            base={"color": placeholders.runtime_ref("c", "hover"), "width": placeholders.runtime_ref("w")},
            var_base={"w": "1px"},
            has_runtime_var=True,
        )
        with pytest.raises(CompileError) as exc_info:
            transform_variables(style, "app_box", "app")
        assert exc_info.value.kind is ErrorKind.INTERNAL
