"""Tests for compile-time placeholders."""

from cssctrl import placeholders


class TestReplace:
    def test_runtime_resolver_gets_abbreviation_and_block(self):
        value = f"1px solid {placeholders.runtime_ref('bc', 'hover')}"
        resolved = placeholders.replace_runtime(value, lambda abbr, block: f"var(--{abbr}-{block})")
        assert resolved == "1px solid var(--bc-hover)"

    def test_local_resolver(self):
        value = f"calc({placeholders.local_ref('pad')} * 2)"
        assert placeholders.replace_local(value, lambda name: f"var(--{name}-box)") == (
            "calc(var(--pad-box) * 2)"
        )

    def test_scope_resolver(self):
        selector = placeholders.scope_ref("card") + " &"
        assert placeholders.replace_scope(selector, lambda name: f".app_{name}") == ".app_card &"

    def test_leftover(self):
        assert placeholders.leftover("a{b:c;}") is None
        assert placeholders.leftover(placeholders.local_ref("x")) == placeholders.local_ref("x")
