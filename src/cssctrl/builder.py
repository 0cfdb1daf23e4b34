"""Serialize resolved StyleDefinitions to CSS text."""

from __future__ import annotations

from collections.abc import Mapping

from cssctrl import placeholders
from cssctrl.errors import ErrorKind, SemanticError
from cssctrl.model import NestedQueryNode, PropertyMap, StyleDefinition
from cssctrl.transformer import local_var_name


def _declarations(props: PropertyMap, owner: str) -> str:
    def _local(name: str) -> str:
        return f"var({local_var_name(name, owner)})"

    return "".join(
        f"{prop}:{placeholders.replace_local(value, _local)};" for prop, value in props.items()
    )


def _rule(selector: str, props: PropertyMap, owner: str) -> str:
    if not props:
        return ""
    return f"{selector}{{{_declarations(props, owner)}}}"


def _build_rules(selector: str, style: StyleDefinition, owner: str, base: PropertyMap) -> str:
    """Everything except ``:root`` and nested nodes, for one selector."""
    parts = [_rule(selector, base, owner)]
    for state, props in style.states.items():
        parts.append(_rule(f"{selector}:{state}", props, owner))
    for state in style.plugin_states.values():
        parts.append(_rule(f"{selector}.{state.selector}", state.props, owner))
    for block in style.screens:
        inner = _rule(selector, block.props, owner)
        if inner:
            parts.append(f"@media only screen and {block.query}{{{inner}}}")
    for block in style.containers:
        inner = _rule(selector, block.props, owner)
        if inner:
            parts.append(f"@container {block.query}{{{inner}}}")
    for entry in style.plugin_containers:
        parts.append(_rule(f".{entry.container_name} {selector}", entry.props, owner))
    for pseudo, props in style.pseudos.items():
        parts.append(_rule(f"{selector}::{pseudo}", props, owner))
    return "".join(parts)


def resolve_nested_selector(parent: str, selector: str, short_names: Mapping[str, str]) -> str:
    """Combine a nested ``@query`` selector with its parent's selector.

    ``&`` stands for the parent; without one the selector is a descendant.
    ``@scope.<name>`` placeholders resolve to classes declared in the file.
    """

    def _scope(name: str) -> str:
        final = short_names.get(name)
        if final is None:
            raise SemanticError(
                f'"@scope.{name}" does not match any class declared in this file.',
                kind=ErrorKind.UNKNOWN_REFERENCE,
            )
        return f".{final}"

    selector = placeholders.replace_scope(selector.strip(), _scope)
    if "&" in selector:
        return selector.replace("&", parent)
    return f"{parent} {selector}"


def build_css_text(display: str, style: StyleDefinition, short_names: Mapping[str, str]) -> str:
    """CSS for one top-level class and all of its nested nodes."""
    parts: list[str] = []
    if style.root_vars:
        root = "".join(f"{name}:{value};" for name, value in style.root_vars.items())
        parts.append(f":root{{{root}}}")

    base: PropertyMap = {
        local_var_name(name, display): value for name, value in style.local_vars.items()
    }
    base.update(style.base)
    selector = f".{display}"
    parts.append(_build_rules(selector, style, display, base))

    stack: list[tuple[str, NestedQueryNode]] = [
        (selector, node) for node in reversed(style.nested_queries)
    ]
    while stack:
        parent, node = stack.pop()
        node_selector = resolve_nested_selector(parent, node.selector, short_names)
        parts.append(_build_rules(node_selector, node.style, display, node.style.base))
        stack.extend((node_selector, child) for child in reversed(node.children))

    return "".join(parts)
