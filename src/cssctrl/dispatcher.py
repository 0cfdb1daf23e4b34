"""Token dispatcher: classify one statement and apply it to a StyleDefinition.

A statement is either a flat declaration (``bg[red]``, ``$bg[red]``,
``--&pad[8px]``, ``--gap[4px]``, ``c[blue]!``) or a block whose head decides
where its tokens land:

    hover(...)              pseudo-class state
    before(...)             pseudo-element
    screen(md, ...)         @media rule
    container(min-w[..], .) @container rule
    option-active(...)      plugin state
    drawer-container(...)   plugin container

Which forms are legal depends on the :class:`Context` the statement is
dispatched in.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING

from cssctrl import placeholders
from cssctrl.abbreviations import (
    ABBREVIATIONS,
    PLUGIN_CONTAINERS,
    PSEUDO_CLASSES,
    PSEUDO_ELEMENTS,
    expand_abbreviation,
    plugin_state_selector,
)
from cssctrl.errors import ErrorKind, SemanticError, StructuralError
from cssctrl.grammar import Declaration, is_declaration, parse_declaration
from cssctrl.model import ConditionalBlock, PluginState, PropertyMap, StyleDefinition
from cssctrl.scanner import split_statements, split_top_level

if TYPE_CHECKING:
    from cssctrl.theme import ThemeSnapshot

_PLAIN_VAR_RE = re.compile(r"(?<!var\()(?<![\w-])--(?!&)([A-Za-z_][\w-]*)")
_LOCAL_VAR_RE = re.compile(r"--&([\w-]+)")


class Context(Enum):
    """Where a statement is being dispatched."""

    CLASS = "class"
    CONST = "const"
    QUERY = "query"
    THEME = "theme"
    KEYFRAME = "keyframe"

    @property
    def allows_runtime_vars(self) -> bool:
        return self in (Context.CLASS, Context.KEYFRAME)

    @property
    def allows_local_declarations(self) -> bool:
        return self is Context.CLASS

    @property
    def allows_local_references(self) -> bool:
        return self in (Context.CLASS, Context.CONST, Context.QUERY)

    @property
    def allows_important(self) -> bool:
        return self in (Context.CLASS, Context.QUERY, Context.KEYFRAME)

    @property
    def allows_blocks(self) -> bool:
        return self is not Context.KEYFRAME

    @property
    def label(self) -> str:
        return {
            Context.CLASS: "class",
            Context.CONST: "@const block",
            Context.QUERY: "@query block",
            Context.THEME: "theme define",
            Context.KEYFRAME: "@keyframe step",
        }[self]


@dataclass(frozen=True)
class DispatchContext:
    """Everything a dispatch needs besides the statement and its target."""

    kind: Context
    theme: ThemeSnapshot
    keyframe_names: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    def keyframe_name(self, name: str) -> str | None:
        if name in self.keyframe_names:
            return self.keyframe_names[name]
        return self.theme.keyframes.get(name)


@dataclass
class Target:
    """The property map a declaration writes into.

    ``var_bucket`` receives runtime-variable defaults; None means runtime
    variables are not allowed in this block.
    """

    props: PropertyMap
    var_bucket: PropertyMap | None
    block: str = ""
    label: str = "base"
    top_level: bool = False
    pseudo_element: bool = False


def base_target(style: StyleDefinition) -> Target:
    return Target(style.base, style.var_base, top_level=True)


# ---------------------------------------------------------------------------
# Value helpers
# ---------------------------------------------------------------------------


def convert_css_variable(value: str) -> str:
    """Wrap bare ``--name`` references in ``var()``.

    ``--&name`` local references and existing ``var(--name)`` are untouched.
    """
    return _PLAIN_VAR_RE.sub(lambda m: f"var(--{m.group(1)})", value)


def _resolve_value(value: str, style: StyleDefinition, ctx: DispatchContext, statement: str) -> str:
    if placeholders.has_marker(value):
        raise StructuralError(
            f'Reserved characters "{placeholders.OPEN}{placeholders.CLOSE}" found in "{statement}".'
        )
    value = convert_css_variable(value)
    if "--&" not in value:
        return value
    if not ctx.kind.allows_local_references:
        raise SemanticError(
            f'Local variable references are not allowed in {ctx.kind.label}. Found: "{statement}"'
        )

    def _ref(match: re.Match[str]) -> str:
        name = match.group(1)
        style.used_local_vars.add(name)
        return placeholders.local_ref(name)

    return _LOCAL_VAR_RE.sub(_ref, value)


def _with_importance(value: str, important: bool) -> str:
    return f"{value} !important" if important else value


def _quote_content(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value
    return '"' + value.replace('"', '\\"') + '"'


# ---------------------------------------------------------------------------
# Flat declarations
# ---------------------------------------------------------------------------


def apply_declaration(
    decl: Declaration,
    target: Target,
    style: StyleDefinition,
    ctx: DispatchContext,
    statement: str,
) -> None:
    """Apply one parsed declaration to *target*."""
    if decl.important and not ctx.kind.allows_important:
        raise SemanticError(
            f'!important is not allowed in {ctx.kind.label}. Found: "{statement}"'
        )

    if decl.is_local:
        _declare_local(decl, target, style, ctx, statement)
        return

    if decl.is_runtime:
        _declare_runtime(decl, target, style, ctx, statement)
        return

    if decl.is_custom:
        value = _resolve_value(decl.value, style, ctx, statement)
        target.props[f"--{decl.name}"] = _with_importance(value, decl.important)
        return

    if decl.name == "ty":
        _apply_typography(decl, target, style, ctx, statement)
        return

    properties = expand_abbreviation(decl.name)
    if properties is not None:
        value = decl.value
        if decl.name in ("am", "am-n"):
            value = _rename_keyframe(value, ctx)
        value = _resolve_value(value, style, ctx, statement)
        if decl.name == "ct" and target.pseudo_element:
            value = _quote_content(value)
        value = _with_importance(value, decl.important)
        for prop in properties:
            target.props[prop] = value
        return

    if ctx.theme.is_define_group(decl.name):
        _apply_define(decl, target, style, ctx, statement)
        return

    raise SemanticError(
        f'"{decl.name}" not defined in style abbreviation or theme define. Found: "{statement}"',
        kind=ErrorKind.UNKNOWN_ABBREVIATION,
    )


def _declare_local(
    decl: Declaration, target: Target, style: StyleDefinition, ctx: DispatchContext, statement: str
) -> None:
    if not ctx.kind.allows_local_declarations or not target.top_level:
        where = ctx.kind.label if not ctx.kind.allows_local_declarations else f"{target.label}(...)"
        raise SemanticError(
            f'Local variable declarations are not allowed in {where}. Found: "{statement}"'
        )
    if decl.important:
        raise SemanticError(
            f'!important is not allowed with a local variable. Found: "{statement}"',
            kind=ErrorKind.CONFLICTING_DECLARATION,
        )
    if decl.name in ABBREVIATIONS:
        raise SemanticError(
            f'Local variable "--&{decl.name}" shadows the abbreviation "{decl.name}".',
            kind=ErrorKind.CONFLICTING_DECLARATION,
        )
    if decl.name in style.local_vars:
        raise SemanticError(
            f'Local variable "--&{decl.name}" is already declared.',
            kind=ErrorKind.CONFLICTING_DECLARATION,
        )
    style.local_vars[decl.name] = _resolve_value(decl.value, style, ctx, statement)


def _declare_runtime(
    decl: Declaration, target: Target, style: StyleDefinition, ctx: DispatchContext, statement: str
) -> None:
    if not ctx.kind.allows_runtime_vars:
        raise SemanticError(
            f'Runtime variable (${decl.name}) is not allowed in {ctx.kind.label}. Found: "{statement}"'
        )
    if target.var_bucket is None:
        raise SemanticError(
            f'Runtime variable (${decl.name}) cannot be used in {target.label}(...). Found: "{statement}"'
        )
    if decl.name == "ty":
        raise SemanticError(f'"$ty[...]" is not allowed. Found: "{statement}"')
    if "--&" in decl.value:
        raise SemanticError(
            f'Runtime variable cannot reference a local variable. Found: "{statement}"',
            kind=ErrorKind.CONFLICTING_DECLARATION,
        )
    properties = expand_abbreviation(decl.name)
    if properties is None:
        raise SemanticError(
            f'"{decl.name}" not defined in style abbreviation. Found: "{statement}"',
            kind=ErrorKind.UNKNOWN_ABBREVIATION,
        )
    target.var_bucket[decl.name] = _resolve_value(decl.value, style, ctx, statement)
    style.has_runtime_var = True
    value = _with_importance(placeholders.runtime_ref(decl.name, target.block), decl.important)
    for prop in properties:
        target.props[prop] = value


def _apply_typography(
    decl: Declaration, target: Target, style: StyleDefinition, ctx: DispatchContext, statement: str
) -> None:
    key = decl.value.strip()
    preset = ctx.theme.typography.get(key)
    if preset is None:
        raise SemanticError(
            f'Typography key "{key}" not found in theme typography. Found: "{statement}"',
            kind=ErrorKind.UNKNOWN_THEME_KEY,
        )
    for token in split_statements(preset):
        sub = parse_declaration(token)
        if sub.name == "ty" or sub.is_runtime or sub.is_local:
            raise SemanticError(f'Typography "{key}" contains an unsupported token "{token}".')
        if decl.important and not sub.important:
            sub = replace(sub, important=True)
        apply_declaration(sub, target, style, ctx, token)


def _apply_define(
    decl: Declaration, target: Target, style: StyleDefinition, ctx: DispatchContext, statement: str
) -> None:
    variants = decl.value.split()
    if len(variants) != 1:
        raise SemanticError(
            f'"{decl.name}[...]" takes exactly one variant key. Found: "{statement}"'
        )
    fragment = ctx.theme.define(decl.name, variants[0])
    if fragment is None:
        raise SemanticError(
            f'"{decl.name}[{variants[0]}]" not found in theme define.',
            kind=ErrorKind.UNKNOWN_THEME_KEY,
        )
    if target.top_level:
        style.merge(fragment)
        if decl.important:
            for prop in fragment.base:
                style.base[prop] = _with_importance(fragment.base[prop], True)
        return
    for prop, value in fragment.base.items():
        target.props[prop] = _with_importance(value, decl.important)


def _rename_keyframe(value: str, ctx: DispatchContext) -> str:
    words = value.strip().split()
    if not words:
        return value
    renamed = ctx.keyframe_name(words[0])
    if renamed is None:
        return value.strip()
    return " ".join([renamed, *words[1:]])


# ---------------------------------------------------------------------------
# Blocks
# ---------------------------------------------------------------------------


def _block_head(statement: str) -> str | None:
    """Name before ``(`` when *statement* is a block, else None."""
    if is_declaration(statement) or not statement.endswith(")"):
        return None
    paren = statement.find("(")
    if paren <= 0:
        return None
    return statement[:paren]


def _condition_query(condition: str, kind: str, ctx: DispatchContext, statement: str) -> str:
    condition = condition.strip()
    if "[" not in condition:
        resolved = ctx.theme.breakpoint(condition)
        if resolved is None:
            raise SemanticError(
                f'Unknown breakpoint key "{condition}" not found in theme breakpoints for {kind}(...).',
                kind=ErrorKind.UNKNOWN_THEME_KEY,
            )
        condition = resolved
    try:
        decl = parse_declaration(condition)
    except StructuralError:
        raise StructuralError(
            f'"{kind}" must contain something like min-w[600px]. Got "{condition}"'
        ) from None
    properties = expand_abbreviation(decl.name)
    if properties is None or decl.prefix:
        raise SemanticError(
            f'"{decl.name}" is not a valid {kind} condition. Found: "{statement}"',
            kind=ErrorKind.UNKNOWN_ABBREVIATION,
        )
    return f"({properties[0]}:{decl.value.strip()})"


def _apply_tokens(inner: str, target: Target, style: StyleDefinition, ctx: DispatchContext) -> None:
    for token in split_statements(inner):
        if _block_head(token) is not None:
            raise StructuralError(f'Nested blocks are not allowed. Found: "{token}"')
        apply_declaration(parse_declaration(token), target, style, ctx, token)


def _dispatch_block(
    head: str, statement: str, style: StyleDefinition, ctx: DispatchContext
) -> bool:
    inner = statement[len(head) + 1:-1]

    if head in PSEUDO_CLASSES:
        target = Target(
            style.states.setdefault(head, {}),
            style.var_states.setdefault(head, {}),
            block=head,
            label=head,
        )
    elif head in PSEUDO_ELEMENTS:
        target = Target(
            style.pseudos.setdefault(head, {}),
            style.var_pseudos.setdefault(head, {}),
            block=head,
            label=head,
            pseudo_element=True,
        )
    elif head in ("screen", "container"):
        parts = split_top_level(inner, ",")
        if parts is None:
            raise StructuralError(f'"{head}" syntax error: "{statement}"')
        query = _condition_query(parts[0], head, ctx, statement)
        block = ConditionalBlock(query)
        _apply_tokens(parts[1], Target(block.props, None, label=head), style, ctx)
        (style.screens if head == "screen" else style.containers).append(block)
        return True
    elif plugin_state_selector(head) is not None:
        state = style.plugin_states.setdefault(head, PluginState(plugin_state_selector(head)))
        target = Target(state.props, style.var_states.setdefault(head, {}), block=head, label=head)
    elif head in PLUGIN_CONTAINERS:
        container_name = PLUGIN_CONTAINERS[head]
        entry = style.plugin_container(container_name)
        target = Target(
            entry.props,
            style.var_containers.setdefault(container_name, {}),
            block=container_name,
            label=head,
        )
    else:
        return False

    _apply_tokens(inner, target, style, ctx)
    return True


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


def dispatch(statement: str, style: StyleDefinition, ctx: DispatchContext) -> None:
    """Classify *statement* and apply it to *style*."""
    statement = statement.strip()
    if not statement:
        return
    if statement.startswith("@"):
        raise SemanticError(
            f'Unexpected directive in {ctx.kind.label}. Found: "{statement}"',
            kind=ErrorKind.INVALID_SYNTAX,
        )

    head = _block_head(statement)
    if head is not None:
        if not ctx.kind.allows_blocks:
            raise SemanticError(
                f'"{head}(...)" is not allowed in {ctx.kind.label}. Found: "{statement}"'
            )
        if _dispatch_block(head, statement, style, ctx):
            return

    decl = parse_declaration(statement)
    apply_declaration(decl, base_target(style), style, ctx, statement)


def dispatch_all(text: str, style: StyleDefinition, ctx: DispatchContext) -> StyleDefinition:
    """Dispatch every statement of *text* into *style* and return it."""
    for statement in split_statements(text):
        dispatch(statement, style, ctx)
    return style


def compile_fragment(text: str, theme: ThemeSnapshot) -> StyleDefinition:
    """Compile a theme ``define`` fragment from raw DSL text."""
    return dispatch_all(text, StyleDefinition(), DispatchContext(Context.THEME, theme))
