"""Compile pipeline: DSL text plus a theme snapshot in, CSS text out."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from cssctrl import placeholders
from cssctrl.builder import build_css_text
from cssctrl.diagnostic import Diagnostic
from cssctrl.dispatcher import Context, DispatchContext, dispatch
from cssctrl.errors import CompileError, ErrorKind, SemanticError, StructuralError
from cssctrl.extractor import extract_blocks, resolve_scope
from cssctrl.keyframes import build_keyframe_name_map, build_keyframes_css, compile_keyframes
from cssctrl.model import (
    ClassBlock,
    ConstBlock,
    ConstFragment,
    Directive,
    StyleDefinition,
    final_name,
)
from cssctrl.queries import (
    compile_query_nodes,
    iter_nodes,
    merge_consts,
    parse_nested_queries,
    partition_use_lines,
)
from cssctrl.scanner import split_statements
from cssctrl.theme import ThemeSnapshot
from cssctrl.transformer import transform_variables

logger = logging.getLogger(__name__)


@dataclass
class CompiledClass:
    name: str
    display: str
    style: StyleDefinition


@dataclass
class CompileResult:
    """Outcome of :func:`try_compile`: CSS text or the diagnostics explaining why not."""

    css: str | None = None
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.css is not None and not any(d.is_error for d in self.diagnostics)


def compile_consts(blocks: list[ConstBlock], ctx: DispatchContext) -> dict[str, ConstFragment]:
    const_ctx = DispatchContext(Context.CONST, ctx.theme, ctx.keyframe_names)
    fragments: dict[str, ConstFragment] = {}
    for block in blocks:
        style = StyleDefinition()
        for statement in block.statements:
            dispatch(statement, style, const_ctx)
        fragments[block.name] = ConstFragment(block.name, style)
    return fragments


def _check_local_vars(block: ClassBlock, style: StyleDefinition, scope: str) -> None:
    used = set(style.used_local_vars)
    for node in iter_nodes(style.nested_queries):
        used |= node.style.used_local_vars
    for name in sorted(used):
        if name not in style.local_vars:
            raise SemanticError(
                f'Local variable "--&{name}" is used but not declared in ".{block.name}" '
                f'(scope="{scope}").',
                kind=ErrorKind.UNDECLARED_VARIABLE,
            )


def process_class_blocks(
    blocks: list[ClassBlock],
    scope: str,
    consts: Mapping[str, ConstFragment],
    ctx: DispatchContext,
) -> list[CompiledClass]:
    """Dispatch, validate and scope every top-level class of a file."""
    compiled: list[CompiledClass] = []
    for block in blocks:
        style = StyleDefinition()
        lines, nodes = parse_nested_queries(block.body)
        names, rest = partition_use_lines(lines)
        merge_consts(names, style, consts)
        for statement in split_statements("\n".join(rest)):
            dispatch(statement, style, ctx)

        style.nested_queries = nodes
        compile_query_nodes(nodes, consts, ctx)
        _check_local_vars(block, style, scope)

        display = final_name(scope, block.name)
        transform_variables(style, display, scope)
        compiled.append(CompiledClass(block.name, display, style))
    return compiled


def check_bind_directives(directives: list[Directive], short_names: Mapping[str, str]) -> None:
    """Validate ``@bind <key> .a .b`` directives against the file's classes."""
    keys: set[str] = set()
    for directive in directives:
        if directive.name != "bind":
            continue
        tokens = directive.value.split()
        if len(tokens) < 2:
            raise StructuralError(f'Invalid @bind syntax: "@bind {directive.value}"')
        key, refs = tokens[0], tokens[1:]
        if key in keys:
            raise StructuralError(
                f'@bind key "{key}" is already used in this file.',
                kind=ErrorKind.DUPLICATE_NAME,
            )
        keys.add(key)
        if key in short_names:
            raise SemanticError(
                f'@bind key "{key}" conflicts with existing class ".{key}".',
                kind=ErrorKind.CONFLICTING_DECLARATION,
            )
        for ref in refs:
            if not ref.startswith("."):
                raise SemanticError(
                    f'@bind must reference classes with a dot. Got "{ref}"',
                    kind=ErrorKind.INVALID_SYNTAX,
                )
            if ref[1:] not in short_names:
                raise SemanticError(
                    f'@bind references ".{ref[1:]}" but that class is not defined.',
                    kind=ErrorKind.UNKNOWN_REFERENCE,
                )


def _check_directives(directives: list[Directive]) -> None:
    for directive in directives:
        if directive.name not in ("scope", "bind"):
            raise SemanticError(
                f'Unknown directive "@{directive.name}".', kind=ErrorKind.INVALID_SYNTAX
            )


def compile_source(text: str, theme: ThemeSnapshot | None = None) -> str:
    """Compile the DSL *text* of one file to CSS.

    Raises :class:`CompileError` on any failure; nothing is produced in that
    case.  The result depends only on *text* and *theme*.
    """
    if theme is None:
        theme = ThemeSnapshot()
    blocks = extract_blocks(text)
    _check_directives(blocks.directives)
    scope = resolve_scope(blocks.directives)

    keyframe_names = build_keyframe_name_map(blocks.keyframes, scope)
    ctx = DispatchContext(Context.CLASS, theme, keyframe_names)

    consts = compile_consts(blocks.consts, ctx)
    classes = process_class_blocks(blocks.classes, scope, consts, ctx)
    short_names = {compiled.name: compiled.display for compiled in classes}
    check_bind_directives(blocks.directives, short_names)

    parts = [build_keyframes_css(compile_keyframes(blocks.keyframes, keyframe_names, scope, ctx))]
    for compiled in classes:
        parts.append(build_css_text(compiled.display, compiled.style, short_names))
    css = "".join(parts)

    stray = placeholders.leftover(css)
    if stray is not None:
        raise CompileError(f"Unresolved placeholder {stray} in output.", kind=ErrorKind.INTERNAL)

    logger.debug(
        "Compiled scope=%s: %d classes, %d keyframes, %d consts -> %d chars",
        scope,
        len(classes),
        len(blocks.keyframes),
        len(consts),
        len(css),
    )
    return css


def try_compile(text: str, theme: ThemeSnapshot | None = None) -> CompileResult:
    """Like :func:`compile_source`, but reports failure as diagnostics."""
    try:
        return CompileResult(css=compile_source(text, theme))
    except CompileError as e:
        logger.debug("Compile failed: %s", e)
        return CompileResult(diagnostics=[Diagnostic.from_error(e)])


@dataclass
class SourceSummary:
    scope: str
    consts: list[str]
    keyframes: dict[str, str]
    classes: dict[str, str]
    binds: list[str]


def describe_source(text: str) -> SourceSummary:
    """Names declared in *text* and the final names they compile to."""
    blocks = extract_blocks(text)
    scope = resolve_scope(blocks.directives)
    return SourceSummary(
        scope=scope,
        consts=[block.name for block in blocks.consts],
        keyframes=build_keyframe_name_map(blocks.keyframes, scope),
        classes={block.name: final_name(scope, block.name) for block in blocks.classes},
        binds=[d.value for d in blocks.directives if d.name == "bind"],
    )
