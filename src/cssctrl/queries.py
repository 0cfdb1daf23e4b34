"""Nested ``@query <selector> { ... }`` blocks inside a class body."""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping

from cssctrl import placeholders
from cssctrl.abbreviations import plugin_state_selector
from cssctrl.dispatcher import Context, DispatchContext, dispatch
from cssctrl.errors import ErrorKind, SemanticError, StructuralError
from cssctrl.model import ConstFragment, NestedQueryNode, StyleDefinition
from cssctrl.scanner import find_matching_brace, line_of, split_statements

QUERY_RE = re.compile(r"@query\b")
_PLUGIN_STATE_RE = re.compile(r"(&?):([A-Za-z][\w-]*)")
_SCOPE_RE = re.compile(r"@scope\.([\w-]+)")


def preprocess_selector(selector: str) -> str:
    """Rewrite plugin-state and ``@scope.<name>`` references in *selector*.

    ``&:option-active`` becomes ``&.listboxPlugin-active``; a bare
    ``:option-active`` becomes a descendant ``.listboxPlugin-active``.
    ``@scope.card`` becomes a placeholder resolved once all classes are known.
    """

    def _plugin(match: re.Match[str]) -> str:
        fragment = plugin_state_selector(match.group(2))
        if fragment is None:
            return match.group(0)
        if match.group(1):
            return f"&.{fragment}"
        return f" .{fragment}"

    selector = _PLUGIN_STATE_RE.sub(_plugin, selector)
    selector = _SCOPE_RE.sub(lambda m: placeholders.scope_ref(m.group(1)), selector)
    return " ".join(selector.split())


def parse_nested_queries(body: str) -> tuple[list[str], list[NestedQueryNode]]:
    """Split *body* into its own lines and a tree of ``@query`` nodes.

    Siblings keep source order.  The tree is built with an explicit work list
    so nesting depth is not limited by the interpreter's recursion limit.
    """
    roots: list[NestedQueryNode] = []
    top_lines: list[str] = []
    work: list[tuple[str, list[str], list[NestedQueryNode]]] = [(body, top_lines, roots)]

    while work:
        text, lines, nodes = work.pop()
        pos = 0
        while True:
            match = QUERY_RE.search(text, pos)
            if match is None:
                lines.extend(_clean_lines(text[pos:]))
                break
            lines.extend(_clean_lines(text[pos:match.start()]))

            brace = text.find("{", match.end())
            if brace == -1:
                raise StructuralError(
                    'Missing "{" after @query.',
                    kind=ErrorKind.UNTERMINATED_BLOCK,
                    line=line_of(text, match.start()),
                )
            raw_selector = text[match.end():brace].strip()
            if not raw_selector:
                raise StructuralError(
                    "Missing selector after @query.", line=line_of(text, match.start())
                )
            close = find_matching_brace(text, brace)

            node = NestedQueryNode(selector=preprocess_selector(raw_selector))
            nodes.append(node)
            work.append((text[brace + 1:close], node.lines, node.children))
            pos = close + 1

    return top_lines, roots


def _clean_lines(chunk: str) -> list[str]:
    return [line.strip() for line in chunk.splitlines() if line.strip()]


def partition_use_lines(lines: list[str]) -> tuple[list[str], list[str]]:
    """Separate ``@use a b`` lines from ordinary lines.

    Returns the referenced const names (in order) and the remaining lines.
    """
    names: list[str] = []
    rest: list[str] = []
    for line in lines:
        if line == "@use" or line.startswith("@use "):
            names.extend(line[len("@use"):].split())
        else:
            rest.append(line)
    return names, rest


def merge_consts(
    names: list[str],
    style: StyleDefinition,
    consts: Mapping[str, ConstFragment],
    *,
    nested: bool = False,
) -> None:
    where = " in nested @query" if nested else ""
    for name in names:
        fragment = consts.get(name)
        if fragment is None:
            raise SemanticError(
                f'@use refers to unknown const "{name}"{where}.',
                kind=ErrorKind.UNKNOWN_REFERENCE,
            )
        style.merge(fragment.style)


def iter_nodes(nodes: list[NestedQueryNode]) -> Iterator[NestedQueryNode]:
    """Depth-first, source-order traversal."""
    stack = list(reversed(nodes))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def compile_query_nodes(
    nodes: list[NestedQueryNode],
    consts: Mapping[str, ConstFragment],
    ctx: DispatchContext,
) -> None:
    """Dispatch every node's own lines into its StyleDefinition."""
    query_ctx = DispatchContext(Context.QUERY, ctx.theme, ctx.keyframe_names)
    for node in iter_nodes(nodes):
        names, rest = partition_use_lines(node.lines)
        merge_consts(names, node.style, consts, nested=True)
        for statement in split_statements("\n".join(rest)):
            dispatch(statement, node.style, query_ctx)
