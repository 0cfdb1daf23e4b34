"""Block extractor: split one DSL file into consts, keyframes, directives and classes.

Extraction runs in a fixed order and blanks every consumed span (keeping its
newlines, so later line numbers stay accurate) before the next pass:

1. ``@const <name> { ... }``
2. ``@keyframe <name> { ... }``
3. top-level ``@name value`` directive lines
4. top-level ``.className { ... }`` blocks

Anything left over at the top level is an error.
"""

from __future__ import annotations

import logging
import re

from cssctrl import placeholders
from cssctrl.errors import ErrorKind, StructuralError
from cssctrl.model import (
    SCOPE_NONE,
    ClassBlock,
    ConstBlock,
    Directive,
    ExtractedBlocks,
    KeyframeBlock,
)
from cssctrl.queries import QUERY_RE
from cssctrl.scanner import find_matching_brace, line_of, split_statements

logger = logging.getLogger(__name__)

_CONST_RE = re.compile(r"^[ \t]*@const\s+([\w-]+)\s*\{", re.MULTILINE)
_KEYFRAME_RE = re.compile(r"^[ \t]*@keyframe\s+([\w-]+)\s*\{", re.MULTILINE)
_DIRECTIVE_RE = re.compile(r"^[ \t]*@([\w-]+)(?:[ \t]+([^\r\n]*))?$")
_CLASS_RE = re.compile(r"\.(-?[A-Za-z_][\w-]*)\s*\{")
_SCOPE_NAME_RE = re.compile(r"^[A-Za-z0-9_-]+$")

RESERVED_DIRECTIVES = frozenset({"use", "query"})


def _blank(text: str, start: int, end: int) -> str:
    """Replace ``text[start:end]`` with just its newlines."""
    return text[:start] + "\n" * text.count("\n", start, end) + text[end:]


def _extract_named_blocks(
    text: str, pattern: re.Pattern[str], kind: str
) -> tuple[str, list[tuple[str, str, int]]]:
    """Pull every ``@<kind> name { body }`` out of *text*.

    Returns the remaining text and ``(name, body, line)`` triples.
    """
    found: list[tuple[str, str, int]] = []
    seen: set[str] = set()
    while True:
        match = pattern.search(text)
        if match is None:
            return text, found
        name = match.group(1)
        line = line_of(text, match.start())
        if name in seen:
            raise StructuralError(
                f'Duplicate {kind} name "{name}" in the same file.',
                kind=ErrorKind.DUPLICATE_NAME,
                line=line,
            )
        seen.add(name)
        brace = match.end() - 1
        close = find_matching_brace(text, brace)
        found.append((name, text[brace + 1:close], line))
        text = _blank(text, match.start(), close + 1)


def _const_statements(name: str, body: str, line: int) -> tuple[str, ...]:
    if QUERY_RE.search(body):
        raise StructuralError(
            f'@query is not allowed in @const block "{name}".',
            kind=ErrorKind.INVALID_SYNTAX,
            line=line,
        )
    if "{" in body or "}" in body:
        raise StructuralError(
            f'Nested blocks are not allowed in @const block "{name}".',
            kind=ErrorKind.INVALID_SYNTAX,
            line=line,
        )
    return tuple(split_statements(body))


def _depth_zero_lines(text: str) -> list[tuple[int, int]]:
    """``(start, end)`` spans of lines that begin outside any brace block."""
    spans: list[tuple[int, int]] = []
    depth = 0
    start = 0
    for raw_line in text.splitlines(keepends=True):
        end = start + len(raw_line)
        if depth == 0:
            spans.append((start, start + len(raw_line.rstrip("\r\n"))))
        depth += raw_line.count("{") - raw_line.count("}")
        start = end
    return spans


def _extract_directives(text: str) -> tuple[str, list[Directive]]:
    directives: list[Directive] = []
    for start, end in reversed(_depth_zero_lines(text)):
        match = _DIRECTIVE_RE.match(text[start:end])
        if match is None:
            continue
        name, value = match.group(1), (match.group(2) or "").strip()
        if name in RESERVED_DIRECTIVES:
            continue
        line = line_of(text, start)
        if name == "scope":
            _check_scope(value, line)
        directives.append(Directive(name, value))
        text = _blank(text, start, end)

    directives.reverse()
    scopes = [d for d in directives if d.name == "scope"]
    if len(scopes) > 1:
        raise StructuralError(
            "Only one @scope directive is allowed per file.", kind=ErrorKind.DUPLICATE_NAME
        )
    return text, directives


def _check_scope(value: str, line: int) -> None:
    if value == SCOPE_NONE:
        return
    if not _SCOPE_NAME_RE.match(value):
        raise StructuralError(
            f'Scope name must contain only letters, digits, underscore, or dash. Got: "{value}"',
            kind=ErrorKind.INVALID_SYNTAX,
            line=line,
        )


def _extract_classes(text: str) -> list[ClassBlock]:
    classes: list[ClassBlock] = []
    seen: set[str] = set()
    pos = 0
    while True:
        while pos < len(text) and text[pos].isspace():
            pos += 1
        if pos >= len(text):
            return classes
        match = _CLASS_RE.match(text, pos)
        if match is None:
            excerpt = text[pos:].splitlines()[0].strip()
            raise StructuralError(
                f'Unexpected top-level text: "{excerpt}"',
                kind=ErrorKind.INVALID_SYNTAX,
                line=line_of(text, pos),
            )
        name = match.group(1)
        if name in seen:
            raise StructuralError(
                f'Duplicate class ".{name}" in the same file.',
                kind=ErrorKind.DUPLICATE_NAME,
                line=line_of(text, pos),
            )
        seen.add(name)
        brace = match.end() - 1
        close = find_matching_brace(text, brace)
        classes.append(ClassBlock(name, text[brace + 1:close]))
        pos = close + 1


def extract_blocks(text: str) -> ExtractedBlocks:
    """Split the DSL *text* of one file into its top-level blocks."""
    if placeholders.has_marker(text):
        raise StructuralError(
            f'Reserved characters "{placeholders.OPEN}{placeholders.CLOSE}" are not allowed.'
        )

    text, raw_consts = _extract_named_blocks(text, _CONST_RE, "const")
    consts = [ConstBlock(name, _const_statements(name, body, line)) for name, body, line in raw_consts]

    text, raw_keyframes = _extract_named_blocks(text, _KEYFRAME_RE, "keyframe")
    keyframes = [KeyframeBlock(name, body) for name, body, _ in raw_keyframes]

    text, directives = _extract_directives(text)
    classes = _extract_classes(text)

    logger.debug(
        "Extracted %d consts, %d keyframes, %d directives, %d classes",
        len(consts),
        len(keyframes),
        len(directives),
        len(classes),
    )
    return ExtractedBlocks(consts=consts, keyframes=keyframes, directives=directives, classes=classes)


def resolve_scope(directives: list[Directive]) -> str:
    """The file's scope; ``none`` when there is no ``@scope`` directive."""
    for directive in directives:
        if directive.name == "scope":
            return directive.value or SCOPE_NONE
    return SCOPE_NONE
