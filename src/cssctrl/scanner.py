"""Bracket-aware scanner for DSL bodies.

The scanner walks text one character at a time with an explicit stack of
states:

    PLAIN     top level of a body; whitespace separates statements
    BLOCK     inside ``name( ... )``, e.g. ``hover(bg[red] c[blue])``
    VALUE     inside ``[ ... ]``, the value of a declaration
    FUNCTION  inside a CSS function call such as ``calc(...)``

Parentheses opened inside a value, or by a recognised CSS function name inside
a block, belong to FUNCTION and never close a block.  Depths can never go
negative: a stray closer is reported as an error instead.
"""

from __future__ import annotations

from enum import Enum

from cssctrl.abbreviations import CSS_FUNCTIONS
from cssctrl.errors import ErrorKind, StructuralError

__all__ = [
    "ScanState",
    "Scanner",
    "split_statements",
    "split_top_level",
    "find_matching_brace",
    "line_of",
]


class ScanState(Enum):
    PLAIN = "plain"
    BLOCK = "block"
    VALUE = "value"
    FUNCTION = "function"


def line_of(text: str, pos: int) -> int:
    """1-based line number of *pos* in *text*."""
    return text.count("\n", 0, pos) + 1


class Scanner:
    """Cursor over *text* tracking the current scan state."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self.stack: list[ScanState] = [ScanState.PLAIN]

    @property
    def state(self) -> ScanState:
        return self.stack[-1]

    @property
    def paren_depth(self) -> int:
        return sum(1 for s in self.stack if s in (ScanState.BLOCK, ScanState.FUNCTION))

    @property
    def bracket_depth(self) -> int:
        return sum(1 for s in self.stack if s is ScanState.VALUE)

    @property
    def at_top_level(self) -> bool:
        return len(self.stack) == 1

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def _error(self, message: str, kind: ErrorKind) -> StructuralError:
        return StructuralError(message, kind=kind, line=line_of(self.text, self.pos))

    def _name_before(self, pos: int) -> str:
        start = pos
        while start > 0 and (self.text[start - 1].isalnum() or self.text[start - 1] in "-_"):
            start -= 1
        return self.text[start:pos]

    def step(self) -> str:
        """Consume one character, updating the state stack, and return it."""
        ch = self.text[self.pos]
        state = self.state

        if ch == "[":
            self.stack.append(ScanState.VALUE)
        elif ch == "]":
            if state is not ScanState.VALUE:
                raise self._error(f'Unexpected "]" in "{self._excerpt()}".', ErrorKind.UNBALANCED)
            self.stack.pop()
        elif ch == "(":
            if state in (ScanState.VALUE, ScanState.FUNCTION):
                self.stack.append(ScanState.FUNCTION)
            elif state is ScanState.BLOCK:
                if self._name_before(self.pos) not in CSS_FUNCTIONS:
                    raise self._error(
                        f'Nested blocks are not allowed. Found: "{self._excerpt()}"',
                        ErrorKind.INVALID_SYNTAX,
                    )
                self.stack.append(ScanState.FUNCTION)
            else:
                self.stack.append(ScanState.BLOCK)
        elif ch == ")":
            if state not in (ScanState.BLOCK, ScanState.FUNCTION):
                raise self._error(f'Unexpected ")" in "{self._excerpt()}".', ErrorKind.UNBALANCED)
            self.stack.pop()
        elif state is ScanState.BLOCK and ch in "{}@":
            raise self._error(
                f'"{ch}" is not allowed inside a block. Found: "{self._excerpt()}"',
                ErrorKind.INVALID_SYNTAX,
            )

        self.pos += 1
        return ch

    def finish(self) -> None:
        """Raise if any bracket or parenthesis is still open."""
        if not self.at_top_level:
            opener = "[" if self.state is ScanState.VALUE else "("
            raise self._error(
                f'Missing closing for "{opener}" in "{self._excerpt(0)}".',
                ErrorKind.UNTERMINATED_BLOCK,
            )

    def _excerpt(self, start: int | None = None) -> str:
        if start is None:
            start = max(0, self.pos - 40)
        return " ".join(self.text[start:self.pos + 1].split())


def split_statements(text: str) -> list[str]:
    """Split *text* into whitespace-separated statements.

    Whitespace (including newlines) inside brackets or parentheses does not
    split, so a block spanning several lines comes back as one statement.
    """
    scanner = Scanner(text)
    statements: list[str] = []
    current: list[str] = []
    while not scanner.at_end():
        top = scanner.at_top_level
        ch = scanner.step()
        if top and ch.isspace():
            if current:
                statements.append("".join(current))
                current = []
            continue
        current.append(ch if not ch.isspace() else " ")
    scanner.finish()
    if current:
        statements.append("".join(current))
    return statements


def split_top_level(text: str, separator: str) -> tuple[str, str] | None:
    """Split *text* at the first *separator* found outside brackets."""
    scanner = Scanner(text)
    while not scanner.at_end():
        top = scanner.at_top_level
        pos = scanner.pos
        ch = scanner.step()
        if top and ch == separator:
            return text[:pos], text[pos + 1:]
    return None


def find_matching_brace(text: str, open_index: int) -> int:
    """Return the index of the ``}`` closing the ``{`` at *open_index*.

    Braces inside ``[...]`` values are ignored.
    """
    depth = 0
    brackets = 0
    for index in range(open_index, len(text)):
        ch = text[index]
        if ch == "[":
            brackets += 1
        elif ch == "]" and brackets:
            brackets -= 1
        elif brackets:
            continue
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return index
    raise StructuralError(
        f'Missing closing "}}" for block starting at line {line_of(text, open_index)}.',
        kind=ErrorKind.UNTERMINATED_BLOCK,
        line=line_of(text, open_index),
    )
