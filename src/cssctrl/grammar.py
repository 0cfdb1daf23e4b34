"""Lark grammar and transformer for a single flat declaration."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from lark import Lark, Token, Transformer
from lark.exceptions import UnexpectedInput

from cssctrl.errors import ErrorKind, StructuralError

GRAMMAR_PATH = Path(__file__).parent / "declaration.lark"

RUNTIME = "$"
LOCAL = "--&"
CUSTOM = "--"


@dataclass(frozen=True)
class Declaration:
    """A parsed ``<prefix><name>[<value>]<!>`` token."""

    name: str
    value: str
    prefix: str = ""
    important: bool = False

    @property
    def is_runtime(self) -> bool:
        return self.prefix == RUNTIME

    @property
    def is_local(self) -> bool:
        return self.prefix == LOCAL

    @property
    def is_custom(self) -> bool:
        return self.prefix == CUSTOM


class DeclarationTransformer(Transformer):  # type: ignore[type-arg]
    """Transform a declaration parse tree into a :class:`Declaration`."""

    def prefix(self, items: list[Token]) -> str:
        return str(items[0])

    def declaration(self, items: list[object]) -> Declaration:
        fields: dict[str, object] = {}
        for item in items:
            if not isinstance(item, Token):
                fields["prefix"] = item
            elif item.type == "NAME":
                fields["name"] = str(item)
            elif item.type == "BRACKETED":
                # strip the surrounding brackets
                fields["value"] = str(item)[1:-1]
            elif item.type == "IMPORTANT":
                fields["important"] = True
        return Declaration(**fields)  # type: ignore[arg-type]


@lru_cache(maxsize=1)
def _parser() -> Lark:
    return Lark(GRAMMAR_PATH.read_text(), parser="lalr", start="start")


def parse_declaration(statement: str) -> Declaration:
    """Parse one declaration statement, raising StructuralError on bad syntax."""
    try:
        tree = _parser().parse(statement)
    except UnexpectedInput as e:
        raise StructuralError(
            f'Invalid declaration "{statement}". Expected <name>[<value>].',
            kind=ErrorKind.INVALID_SYNTAX,
        ) from e
    return DeclarationTransformer().transform(tree)


def is_declaration(statement: str) -> bool:
    """Cheap check: does *statement* look like ``name[...]`` rather than a block?"""
    bracket = statement.find("[")
    paren = statement.find("(")
    return bracket != -1 and (paren == -1 or bracket < paren)
