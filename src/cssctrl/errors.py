"""Compiler error types."""

from __future__ import annotations

from enum import Enum

ERROR_PREFIX = "[CSS-CTRL-ERR]"


class ErrorKind(Enum):
    """What went wrong, grouped into structural and semantic failures."""

    # structural
    UNTERMINATED_BLOCK = "unterminated_block"
    UNBALANCED = "unbalanced"
    DUPLICATE_NAME = "duplicate_name"
    INVALID_SYNTAX = "invalid_syntax"
    # semantic
    UNKNOWN_ABBREVIATION = "unknown_abbreviation"
    UNKNOWN_THEME_KEY = "unknown_theme_key"
    UNKNOWN_REFERENCE = "unknown_reference"
    DISALLOWED_CONTEXT = "disallowed_context"
    UNDECLARED_VARIABLE = "undeclared_variable"
    CONFLICTING_DECLARATION = "conflicting_declaration"
    AMBIGUOUS_NAME = "ambiguous_name"
    # should never surface
    INTERNAL = "internal"


class CompileError(Exception):
    """Raised when DSL source cannot be compiled.

    The message always starts with :data:`ERROR_PREFIX` so callers can surface
    it verbatim as a diagnostic.
    """

    default_kind = ErrorKind.INTERNAL

    def __init__(
        self,
        message: str,
        kind: ErrorKind | None = None,
        line: int | None = None,
    ):
        self.kind = kind or self.default_kind
        self.line = line
        super().__init__(f"{ERROR_PREFIX} {message}")


class StructuralError(CompileError):
    """Unterminated blocks, unbalanced brackets, duplicate names."""

    default_kind = ErrorKind.INVALID_SYNTAX


class SemanticError(CompileError):
    """Well-formed input that refers to something unknown or forbidden."""

    default_kind = ErrorKind.DISALLOWED_CONTEXT
