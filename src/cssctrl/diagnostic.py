"""Diagnostic model: structured error reports for the non-raising entry point."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from cssctrl.errors import CompileError, ErrorKind


class Severity(Enum):
    """Severity level for a diagnostic message."""

    ERROR = "ERROR"
    WARNING = "WARNING"


@dataclass(frozen=True)
class Diagnostic:
    """A single finding about a DSL source file.

    Attributes:
        kind: The error category that produced this diagnostic.
        severity: How serious the issue is.
        message: Human-readable description, including the error prefix.
        line: 1-based line in the scanned text, if known.
    """

    kind: ErrorKind
    severity: Severity
    message: str
    line: int | None = None

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    @classmethod
    def from_error(cls, error: CompileError) -> Diagnostic:
        return cls(
            kind=error.kind,
            severity=Severity.ERROR,
            message=str(error),
            line=error.line,
        )

    def __str__(self) -> str:
        location = f" [line={self.line}]" if self.line is not None else ""
        return f"{self.severity.value}{location}: {self.message}"
