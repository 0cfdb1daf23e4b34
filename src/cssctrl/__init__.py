"""cssctrl - compiler for a compact, abbreviation-based styling DSL."""

from cssctrl.compiler import CompileResult, compile_source, try_compile
from cssctrl.errors import CompileError, ErrorKind, SemanticError, StructuralError
from cssctrl.theme import ThemeSnapshot, load_theme

__version__ = "0.1.0"

__all__ = [
    "CompileError",
    "CompileResult",
    "ErrorKind",
    "SemanticError",
    "StructuralError",
    "ThemeSnapshot",
    "compile_source",
    "load_theme",
    "try_compile",
]
