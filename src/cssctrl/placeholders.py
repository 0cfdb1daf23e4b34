"""Opaque placeholders written into property values during compilation.

Three things cannot be resolved where they are first seen:

* a runtime variable's final custom-property name depends on the class name,
  scope and block it ends up in (resolved by the variable transformer);
* a local variable's final name depends on the owning top-level class
  (resolved by the CSS builder);
* ``@scope.<name>`` references in nested selectors depend on the file scope
  (resolved by the CSS builder).

Each placeholder is delimited by characters that are rejected in source text,
so a placeholder can never collide with user input.
"""

from __future__ import annotations

import re
from collections.abc import Callable

OPEN = "⟦"
CLOSE = "⟧"

_RUNTIME_RE = re.compile(f"{OPEN}\\$:([\\w-]+):([\\w-]*){CLOSE}")
_LOCAL_RE = re.compile(f"{OPEN}&:([\\w-]+){CLOSE}")
_SCOPE_RE = re.compile(f"{OPEN}@:([\\w-]+){CLOSE}")
_ANY_RE = re.compile(f"{OPEN}[^{CLOSE}]*{CLOSE}")


def runtime_ref(abbr: str, block: str = "") -> str:
    return f"{OPEN}$:{abbr}:{block}{CLOSE}"


def local_ref(name: str) -> str:
    return f"{OPEN}&:{name}{CLOSE}"


def scope_ref(name: str) -> str:
    return f"{OPEN}@:{name}{CLOSE}"


def has_marker(text: str) -> bool:
    """True when *text* contains either placeholder delimiter."""
    return OPEN in text or CLOSE in text


def runtime_refs(value: str) -> list[tuple[str, str]]:
    """``(abbr, block)`` pairs of the runtime placeholders in *value*."""
    return _RUNTIME_RE.findall(value)


def local_refs(value: str) -> list[str]:
    return _LOCAL_RE.findall(value)


def replace_runtime(value: str, resolve: Callable[[str, str], str]) -> str:
    """Replace runtime placeholders with ``resolve(abbr, block)``."""
    return _RUNTIME_RE.sub(lambda m: resolve(m.group(1), m.group(2)), value)


def replace_local(value: str, resolve: Callable[[str], str]) -> str:
    return _LOCAL_RE.sub(lambda m: resolve(m.group(1)), value)


def replace_scope(value: str, resolve: Callable[[str], str]) -> str:
    return _SCOPE_RE.sub(lambda m: resolve(m.group(1)), value)


def leftover(text: str) -> str | None:
    """The first unresolved placeholder in *text*, if any."""
    match = _ANY_RE.search(text)
    return match.group(0) if match else None
