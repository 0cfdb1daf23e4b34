"""Read-only theme snapshot shared by every compile call in a session.

A snapshot bundles the externally supplied lookup data:

* ``breakpoints``: name -> condition fragment, e.g. ``{"md": "min-w[768px]"}``
* ``typography``: name -> token string, e.g. ``{"body": "fs[16px] lh[1.5]"}``
* ``defines``: group -> variant -> compiled fragment
* ``keyframes``: keyframe name -> final name, for keyframes declared elsewhere

Snapshots are immutable: the mappings are :class:`types.MappingProxyType`
views and a new snapshot is built whenever the theme changes.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

from cssctrl.abbreviations import ABBREVIATIONS
from cssctrl.dispatcher import compile_fragment
from cssctrl.errors import ErrorKind, SemanticError, StructuralError
from cssctrl.model import StyleDefinition

logger = logging.getLogger(__name__)

_EMPTY: Mapping[str, Any] = MappingProxyType({})


def _frozen(mapping: Mapping[str, Any] | None) -> Mapping[str, Any]:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class ThemeSnapshot:
    breakpoints: Mapping[str, str] = field(default_factory=lambda: _EMPTY)
    typography: Mapping[str, str] = field(default_factory=lambda: _EMPTY)
    defines: Mapping[str, Mapping[str, StyleDefinition]] = field(default_factory=lambda: _EMPTY)
    keyframes: Mapping[str, str] = field(default_factory=lambda: _EMPTY)

    def breakpoint(self, name: str) -> str | None:
        return self.breakpoints.get(name)

    def define(self, group: str, variant: str) -> StyleDefinition | None:
        variants = self.defines.get(group)
        if variants is None:
            return None
        return variants.get(variant)

    def is_define_group(self, name: str) -> bool:
        return name in self.defines

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ThemeSnapshot:
        """Build a snapshot from plain dictionaries.

        ``define`` entries may be raw DSL strings; they are compiled here,
        once, against the snapshot's breakpoints and typography.
        """
        keyframes = data.get("keyframes") or {}
        if isinstance(keyframes, (list, tuple)):
            keyframes = {name: name for name in keyframes}

        partial = cls(
            breakpoints=_frozen(data.get("breakpoints")),
            typography=_frozen(data.get("typography")),
            keyframes=_frozen(keyframes),
        )

        defines: dict[str, Mapping[str, StyleDefinition]] = {}
        for group, variants in (data.get("define") or {}).items():
            if group in ABBREVIATIONS:
                raise SemanticError(
                    f'Define group "{group}" collides with the abbreviation "{group}".',
                    kind=ErrorKind.AMBIGUOUS_NAME,
                )
            compiled: dict[str, StyleDefinition] = {}
            for variant, fragment in variants.items():
                if isinstance(fragment, StyleDefinition):
                    compiled[variant] = fragment
                else:
                    compiled[variant] = compile_fragment(str(fragment), partial)
            defines[group] = MappingProxyType(compiled)

        snapshot = cls(
            breakpoints=partial.breakpoints,
            typography=partial.typography,
            defines=MappingProxyType(defines),
            keyframes=partial.keyframes,
        )
        logger.debug(
            "Theme snapshot: %d breakpoints, %d typography, %d define groups, %d keyframes",
            len(snapshot.breakpoints),
            len(snapshot.typography),
            len(snapshot.defines),
            len(snapshot.keyframes),
        )
        return snapshot


def load_theme(path: str | Path) -> ThemeSnapshot:
    """Load a theme snapshot from a JSON file."""
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise StructuralError(
            f"Invalid theme file {path}: {e.msg}",
            kind=ErrorKind.INVALID_SYNTAX,
            line=e.lineno,
        ) from e
    if not isinstance(data, dict):
        raise StructuralError(f"Theme file {path} must contain a JSON object.")
    return ThemeSnapshot.from_dict(data)
