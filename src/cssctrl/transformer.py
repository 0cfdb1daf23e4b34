"""Variable scoping: give pending runtime variables their final names."""

from __future__ import annotations

from cssctrl import placeholders
from cssctrl.errors import CompileError, ErrorKind, SemanticError
from cssctrl.model import SCOPE_NONE, PropertyMap, StyleDefinition


def runtime_var_name(abbr: str, display: str, block: str = "") -> str:
    """``--bg-app_box`` for the base block, ``--bg-app_box-hover`` inside one."""
    if block:
        return f"--{abbr}-{display}-{block}"
    return f"--{abbr}-{display}"


def local_var_name(name: str, display: str) -> str:
    return f"--{name}-{display}"


def _pending_buckets(style: StyleDefinition) -> list[tuple[str, PropertyMap]]:
    buckets: list[tuple[str, PropertyMap]] = [("", style.var_base)]
    buckets.extend(style.var_states.items())
    buckets.extend(style.var_pseudos.items())
    buckets.extend(style.var_containers.items())
    return buckets


def transform_variables(style: StyleDefinition, display: str, scope: str) -> None:
    """Drain every pending runtime-variable bucket of *style*.

    Each default is declared in ``root_vars`` under its final name and every
    placeholder referring to it becomes ``var(<final name>)``.
    """
    if scope == SCOPE_NONE and (style.has_runtime_var or style.has_pending_vars):
        raise SemanticError(
            f'$variable is not allowed in scope=none (found in "{display}").',
            kind=ErrorKind.DISALLOWED_CONTEXT,
        )

    resolved: dict[tuple[str, str], str] = {}
    for block, bucket in _pending_buckets(style):
        for abbr, default in bucket.items():
            name = runtime_var_name(abbr, display, block)
            style.root_vars[name] = default
            resolved[(abbr, block)] = name
        bucket.clear()

    if not resolved:
        return

    def _resolve(abbr: str, block: str) -> str:
        try:
            return f"var({resolved[(abbr, block)]})"
        except KeyError:
            raise CompileError(
                f'Runtime variable "${abbr}" has no declaration in "{display}".',
                kind=ErrorKind.INTERNAL,
            ) from None

    for props in style.property_maps():
        for prop, value in props.items():
            props[prop] = placeholders.replace_runtime(value, _resolve)
