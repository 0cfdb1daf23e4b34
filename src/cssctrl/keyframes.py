"""Keyframe compiler: ``@keyframe name { from(...) 50%(...) to(...) }``."""

from __future__ import annotations

import re
from collections.abc import Mapping

from cssctrl.dispatcher import Context, DispatchContext, dispatch
from cssctrl.errors import ErrorKind, SemanticError, StructuralError
from cssctrl.model import (
    KeyframeBlock,
    KeyframeDefinition,
    KeyframeStep,
    StyleDefinition,
    final_name,
)
from cssctrl.scanner import split_statements
from cssctrl.transformer import transform_variables

_STEP_RE = re.compile(r"^(from|to|\d{1,3}%)\((.*)\)$", re.DOTALL)


def build_keyframe_name_map(blocks: list[KeyframeBlock], scope: str) -> dict[str, str]:
    """Map every keyframe declared in the file to its final name."""
    names: dict[str, str] = {}
    for block in blocks:
        if block.name in names:
            raise StructuralError(
                f'Duplicate keyframe name "{block.name}" in the same file.',
                kind=ErrorKind.DUPLICATE_NAME,
            )
        names[block.name] = final_name(scope, block.name)
    return names


def _parse_step(statement: str) -> tuple[str, str]:
    match = _STEP_RE.match(statement)
    if match is None:
        raise StructuralError(f'Invalid keyframe syntax: "{statement}"')
    label, inner = match.group(1), match.group(2)
    if label.endswith("%") and int(label[:-1]) > 100:
        raise StructuralError(f'Keyframe step "{label}" is out of range. Found: "{statement}"')
    if "--&" in inner:
        raise SemanticError(
            f'Local variable (--&xxx) is not allowed in @keyframe. Found: "{statement}"'
        )
    if "@" in inner:
        raise SemanticError(
            f'Directives are not allowed in @keyframe. Found: "{statement}"',
            kind=ErrorKind.INVALID_SYNTAX,
        )
    return label, inner


def parse_keyframe_body(
    block: KeyframeBlock,
    names: Mapping[str, str],
    scope: str,
    ctx: DispatchContext,
) -> KeyframeDefinition:
    """Compile the raw body of one keyframe into its steps and root variables.

    A runtime variable ``$bg[red]`` in step ``50%`` of keyframe ``app_pulse``
    is declared as ``--bg-app_pulse-50``.
    """
    kf_final = names[block.name]
    definition = KeyframeDefinition(name=block.name, final_name=kf_final)
    step_ctx = DispatchContext(Context.KEYFRAME, ctx.theme, names)

    for statement in split_statements(block.body):
        label, inner = _parse_step(statement)
        step_style = StyleDefinition()
        for token in split_statements(inner):
            dispatch(token, step_style, step_ctx)
        transform_variables(step_style, f"{kf_final}-{label.rstrip('%')}", scope)
        definition.root_vars.update(step_style.root_vars)
        definition.steps.append(KeyframeStep(label, step_style.base))

    return definition


def compile_keyframes(
    blocks: list[KeyframeBlock],
    names: Mapping[str, str],
    scope: str,
    ctx: DispatchContext,
) -> list[KeyframeDefinition]:
    return [parse_keyframe_body(block, names, scope, ctx) for block in blocks]


def _declarations(props: Mapping[str, str]) -> str:
    return "".join(f"{prop}:{value};" for prop, value in props.items())


def build_keyframes_css(definitions: list[KeyframeDefinition]) -> str:
    parts: list[str] = []
    for definition in definitions:
        if definition.root_vars:
            parts.append(f":root{{{_declarations(definition.root_vars)}}}")
        steps = "".join(f"{step.label}{{{_declarations(step.props)}}}" for step in definition.steps)
        parts.append(f"@keyframes {definition.final_name}{{{steps}}}")
    return "".join(parts)
