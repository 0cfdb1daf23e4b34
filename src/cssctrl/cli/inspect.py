"""CLI command: cssctrl inspect -- show the names a DSL file declares."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from cssctrl.compiler import describe_source
from cssctrl.errors import CompileError


@click.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False))
def inspect(source: str) -> None:
    """Display the scope, consts, keyframes and classes of SOURCE."""
    source_path = Path(source)

    try:
        summary = describe_source(source_path.read_text(encoding="utf-8"))
    except CompileError as exc:
        click.echo(f"Parse error: {exc}", err=True)
        sys.exit(1)

    click.echo(f"Scope: {summary.scope}")
    click.echo()

    click.echo("Consts:")
    for name in summary.consts:
        click.echo(f"  {name}")
    click.echo()

    click.echo("Keyframes:")
    for name, final in summary.keyframes.items():
        click.echo(f"  {name} -> {final}")
    click.echo()

    click.echo("Classes:")
    for name, final in summary.classes.items():
        click.echo(f"  .{name} -> .{final}")

    if summary.binds:
        click.echo()
        click.echo("Binds:")
        for bind in summary.binds:
            click.echo(f"  {bind}")
