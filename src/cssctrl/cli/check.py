"""CLI command: cssctrl check -- compile without writing and report diagnostics."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from cssctrl.compiler import try_compile
from cssctrl.config import CtrlConfig
from cssctrl.errors import CompileError


@click.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--theme",
    "theme_path",
    type=click.Path(exists=True, dir_okay=False),
    envvar="CSSCTRL_THEME",
    default=None,
    help="Theme JSON file",
)
def check(source: str, theme_path: str | None) -> None:
    """Check that SOURCE compiles.

    Exits with code 0 when it does, or code 1 with the diagnostics when not.
    """
    config = CtrlConfig(theme_path=theme_path)
    source_path = Path(source)

    try:
        theme = config.load_theme()
    except CompileError as exc:
        click.echo(f"Theme error: {exc}", err=True)
        sys.exit(1)

    result = try_compile(source_path.read_text(encoding=config.encoding), theme)
    if result.ok:
        click.echo(f"OK: {source_path.name} compiles ({len(result.css or '')} chars)")
        sys.exit(0)

    for diag in result.diagnostics:
        click.echo(str(diag))
    sys.exit(1)
