"""CLI command: cssctrl compile -- compile a DSL file and write the CSS."""

from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path

import click

from cssctrl.compiler import compile_source
from cssctrl.config import CtrlConfig
from cssctrl.errors import CompileError


def write_atomic(path: Path, text: str, encoding: str = "utf-8") -> None:
    """Write *text* to *path* through a temporary file in the same directory."""
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding=encoding) as handle:
            handle.write(text)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


@click.command("compile")
@click.argument("source", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--theme",
    "theme_path",
    type=click.Path(exists=True, dir_okay=False),
    envvar="CSSCTRL_THEME",
    default=None,
    help="Theme JSON file (breakpoints, typography, define, keyframes)",
)
@click.option("--out", "out_path", type=click.Path(dir_okay=False), default=None, help="Output CSS file")
def compile_command(source: str, theme_path: str | None, out_path: str | None) -> None:
    """Compile SOURCE to CSS.

    The output file is only written when compilation succeeds; on error the
    previous output is left untouched.
    """
    config = CtrlConfig(theme_path=theme_path)
    source_path = Path(source)
    target = Path(out_path) if out_path else config.output_path_for(source_path)

    try:
        theme = config.load_theme()
        css = compile_source(source_path.read_text(encoding=config.encoding), theme)
    except CompileError as exc:
        click.echo(str(exc), err=True)
        sys.exit(1)

    write_atomic(target, css, config.encoding)
    click.echo(f"Wrote {target}")
