"""yrm command-line interface."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click

from yrm import __version__
from yrm.config import YrmConfig, find_config, load_config
from yrm.errors import DiagnosticRenderer, LexError, YrmError
from yrm.lexer import Lexer
from yrm.loader import parse, read_source
from yrm.source import SourceFile


def _load_settings(path: Path) -> YrmConfig:
    """Load the nearest yrm.toml above ``path``, or the defaults."""
    try:
        return load_config(find_config(path))
    except FileNotFoundError:
        return YrmConfig()


def _report(ctx: click.Context, err: YrmError, source: SourceFile | None) -> None:
    renderer = DiagnosticRenderer(color=ctx.obj["color"])
    click.echo(renderer.render(err.diagnostic, source), err=True)


@click.group()
@click.version_option(__version__, prog_name="yrm")
@click.option("-v", "--verbose", is_flag=True, help="Log lexer and parser activity.")
@click.option("--no-color", is_flag=True, help="Disable colored diagnostics.")
@click.pass_context
def main(ctx: click.Context, verbose: bool, no_color: bool) -> None:
    """Read tab-indented yrm configuration files."""
    config = _load_settings(Path.cwd())
    level = logging.DEBUG if verbose else config.logging.level_number
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["color"] = config.diagnostics.color and not no_color


@main.command(name="json")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--indent", type=int, default=None, help="Spaces per JSON indent level.")
@click.option("--sort-keys", is_flag=True, help="Sort mapping keys.")
@click.pass_context
def json_cmd(ctx: click.Context, file: str, indent: int | None, sort_keys: bool) -> None:
    """Print a yrm file as JSON."""
    config = _load_settings(Path(file))
    source = None
    try:
        source = read_source(Path(file))
        document = parse(source.content, source.name)
    except YrmError as e:
        _report(ctx, e, source)
        raise SystemExit(1)

    click.echo(json.dumps(
        document,
        indent=config.output.indent if indent is None else indent,
        sort_keys=sort_keys or config.output.sort_keys,
    ))


@main.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def check(ctx: click.Context, files: tuple[str, ...]) -> None:
    """Check that yrm files parse."""
    failed = 0
    for file in files:
        source = None
        try:
            source = read_source(Path(file))
            parse(source.content, source.name)
        except YrmError as e:
            failed += 1
            _report(ctx, e, source)
            continue
        click.echo(f"ok {file}")

    if failed:
        click.echo(f"{failed} of {len(files)} file(s) failed", err=True)
        raise SystemExit(1)


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def tokens(ctx: click.Context, file: str) -> None:
    """Dump the token stream of a yrm file."""
    source = None
    try:
        source = read_source(Path(file))
    except YrmError as e:
        _report(ctx, e, source)
        raise SystemExit(1)

    lexer = Lexer(source.content, source.name)
    error = None
    try:
        lexer.lex()
    except LexError as e:
        error = e

    for tok in lexer.tokens:
        span = tok.span
        click.echo(f"{span.start_line}:{span.start_col}\t{tok}")

    if error is not None:
        _report(ctx, error, source)
        raise SystemExit(1)


@main.command()
def lsp() -> None:
    """Start the yrm language server."""
    from yrm.lsp import main as lsp_main

    lsp_main()
