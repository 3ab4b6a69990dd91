"""Command-line utilities for the program_ingester package."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from . import get_version
from .api import ingest_path, load_config
from .config import IngestConfig
from .errors import IngestError
from .ingest import Ingester
from .render import dump_graph, graph_tree

app = typer.Typer(help="Rebuild program feature hierarchies from feature logs")
console = Console()
err_console = Console(stderr=True)

LOG_ENVVAR = "PROGRAM_INGESTER_LOG"


def setup_logging(level: str) -> None:
    """Send log records to stderr through a Rich handler."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True)],
        force=True,
    )


def _fail(exc: Exception) -> typer.Exit:
    err_console.print(f"[bold red]Error:[/] {exc}")
    return typer.Exit(code=1)


def _resolve_config(config_path: Path | None, **overrides: object) -> IngestConfig:
    try:
        return load_config(config_path).merged(**overrides)
    except ValidationError as exc:
        raise typer.BadParameter(str(exc)) from exc
    except IngestError as exc:
        raise typer.BadParameter(str(exc), param_hint="--config") from exc


@app.command()
def version() -> None:
    """Print the installed package version."""
    typer.echo(get_version())


@app.command()
def ingest(
    path: Annotated[
        Path | None,
        typer.Argument(help="Feature log to read; stdin when omitted.", dir_okay=False),
    ] = None,
    fmt: Annotated[
        str | None,
        typer.Option("--format", "-f", help="Output format: json | yaml | tree | debug."),
    ] = None,
    config: Annotated[
        Path | None,
        typer.Option(help="YAML/JSON ingest config.", exists=True, dir_okay=False),
    ] = None,
    out: Annotated[Path | None, typer.Option(help="Write output here instead of stdout.")] = None,
    strict_parents: Annotated[
        bool, typer.Option(help="Fail on parents that are referenced but never defined.")
    ] = False,
    max_depth: Annotated[int | None, typer.Option(min=1, help="Maximum nesting depth.")] = None,
    log_level: Annotated[
        str | None, typer.Option(envvar=LOG_ENVVAR, help="DEBUG | INFO | WARNING | ERROR")
    ] = None,
) -> None:
    """Parse a feature log and print the resolved program graph."""
    cfg = _resolve_config(
        config,
        output=fmt,
        strict_parents=strict_parents or None,
        max_depth=max_depth,
        log_level=log_level,
    )
    setup_logging(cfg.log_level)
    try:
        graph = ingest_path(path, cfg)
    except IngestError as exc:
        raise _fail(exc) from exc

    if out is not None:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(dump_graph(graph, cfg.output, indent=cfg.indent))
        err_console.print(
            f"[bold green]Graph written:[/] {out} ({len(graph.programs)} programs)"
        )
    elif cfg.output == "tree":
        console.print(graph_tree(graph))
    else:
        typer.echo(dump_graph(graph, cfg.output, indent=cfg.indent))


@app.command()
def validate(
    path: Annotated[
        Path | None,
        typer.Argument(help="Feature log to check; stdin when omitted.", dir_okay=False),
    ] = None,
) -> None:
    """Parse a feature log without resolving it and report the record count."""
    try:
        ingester = Ingester.from_stdin() if path is None else Ingester.from_path(path)
    except IngestError as exc:
        raise _fail(exc) from exc
    roots = sum(1 for record in ingester.records if record.is_root)
    console.print(f"[bold]Records:[/] {len(ingester.records)} ([bold]roots:[/] {roots})")


def main() -> None:
    """Entry point for `python -m program_ingester.cli`."""
    app()


if __name__ == "__main__":
    main()
