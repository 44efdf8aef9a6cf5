"""CLI entry point for mermaid-ssr."""

from __future__ import annotations

import json
import logging
import os
import sys
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax

from mermaid_ssr.book import (
    SUPPORTED_RENDERERS,
    parse_preprocessor_input,
    preprocessor_config,
    run_book,
)
from mermaid_ssr.config import (
    Config,
    ConfigError,
    ErrorHandling,
    config_from_mapping,
    load_config,
)
from mermaid_ssr.config.loader import DEFAULT_CONFIG_TEMPLATE
from mermaid_ssr.engine import EngineError, EngineInitError, RenderChannel, open_channel
from mermaid_ssr.pipeline import DiagramPipeline, DiagramRenderError
from mermaid_ssr.renderer import DiagramRenderer

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="mermaid-ssr",
    help="Book preprocessor that renders mermaid diagrams to inline SVG at build time.",
)

config_app = typer.Typer(help="Manage mermaid-ssr configuration.")
app.add_typer(config_app, name="config")

# stdout carries the processed book; everything human-facing goes to stderr.
err_console = Console(stderr=True)

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def _setup_logging(level: str) -> None:
    """Send log records to stderr; MERMAID_SSR_LOG overrides the configured level."""
    name = os.environ.get("MERMAID_SSR_LOG", level).lower()
    logging.basicConfig(
        level=_LOG_LEVELS.get(name, logging.INFO),
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_time=False, show_path=False)],
        force=True,
    )


def _fail(message: str) -> typer.Exit:
    err_console.print(f"[red]Error:[/red] {escape(message)}", highlight=False)
    return typer.Exit(1)


def _open_channel(config: Config) -> RenderChannel:
    try:
        return open_channel(config)
    except EngineInitError as e:
        raise _fail(
            f"Failed to initialize SSR renderer. Chrome/Chromium must be installed. ({e})"
        )


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    """Without a subcommand, run as a book preprocessor on stdin/stdout."""
    if ctx.invoked_subcommand is not None:
        return
    preprocess()


def preprocess() -> None:
    """Read ``[context, book]`` from stdin, write the processed book to stdout."""
    try:
        context, book = parse_preprocessor_input(sys.stdin.read())
        config = config_from_mapping(preprocessor_config(context))
    except ValueError as e:
        raise _fail(str(e))

    _setup_logging(config.log_level)
    logger.debug("called by host version %s", context.get("mdbook_version", "unknown"))

    with _open_channel(config) as channel:
        pipeline = DiagramPipeline(DiagramRenderer(channel), config)
        try:
            book = run_book(book, pipeline)
        except (DiagramRenderError, EngineError, ValueError) as e:
            raise _fail(str(e))

    json.dump(book, sys.stdout, ensure_ascii=False)
    sys.stdout.flush()


@app.command()
def supports(
    renderer: str = typer.Argument(..., help="Renderer the host asks about"),
) -> None:
    """Exit 0 if the renderer is supported, 1 otherwise."""
    if renderer not in SUPPORTED_RENDERERS:
        raise typer.Exit(1)


@app.command()
def render(
    file: Path = typer.Argument(..., help="Markdown file to process"),
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Write result to file")
    ] = None,
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to mermaid-ssr.yaml")
    ] = None,
    on_error: Annotated[
        ErrorHandling | None, typer.Option("--on-error", help="Override the on-error policy")
    ] = None,
) -> None:
    """Render the mermaid blocks of a single Markdown file."""
    try:
        cfg = load_config(config)
    except ConfigError as e:
        raise _fail(str(e))
    if on_error is not None:
        cfg = cfg.model_copy(update={"on_error": on_error})
    _setup_logging(cfg.log_level)

    try:
        # newline="" keeps CRLF line endings byte-for-byte.
        with open(file, encoding="utf-8", newline="") as f:
            text = f.read()
    except OSError as e:
        raise _fail(f"Could not read {file}: {e}")

    with _open_channel(cfg) as channel:
        pipeline = DiagramPipeline(DiagramRenderer(channel), cfg)
        try:
            result = pipeline.process_document(text, str(file))
        except (DiagramRenderError, EngineError, ValueError) as e:
            raise _fail(str(e))

    if output is None:
        sys.stdout.write(result)
        return
    with open(output, "w", encoding="utf-8", newline="") as f:
        f.write(result)
    err_console.print(
        Panel(
            f"[dim]Source:[/dim]  {file}\n"
            f"[dim]Output:[/dim]  {output}\n"
            f"[dim]Policy:[/dim]  {cfg.on_error.value}",
            title="Render Complete",
            border_style="green",
        )
    )


@config_app.command("show")
def config_show(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to mermaid-ssr.yaml")
    ] = None,
) -> None:
    """Show the resolved configuration."""
    try:
        cfg = load_config(config)
    except ConfigError as e:
        raise _fail(str(e))
    data = cfg.model_dump(mode="json")
    rprint(Syntax(yaml.safe_dump(data, default_flow_style=False, sort_keys=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create a default mermaid-ssr.yaml in the current directory."""
    target = Path("mermaid-ssr.yaml")
    if target.exists() and not force:
        err_console.print(
            "[yellow]mermaid-ssr.yaml already exists.[/yellow] Use --force to overwrite."
        )
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE, encoding="utf-8")
    err_console.print(f"[green]Created[/green] {target}")


if __name__ == "__main__":
    app()
