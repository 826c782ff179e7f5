"""CLI entry point for kvasir."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from kvasir.config import KvasirConfig, load_config
from kvasir.config.loader import DEFAULT_CONFIG_TEMPLATE
from kvasir.diagnostics import DiagnosticSink, configure_logging, resolve_log_level
from kvasir.errors import OutputDirectoryError, PathContainmentError, TemplateError
from kvasir.output import SplitFileWriter, WriteReport, split_document
from kvasir.parsers import FileParser, parser_names, parsers
from kvasir.pipeline import parse_files
from kvasir.templates import TemplateRenderer

app = typer.Typer(
    name="kvasir",
    help=(
        "Source file parser and template generator.\n\n"
        "Parses configuration and human-readable formats (JSON, YAML, TOML, INI, XML, "
        "HOCON, properties, OpenAPI, SQL) into JSON, then optionally renders the "
        "results through templates."
    ),
    no_args_is_help=True,
)

config_app = typer.Typer(help="Manage kvasir configuration.")
app.add_typer(config_app, name="config")

err_console = Console(stderr=True)

# Global state
_config: KvasirConfig | None = None


def _get_config() -> KvasirConfig:
    if _config is None:
        return load_config()
    return _config


def _fail(message: str) -> typer.Exit:
    err_console.print(f"[red]Error:[/red] {escape(message)}")
    return typer.Exit(1)


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to kvasir.yaml")
    ] = None,
    debug: Annotated[
        bool, typer.Option("--debug", "-d", help="Enable debug application output.")
    ] = False,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        raise _fail(str(e))
    configure_logging(
        resolve_log_level(debug=debug, configured=_config.log_level),
        _config.log_format,
    )


def _active_parsers(cfg: KvasirConfig) -> list[FileParser]:
    try:
        return parsers(cfg.parsers.enabled)
    except ValueError as e:
        raise _fail(str(e))


def _display_write_report(report: WriteReport) -> None:
    table = Table(title="Split Output")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right", style="green")
    table.add_row("Written", str(len(report.written)))
    table.add_row("Conflicts", str(len(report.conflicts)))
    table.add_row("Errors", str(len(report.errors)))
    err_console.print(table)

    for conflict in report.conflicts:
        err_console.print(f"  [yellow]conflict:[/yellow] {escape(str(conflict.path))}")
    for err in report.errors:
        err_console.print(f"  [red]error:[/red] {escape(str(err))}")


@app.command()
def parse(
    sources: Annotated[
        list[str],
        typer.Option("--sources", "-s", help="Glob expression for source files (repeatable)."),
    ],
    jobs: Annotated[
        int | None, typer.Option("--jobs", "-j", min=1, help="Worker threads for parsing.")
    ] = None,
) -> None:
    """Parse one or more source files into a single JSON structure."""
    cfg = _get_config()
    sink = DiagnosticSink()
    outcome = parse_files(
        sources,
        _active_parsers(cfg),
        jobs=jobs or cfg.parsers.jobs,
        sink=sink,
    )
    typer.echo(json.dumps(outcome.as_json(), indent=2))


@app.command()
def document(
    sources: Annotated[
        list[str],
        typer.Option("--sources", "-s", help="Glob expression for source files (repeatable)."),
    ],
    templates: Annotated[
        str, typer.Option("--templates", "-t", help="Glob expression for template files.")
    ],
    root_template: Annotated[
        str | None,
        typer.Option(
            "--root-template",
            "-r",
            help="Template to render, relative to the template glob, when several match.",
        ),
    ] = None,
    split_files: Annotated[
        bool, typer.Option("--split-files", help="Split the rendered output into files.")
    ] = False,
    split_delimiter: Annotated[
        str | None,
        typer.Option("--split-delimiter", help="Delimiter marking each output file (default 8<--)."),
    ] = None,
    output_dir: Annotated[
        str | None,
        typer.Option("--output-dir", "-o", help="Existing directory to write split files into."),
    ] = None,
    allow_overwrite: Annotated[
        bool, typer.Option("--allow-overwrite", help="Replace files that already exist.")
    ] = False,
    jobs: Annotated[
        int | None, typer.Option("--jobs", "-j", min=1, help="Worker threads for parsing.")
    ] = None,
) -> None:
    """Parse source files and format the results using templates."""
    cfg = _get_config()
    sink = DiagnosticSink()

    try:
        renderer = TemplateRenderer(
            templates,
            root_template,
            context_key=cfg.document.context_key,
            sink=sink,
        )
    except TemplateError as e:
        raise _fail(str(e))

    outcome = parse_files(
        sources,
        _active_parsers(cfg),
        jobs=jobs or cfg.parsers.jobs,
        sink=sink,
    )

    try:
        rendered = renderer.render(outcome.successes)
    except TemplateError as e:
        raise _fail(str(e))

    if not split_files:
        typer.echo(rendered)
        return

    delimiter = split_delimiter or cfg.document.split_delimiter
    out_dir = Path(output_dir or cfg.document.output_dir)
    try:
        entries = split_document(rendered, out_dir, delimiter)
    except (PathContainmentError, OutputDirectoryError, ValueError) as e:
        raise _fail(str(e))

    writer = SplitFileWriter(allow_overwrite or cfg.document.allow_overwrite, sink)
    report = writer.write_batch(entries)
    _display_write_report(report)


@app.command(name="parsers")
def list_parsers() -> None:
    """List available file format parsers."""
    for name in parser_names():
        typer.echo(name)


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default kvasir.yaml in current directory."""
    target = Path("kvasir.yaml")
    if target.exists() and not force:
        rprint("[yellow]kvasir.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")


if __name__ == "__main__":
    app()
