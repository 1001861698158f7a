"""Command-line interface for forge-export."""

from __future__ import annotations

import asyncio
import base64
import logging
import sys
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from forge_export.config import get_config
from forge_export.export import (
    CONTENT_TYPES,
    EXPORT_STYLES,
    ExportManager,
    ExportResult,
    PlaywrightRenderer,
    build_default_manager,
)
from forge_export.loader import SessionLoadError, load_session
from forge_export.models import Session

console = Console()
error_console = Console(stderr=True)

BINARY_FORMATS = frozenset({"pdf", "docx"})
SYNTAX_LEXERS = {"md": "markdown", "json": "json", "html": "html"}


def content_options(func):
    """Options shared by ``export`` and ``preview``."""
    options = [
        click.option("--format", "-f", "format", type=str, default=None, help="Output format (md, json, html, pdf, docx)"),
        click.option(
            "--content",
            "-c",
            "content_types",
            type=click.Choice(CONTENT_TYPES),
            multiple=True,
            help="Content to include (repeatable)",
        ),
        click.option("--style", type=str, default=None, help=f"Presentation style ({', '.join(EXPORT_STYLES)})"),
        click.option("--language", type=click.Choice(["en", "he"]), default=None, help="Export language"),
        click.option("--timestamps/--no-timestamps", default=None, help="Show message timestamps"),
        click.option("--system-messages", is_flag=True, help="Include system messages"),
        click.option("--agent-metadata", is_flag=True, help="Include agent roles and supporters"),
        click.option("--toc", is_flag=True, help="Add a table of contents (html, pdf, docx)"),
        click.option("--cover", is_flag=True, help="Add a cover page (html, pdf, docx)"),
        click.option("--logo", type=click.Path(), default=None, help="Logo image for the cover page"),
        click.option("--phase", "phases", multiple=True, help="Only decisions from this phase (repeatable)"),
        click.option("--agent", "agents", multiple=True, help="Only messages from this agent (repeatable)"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def build_options(
    format: str | None,
    content_types: tuple[str, ...],
    style: str | None,
    language: str | None,
    timestamps: bool | None,
    system_messages: bool,
    agent_metadata: bool,
    toc: bool,
    cover: bool,
    logo: str | None,
    phases: tuple[str, ...],
    agents: tuple[str, ...],
    filename: str | None = None,
) -> dict[str, Any]:
    """Layer command-line flags over the configured export defaults.

    Options left unset keep the value from the config file; on/off flags
    can only switch a setting on.
    """
    options = get_config().export.to_options()
    overrides: dict[str, Any] = {
        "format": format,
        "content_types": list(content_types) or None,
        "style": style,
        "language": language,
        "include_timestamps": timestamps,
        "include_system_messages": system_messages or None,
        "include_agent_metadata": agent_metadata or None,
        "include_table_of_contents": toc or None,
        "include_cover_page": cover or None,
        "phases": list(phases) or None,
        "agents": list(agents) or None,
        "filename": filename,
    }
    if logo:
        overrides["include_logo"] = True
        overrides["logo_path"] = str(Path(logo).expanduser().resolve())

    options.update({k: v for k, v in overrides.items() if v is not None})
    return options


def make_manager() -> ExportManager:
    pdf_config = get_config().pdf
    renderer = PlaywrightRenderer(browser=pdf_config.browser, timeout_ms=pdf_config.timeout_ms)
    return build_default_manager(renderer=renderer)


def open_session(session_path: str) -> Session:
    try:
        return load_session(Path(session_path))
    except SessionLoadError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)


def run_export(session: Session, options: dict[str, Any]) -> ExportResult:
    result = asyncio.run(make_manager().export(session, options))
    if not result.success:
        error_console.print(f"[red]Error:[/red] {result.error}")
        sys.exit(1)
    return result


def write_result(result: ExportResult, output_dir: Path) -> Path:
    """Write an export result to disk, decoding binary formats."""
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / result.filename
    extension = path.suffix.lstrip(".")
    if extension in BINARY_FORMATS:
        path.write_bytes(base64.b64decode(result.content))
    else:
        path.write_text(result.content, encoding="utf-8")
    return path


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def cli(verbose: bool) -> None:
    """Forge Export - Export debate sessions to documents."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_path=False)],
        force=True,
    )


@cli.command()
@click.argument("session_path", type=click.Path(exists=True))
@content_options
@click.option("--filename", type=str, default=None, help="Output filename (extension added if missing)")
@click.option("--output-dir", "-o", type=click.Path(file_okay=False), default=None, help="Output directory")
def export(session_path: str, output_dir: str | None, **flags: Any) -> None:
    """Export a session to a file."""
    session = open_session(session_path)
    options = build_options(**flags)
    result = run_export(session, options)

    target_dir = Path(output_dir).expanduser() if output_dir else get_config().export.get_output_dir()
    try:
        path = write_result(result, target_dir)
    except OSError as e:
        error_console.print(f"[red]Error writing export:[/red] {e}")
        sys.exit(1)

    console.print(f"[green]Exported session to {path} ({options['format']})[/green]")


@cli.command()
@click.argument("session_path", type=click.Path(exists=True))
@content_options
def preview(session_path: str, **flags: Any) -> None:
    """Render a session export to the console without writing a file."""
    session = open_session(session_path)
    options = build_options(**flags)
    result = run_export(session, options)

    fmt = options["format"]
    if fmt in BINARY_FORMATS:
        size = len(base64.b64decode(result.content))
        console.print(
            Panel(
                f"[bold]{result.filename}[/bold]\n[dim]{result.mime_type} · {size:,} bytes[/dim]",
                title="Preview",
                border_style="blue",
            )
        )
        return

    lexer = SYNTAX_LEXERS.get(fmt)
    if lexer:
        console.print(Syntax(result.content, lexer, word_wrap=True))
    else:
        console.print(result.content)


@cli.command()
def formats() -> None:
    """List the registered export formats."""
    manager = make_manager()

    table = Table(show_header=True, header_style="bold")
    table.add_column("Format", style="cyan")
    table.add_column("MIME type")
    table.add_column("Extension", style="dim")

    for fmt in manager.get_supported_formats():
        info = manager.get_format_info(fmt)
        table.add_row(fmt, info["mime_type"], f".{info['extension']}")

    console.print(table)


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
