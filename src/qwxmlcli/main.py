"""qwxml CLI Main Entry Point

Usage:
    qwxml compile scene.xml                 # Compile and print the object tree
    qwxml compile scene.xml --json          # Print result and diagnostics as JSON
    qwxml compile scene.xml -b https://...  # Override the base URL
    qwxml tags                              # List registered tags and types
    qwxml version                           # Show version
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer

from qwxml import __version__

from .commands import compile_command, tags_command
from .lib.errors import handle_error

typer_app = typer.Typer(
    help="Compile declarative XML markup into Python objects.",
    no_args_is_help=True,
)


@typer_app.command("compile")
def compile_cmd(
    file: Path = typer.Argument(..., help="Markup file to compile."),
    base_url: Optional[str] = typer.Option(
        None, "-b", "--base-url", help="Base URL for relative resources."
    ),
    config: Optional[Path] = typer.Option(
        None, "-c", "--config", help="Path to qwxml.yaml."
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Print result and diagnostics as JSON."
    ),
    strict: bool = typer.Option(
        False, "--strict", help="Exit with code 2 if any error was recorded."
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose output."),
) -> None:
    """Compile a markup file."""
    try:
        compile_command(
            file,
            base_url=base_url,
            config=config,
            json_output=json_output,
            strict=strict,
            verbose=verbose,
        )
    except typer.Exit:
        raise
    except Exception as exc:
        handle_error(exc)


@typer_app.command("tags")
def tags_cmd(
    config: Optional[Path] = typer.Option(
        None, "-c", "--config", help="Path to qwxml.yaml."
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose output."),
) -> None:
    """List registered tags and attribute types."""
    try:
        tags_command(config=config, verbose=verbose)
    except Exception as exc:
        handle_error(exc)


@typer_app.command("version")
def version_cmd() -> None:
    """Show version and exit."""
    typer.echo(f"qwxml {__version__}")


def app(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI."""
    typer_app(args=argv)


if __name__ == "__main__":
    app()
