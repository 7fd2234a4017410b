"""Compile command - compile a markup file and show the result"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Optional

import msgspec
import typer
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from qwxml.parser import compile_file
from qwxml.core.diagnostics import Diagnostics

from ..lib.errors import EXIT_DIAGNOSTICS
from .utils import console, load_settings, setup_logging


def compile_command(
    file: Path,
    base_url: Optional[str] = None,
    config: Optional[Path] = None,
    json_output: bool = False,
    strict: bool = False,
    verbose: bool = False,
) -> None:
    """Compile a markup file and print the resulting object."""
    setup_logging(verbose)

    settings = load_settings(config, start=file.resolve().parent)
    compiled = asyncio.run(compile_file(file, base_url=base_url, settings=settings))

    if json_output:
        typer.echo(to_json(compiled.result, compiled.diagnostics))
    else:
        console.print(render_tree(compiled.result, file.name))
        if compiled.diagnostics:
            console.print(render_diagnostics(compiled.diagnostics))

    if strict and any(d.severity == "error" for d in compiled.diagnostics):
        raise typer.Exit(code=EXIT_DIAGNOSTICS)


def to_json(result: Any, diagnostics: Diagnostics) -> str:
    """Encode a result and its diagnostics; unsupported values become repr strings."""
    payload = {"result": result, "diagnostics": list(diagnostics)}
    return msgspec.json.encode(payload, enc_hook=repr).decode()


def render_tree(value: Any, label: str) -> Tree:
    tree = Tree(f"[bold]{escape(label)}[/bold]")
    _add_value(tree, value)
    return tree


def _add_value(tree: Tree, value: Any) -> None:
    if isinstance(value, dict):
        for key, item in value.items():
            _add_item(tree, str(key), item)
    elif isinstance(value, list):
        for index, item in enumerate(value):
            _add_item(tree, f"[{index}]", item)
    else:
        tree.add(f"[green]{escape(repr(value))}[/green]")


def _add_item(tree: Tree, label: str, value: Any) -> None:
    if isinstance(value, (dict, list)):
        _add_value(tree.add(f"[cyan]{escape(label)}[/cyan]"), value)
    else:
        tree.add(f"[cyan]{escape(label)}[/cyan] = [green]{escape(repr(value))}[/green]")


def render_diagnostics(diagnostics: Diagnostics) -> Table:
    table = Table(title="Diagnostics")
    table.add_column("Severity")
    table.add_column("Code", style="cyan")
    table.add_column("Where")
    table.add_column("Message")

    for item in diagnostics:
        color = "red" if item.severity == "error" else "yellow"
        table.add_row(
            f"[{color}]{item.severity}[/{color}]",
            item.code,
            escape(item.subject),
            escape(item.message),
        )
    return table
