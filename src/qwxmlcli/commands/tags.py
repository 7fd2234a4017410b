"""Tags command - list registered tags and attribute types"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from rich.table import Table

from qwxml.parser import DEFAULT_REGISTRY

from .utils import console, load_settings, setup_logging


def tags_command(config: Optional[Path] = None, verbose: bool = False) -> None:
    """List the tags and attribute types compilers are registered for."""
    setup_logging(verbose)
    load_settings(config)

    for title, registry in (
        ("Tags", DEFAULT_REGISTRY.tags),
        ("Attribute types", DEFAULT_REGISTRY.types),
    ):
        table = Table(title=title)
        table.add_column("Name", style="cyan")
        table.add_column("Compiler")
        for name, ctor in registry.items():
            table.add_row(name, f"{ctor.__module__}.{ctor.__qualname__}")
        console.print(table)
