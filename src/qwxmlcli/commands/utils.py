"""Shared utilities for CLI commands"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from qwxml.config import CompilerSettings, find_config_file
from qwxml.parser import DEFAULT_REGISTRY

from ..lib.errors import QwxmlCliError

console = Console()

log = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the qwxml CLI.

    Log levels:
    - Normal: Only warnings/errors shown (failed attributes and children)
    - Verbose (-v): INFO level - shows loaded plugins
    - Debug (QWXML_DEBUG=1): DEBUG level - shows every compiler created
    """
    debug = bool(os.environ.get("QWXML_DEBUG"))
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=verbose,
        show_path=debug,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    for name in ("qwxml", "qwxmlcli"):
        logger = logging.getLogger(name)
        logger.setLevel(level)
        logger.handlers = [handler]
        logger.propagate = False


def load_settings(
    config_path: Optional[Path] = None, start: Optional[Path] = None
) -> CompilerSettings:
    """Load settings, apply environment overrides and register plugins.

    Without an explicit path, qwxml.yaml is searched from `start` upwards.
    """
    if config_path is not None:
        if not config_path.exists():
            raise QwxmlCliError(f"Config file not found: {config_path}")
    else:
        config_path = find_config_file(start)

    if config_path is None:
        settings = CompilerSettings()
    else:
        log.info("Using config %s", config_path)
        settings = CompilerSettings.load(config_path)

    settings = settings.with_env()
    settings.apply(DEFAULT_REGISTRY)
    return settings
