"""Shared error handling for qwxmlcli.

Exit codes:
    1  compile failure (unknown root tag, failed root, missing file, ...)
    2  --strict and an error diagnostic was recorded
    3  invalid configuration (qwxml.yaml, QWXML_* environment)
    4  malformed markup
"""

import sys
from typing import NoReturn

import typer

from qwxml.exceptions import ConfigError, MarkupSyntaxError, QwxmlError

EXIT_FAILURE = 1
EXIT_DIAGNOSTICS = 2
EXIT_CONFIG = 3
EXIT_MARKUP = 4


class QwxmlCliError(Exception):
    """CLI usage error with its own exit code."""

    def __init__(self, message: str, exit_code: int = EXIT_FAILURE) -> None:
        self.message = message
        self.exit_code = exit_code
        super().__init__(message)


def exit_code_for(error: Exception) -> int:
    """Exit code reported for an error raised while compiling."""
    if isinstance(error, QwxmlCliError):
        return error.exit_code
    if isinstance(error, ConfigError):
        return EXIT_CONFIG
    if isinstance(error, MarkupSyntaxError):
        return EXIT_MARKUP
    return EXIT_FAILURE


def exit_with_error(message: str, exit_code: int = EXIT_FAILURE) -> NoReturn:
    """Exit the program with an error message."""
    typer.secho(f"Error: {message}", err=True, fg=typer.colors.RED)
    sys.exit(exit_code)


def handle_error(error: Exception) -> NoReturn:
    """Report an error and exit with the code for its kind."""
    if isinstance(error, QwxmlCliError):
        exit_with_error(error.message, error.exit_code)
    if isinstance(error, ConfigError):
        exit_with_error(f"Invalid configuration: {error}", EXIT_CONFIG)
    if isinstance(error, (QwxmlError, FileNotFoundError)):
        exit_with_error(str(error), exit_code_for(error))

    # Unexpected error
    typer.secho(f"Unexpected error: {error}", err=True, fg=typer.colors.RED)
    sys.exit(EXIT_FAILURE)
