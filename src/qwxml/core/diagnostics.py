"""Diagnostics - structured record of recoverable failures.

Every compile pass owns one Diagnostics sink. Recoverable problems (a bad
attribute, a failed child element) are recorded here and logged, so callers
can inspect exactly what went wrong without scraping logs.
"""

from __future__ import annotations

import logging
from typing import Iterator, Literal

import msgspec

log = logging.getLogger(__name__)

Severity = Literal["warning", "error"]

ATTRIBUTE_FAILED = "attribute-failed"
CHILD_FAILED = "child-failed"


class Diagnostic(msgspec.Struct, frozen=True):
    """A single recorded problem."""

    severity: Severity
    code: str
    message: str
    subject: str = ""


class Diagnostics:
    """Append-only sink of diagnostics for one compile pass."""

    def __init__(self) -> None:
        self._items: list[Diagnostic] = []

    def warning(self, code: str, message: str, subject: str = "") -> Diagnostic:
        """Record and log a warning."""
        return self._record(Diagnostic("warning", code, message, subject))

    def error(self, code: str, message: str, subject: str = "") -> Diagnostic:
        """Record and log an error."""
        return self._record(Diagnostic("error", code, message, subject))

    def codes(self) -> list[str]:
        return [item.code for item in self._items]

    def by_code(self, code: str) -> list[Diagnostic]:
        return [item for item in self._items if item.code == code]

    def to_json(self) -> bytes:
        return msgspec.json.encode(self._items)

    def _record(self, diagnostic: Diagnostic) -> Diagnostic:
        level = logging.ERROR if diagnostic.severity == "error" else logging.WARNING
        if diagnostic.subject:
            log.log(level, "%s: %s", diagnostic.subject, diagnostic.message)
        else:
            log.log(level, "%s", diagnostic.message)
        self._items.append(diagnostic)
        return diagnostic

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __repr__(self) -> str:
        return f"<Diagnostics {len(self)} entries>"
