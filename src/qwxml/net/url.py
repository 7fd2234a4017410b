"""URL helpers."""

from __future__ import annotations

from pathlib import Path

import httpx


def resolve_url(path: str, base_url: str | None = None) -> str:
    """Resolve a possibly relative reference against a base URL.

    Absolute URLs are returned unchanged; relative ones are joined onto the
    directory of the base.

    Examples:
        >>> resolve_url("img/a.png", "https://example.com/scenes/main.xml")
        'https://example.com/scenes/img/a.png'
        >>> resolve_url("https://cdn.example.com/a.png", "https://example.com/")
        'https://cdn.example.com/a.png'
    """
    if not base_url:
        return path
    return str(httpx.URL(base_url).join(path))


def cwd_url() -> str:
    """The current working directory as a file URL with a trailing slash."""
    return Path.cwd().as_uri().rstrip("/") + "/"
