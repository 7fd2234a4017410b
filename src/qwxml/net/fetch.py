"""Resource fetching for attributes that load external data.

The compiler only depends on the ResourceFetcher protocol. The default
HttpResourceFetcher loads http(s) URLs through httpx and file URLs from
disk, and decodes images with Pillow.
"""

from __future__ import annotations

import asyncio
import io
import logging
from pathlib import Path
from types import TracebackType
from typing import TYPE_CHECKING, Protocol

import httpx
from PIL import Image, UnidentifiedImageError

from qwxml.exceptions import ResourceFetchError

if TYPE_CHECKING:
    from qwxml.config import CompilerSettings

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_REDIRECTS = 5


class ResourceFetcher(Protocol):
    """Loads external resources for attribute compilers."""

    async def fetch_image(self, url: str) -> Image.Image:
        """Fetch and decode an image.

        Raises:
            ResourceFetchError: If the image cannot be loaded.
        """
        ...


class HttpResourceFetcher:
    """Fetches resources over http(s) or from the local filesystem.

    Usage:
        async with HttpResourceFetcher(timeout=10) as fetcher:
            image = await fetcher.fetch_image("https://example.com/a.png")
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        follow_redirects: bool = True,
        max_redirects: int = DEFAULT_MAX_REDIRECTS,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            timeout: HTTP request timeout in seconds.
            follow_redirects: Follow HTTP redirects.
            max_redirects: Maximum number of redirects to follow.
            client: Existing client to use. It is not closed by aclose().
        """
        self.timeout = timeout
        self.follow_redirects = follow_redirects
        self.max_redirects = max_redirects
        self._client = client
        self._owns_client = client is None

    @classmethod
    def from_settings(cls, settings: CompilerSettings) -> "HttpResourceFetcher":
        return cls(
            timeout=settings.fetch_timeout,
            follow_redirects=settings.follow_redirects,
            max_redirects=settings.max_redirects,
        )

    async def fetch_bytes(self, url: str) -> bytes:
        """Fetch the raw content behind a URL or local path.

        Raises:
            ResourceFetchError: On HTTP errors, missing files or bad schemes.
        """
        parsed = httpx.URL(url)
        scheme = parsed.scheme

        if scheme in ("http", "https"):
            return await self._fetch_http(url)

        if scheme in ("file", ""):
            path = Path(parsed.path) if scheme == "file" else Path(url)
            try:
                return await asyncio.to_thread(path.read_bytes)
            except OSError as e:
                raise ResourceFetchError(url, str(e)) from e

        raise ResourceFetchError(url, f"unsupported scheme '{scheme}'")

    async def fetch_image(self, url: str) -> Image.Image:
        """Fetch and decode an image."""
        content = await self.fetch_bytes(url)
        try:
            image = await asyncio.to_thread(_decode_image, content)
        except (UnidentifiedImageError, OSError) as e:
            raise ResourceFetchError(url, f"not a decodable image: {e}") from e

        log.debug("Loaded image %s (%s, %sx%s)", url, image.format, *image.size)
        return image

    async def _fetch_http(self, url: str) -> bytes:
        client = self._get_client()
        try:
            response = await client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ResourceFetchError(url, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise ResourceFetchError(url, str(e) or type(e).__name__) from e
        return response.content

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=self.follow_redirects,
                max_redirects=self.max_redirects,
            )
        return self._client

    async def aclose(self) -> None:
        """Close the HTTP client if this fetcher created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "HttpResourceFetcher":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()


def _decode_image(content: bytes) -> Image.Image:
    image = Image.open(io.BytesIO(content))
    image.load()
    return image
