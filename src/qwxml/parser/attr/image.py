from __future__ import annotations

import logging

from PIL import Image as PILImage

from qwxml.exceptions import ResourceFetchError
from qwxml.net.url import resolve_url
from qwxml.parser.attribute import Attribute
from qwxml.parser.registry import DEFAULT_REGISTRY

log = logging.getLogger(__name__)


class Image(Attribute):
    """img/image - loads the image the value points to, relative to the base URL."""

    async def _construct(self) -> PILImage.Image:
        url = resolve_url(self.value.strip(), self.base_url)

        fetcher = self.context.fetcher if self.context is not None else None
        if fetcher is None:
            raise ResourceFetchError(url, "no resource fetcher available")

        log.debug("Fetching image %s", url)
        return await fetcher.fetch_image(url)


DEFAULT_REGISTRY.types.associate(Image, "img", "image")
