"""Network collaborators: URL resolution and resource fetching."""

from .fetch import HttpResourceFetcher, ResourceFetcher
from .url import cwd_url, resolve_url

__all__ = ["HttpResourceFetcher", "ResourceFetcher", "cwd_url", "resolve_url"]
