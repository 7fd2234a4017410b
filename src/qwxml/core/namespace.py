"""Symbol namespace - dotted path lookups for class/instance attributes.

Symbols are looked up in two places, in order:
1. Symbols defined explicitly with `define()` (a nested dict rooted here)
2. Importable Python objects (`package.module.Attr`)
"""

from __future__ import annotations

import importlib
import logging
from typing import Any

from qwxml.exceptions import UnresolvedReferenceError

log = logging.getLogger(__name__)

_MISSING = object()


class SymbolNamespace:
    """Process-wide root for dotted-path symbol lookups."""

    def __init__(self, root: dict[str, Any] | None = None, allow_import: bool = True):
        """Create a namespace.

        Args:
            root: Initial symbols, possibly nested dicts or objects.
            allow_import: Fall back to importing Python modules for paths
                not defined explicitly.
        """
        self._root: dict[str, Any] = dict(root or {})
        self.allow_import = allow_import

    def define(self, path: str, obj: Any, overwrite: bool = True) -> bool:
        """Define an object at a dotted path, creating intermediate levels.

        Args:
            path: Dotted path, e.g. "app.delegates.Main".
            obj: The object to store.
            overwrite: Replace an existing definition.

        Returns:
            True if the object was stored.
        """
        *parents, leaf = self._split(path)
        node: dict[str, Any] = self._root
        for part in parents:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child

        if leaf in node and not overwrite:
            return False

        node[leaf] = obj
        return True

    def defined(self, path: str) -> bool:
        """Check whether a path resolves. Never raises."""
        try:
            return self._lookup(path) is not _MISSING
        except Exception:
            log.debug("Lookup of '%s' failed", path, exc_info=True)
            return False

    def reflect(self, path: str) -> Any:
        """Return the object at a dotted path.

        Raises:
            UnresolvedReferenceError: If the path does not resolve.
        """
        value = self._lookup(path)
        if value is _MISSING:
            raise UnresolvedReferenceError("symbol", path)
        return value

    def copy(self) -> SymbolNamespace:
        return SymbolNamespace(_deep_copy_dicts(self._root), self.allow_import)

    def _lookup(self, path: str) -> Any:
        parts = self._split(path)

        value = _walk(self._root, parts)
        if value is not _MISSING or not self.allow_import:
            return value

        return self._import(parts)

    def _import(self, parts: list[str]) -> Any:
        # Longest importable module prefix, then attribute access for the rest
        for cut in range(len(parts), 0, -1):
            module_name = ".".join(parts[:cut])
            try:
                module = importlib.import_module(module_name)
            except ImportError:
                continue
            return _walk(module, parts[cut:])
        return _MISSING

    @staticmethod
    def _split(path: str) -> list[str]:
        parts = path.strip().split(".")
        if not all(parts):
            raise UnresolvedReferenceError("symbol", path)
        return parts


def _walk(node: Any, parts: list[str]) -> Any:
    for part in parts:
        if isinstance(node, dict):
            if part not in node:
                return _MISSING
            node = node[part]
        else:
            node = getattr(node, part, _MISSING)
            if node is _MISSING:
                return _MISSING
    return node


def _deep_copy_dicts(node: dict[str, Any]) -> dict[str, Any]:
    return {
        key: _deep_copy_dicts(value) if isinstance(value, dict) else value
        for key, value in node.items()
    }


DEFAULT_NAMESPACE = SymbolNamespace()
