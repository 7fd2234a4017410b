"""Container elements that aggregate their children's results.

    <object>
      <string name="title">Scene</string>
      <list name="sizes">
        <int>1</int>
        <int>2</int>
      </list>
    </object>

compiles to {"title": "Scene", "sizes": [1, 2]}. Children that failed to
compile are left out.
"""

from __future__ import annotations

from typing import Any

from qwxml.parser.element import Element
from qwxml.parser.registry import DEFAULT_REGISTRY


class ListElement(Element):
    """Compiles to a list of its children's results, in document order."""

    def _construct(self) -> list[Any]:
        return []

    def _post_construct(self, obj: list[Any]) -> list[Any]:
        obj.extend(
            child.result for child in self.children if child.settled and not child.failed
        )
        return obj


class ObjectElement(Element):
    """Compiles to a dict of its named children's results."""

    def _construct(self) -> dict[str, Any]:
        return {}

    def _post_construct(self, obj: dict[str, Any]) -> dict[str, Any]:
        for child in self.children:
            if not child.settled or child.failed:
                continue
            name = child.get_attribute("name")
            if name is None:
                continue
            obj[name] = child.result
        return obj


DEFAULT_REGISTRY.tags.associate(ListElement, "list", "array")
DEFAULT_REGISTRY.tags.associate(ObjectElement, "object", "dict", "map")
