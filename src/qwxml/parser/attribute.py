"""Attribute compiler - turns one markup attribute into a typed value.

Concrete subclasses are associated with one or more type names in a
CompilerRegistry and implement `_construct()`.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from lxml import etree

from qwxml.core.parser import Parser
from qwxml.exceptions import HookNotImplementedError

if TYPE_CHECKING:
    from qwxml.parser.context import CompileContext
    from qwxml.parser.document import Document

XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"


@dataclass(frozen=True)
class MarkupAttribute:
    """A raw attribute as read from the markup."""

    name: str
    value: str
    base_url: str | None = None

    @classmethod
    def from_node(cls, node: etree._Element) -> list[MarkupAttribute]:
        """Read an element's attributes in document order.

        Namespaced names are reduced to their local name; xml:* attributes
        (xml:base, xml:lang, ...) are markup plumbing and skipped.
        """
        attributes = []
        for key, value in node.attrib.items():
            qname = etree.QName(key)
            if qname.namespace == XML_NAMESPACE:
                continue
            attributes.append(cls(qname.localname, value, node.base))
        return attributes


class Attribute(Parser[MarkupAttribute, Any]):
    """Base class for attribute compilers.

    Processing runs `_pre_construct()`, then `_construct()` (which may be a
    coroutine), then `_post_construct(result)`.
    """

    def __init__(
        self,
        attribute: MarkupAttribute,
        type_name: str,
        context: CompileContext | None = None,
    ):
        """Initialize the attribute compiler.

        Args:
            attribute: The raw attribute to compile.
            type_name: The type it was declared with.
            context: The compile pass this compiler belongs to.
        """
        super().__init__(attribute)
        self.context = context
        self.owner_document: Document | None = None
        self._type = type_name

    @property
    def attribute(self) -> MarkupAttribute:
        return self.data

    @property
    def name(self) -> str:
        return self.attribute.name

    @property
    def value(self) -> str:
        """The raw string value."""
        return self.attribute.value

    @property
    def type(self) -> str:
        """The type name this compiler was created for."""
        return self._type

    @property
    def base_url(self) -> str | None:
        if self.owner_document is not None:
            return self.owner_document.base_url
        return self.attribute.base_url

    async def _process(self) -> Any:
        self._pre_construct()
        result = self._construct()
        if inspect.isawaitable(result):
            result = await result
        return self._post_construct(result)

    def _pre_construct(self) -> None:
        """Called before `_construct()`."""
        pass

    def _construct(self) -> Any:
        """Compile the raw value. May return an awaitable."""
        raise HookNotImplementedError("Attribute", "_construct")

    def _post_construct(self, result: Any) -> Any:
        """Called with the constructed value; returns the final result."""
        return result

    def __repr__(self) -> str:
        return f'<{type(self).__name__} {self.name}:{self.type}="{self.value}">'
