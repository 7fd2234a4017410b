"""Compile context - per-pass compiler caches.

Each Document owns one CompileContext, so caches are never shared between
compile passes:
- element compilers are cached by markup node identity
- attribute compilers are cached by (name, type, raw value), so identical
  attributes on different elements share one compiled value
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from lxml import etree

from qwxml.core.diagnostics import Diagnostics
from qwxml.core.namespace import SymbolNamespace
from qwxml.parser.attribute import Attribute, MarkupAttribute
from qwxml.parser.element import Element, tag_name_of

if TYPE_CHECKING:
    from qwxml.net.fetch import ResourceFetcher
    from qwxml.parser.registry import CompilerRegistry

log = logging.getLogger(__name__)

AttributeKey = tuple[str, str, str]


class CompileContext:
    """Registry access and instance caches for one compile pass."""

    def __init__(
        self,
        registry: CompilerRegistry,
        diagnostics: Diagnostics | None = None,
        fetcher: ResourceFetcher | None = None,
    ):
        """Initialize the context.

        Args:
            registry: Tag and type associations to compile with.
            diagnostics: Sink for recoverable failures. Created if omitted.
            fetcher: Collaborator for attributes that load resources.
        """
        self.registry = registry
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.fetcher = fetcher
        self._elements: dict[etree._Element, Element] = {}
        self._attributes: dict[AttributeKey, Attribute] = {}

    @property
    def namespace(self) -> SymbolNamespace:
        return self.registry.namespace

    def element_parser(self, node: etree._Element) -> Element:
        """Return the compiler for a markup element, creating it once.

        Raises:
            UnresolvedReferenceError: If no compiler is registered for the tag.
        """
        parser = self._elements.get(node)
        if parser is None:
            ctor = self.registry.tags.lookup(tag_name_of(node))
            parser = ctor(node, self)
            self._elements[node] = parser
            log.debug("Created %r", parser)
        return parser

    def attribute_parser(self, attribute: MarkupAttribute, type_name: str) -> Attribute:
        """Return the compiler for an attribute value of a given type.

        Raises:
            UnresolvedReferenceError: If no compiler is registered for the type.
        """
        type_key = type_name.strip().lower()
        key = (attribute.name, type_key, attribute.value)

        parser = self._attributes.get(key)
        if parser is None:
            ctor = self.registry.types.lookup(type_key)
            parser = ctor(attribute, type_key, self)
            self._attributes[key] = parser
        return parser

    def __repr__(self) -> str:
        return (
            f"<CompileContext elements={len(self._elements)} "
            f"attributes={len(self._attributes)}>"
        )
