"""Element compiler - turns one markup element into an arbitrary object.

Processing is strictly sequential:
1. Attributes, in document order, each compiled by the attribute compiler
   registered for its declared type
2. Child elements, in document order, each after receiving forwarded values
3. Construction of this element's own object

Every attribute and child step is deferred by one loop turn. A failed
attribute leaves the attribute unset and a failed child leaves a gap; both
are recorded as diagnostics. Only construction errors propagate.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import MutableMapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from lxml import etree

from qwxml.core.diagnostics import ATTRIBUTE_FAILED, CHILD_FAILED
from qwxml.core.parser import Parser
from qwxml.core.resolver import Resolver
from qwxml.exceptions import ConstructionError, UnresolvedReferenceError
from qwxml.parser.attribute import MarkupAttribute

if TYPE_CHECKING:
    from qwxml.parser.context import CompileContext
    from qwxml.parser.document import Document

log = logging.getLogger(__name__)

STRING_TYPES = frozenset({"string", "str"})


@dataclass(frozen=True)
class AttributeDefinition:
    """Schema entry for one attribute of an element compiler."""

    type: str
    auto_assign: bool = True
    forward: bool = False


def tag_name_of(node: etree._Element) -> str:
    """Lower-cased local tag name of an lxml element."""
    return etree.QName(node).localname.lower()


class Element(Parser[etree._Element, Any]):
    """Base class for element compilers.

    Subclasses declare their attributes in `__init__` with
    `define_attribute()` and override `_construct()` and/or
    `_post_construct()`.

    Example:
        class Sprite(Element):
            def __init__(self, node, context, base_url=None):
                super().__init__(node, context, base_url)
                self.define_attribute("x", "number")
                self.define_attribute("visible", "bool")

            def _construct(self):
                return SpriteObject()

        registry.tags.associate(Sprite, "sprite")
    """

    def __init__(
        self,
        node: etree._Element,
        context: CompileContext,
        base_url: str | None = None,
    ):
        """Initialize the element compiler.

        Args:
            node: The markup element to compile.
            context: The compile pass this compiler belongs to.
            base_url: Explicit base URL, used when no owner document is set.
        """
        super().__init__(node)
        self.context = context
        self.owner_document: Document | None = None
        self._base_url = base_url
        self._definitions: dict[str, AttributeDefinition] = {}
        self._values: dict[str, Any] = {}

    # =========================================================================
    # Accessors
    # =========================================================================

    @property
    def element(self) -> etree._Element:
        return self.data

    @property
    def tag_name(self) -> str:
        return tag_name_of(self.element)

    @property
    def base_url(self) -> str | None:
        if self.owner_document is not None:
            return self.owner_document.base_url
        return self._base_url or self.element.base

    @property
    def definitions(self) -> dict[str, AttributeDefinition]:
        return dict(self._definitions)

    @property
    def attributes(self) -> dict[str, Any]:
        """A copy of the resolved attribute values."""
        return dict(self._values)

    @property
    def markup_attributes(self) -> list[MarkupAttribute]:
        return MarkupAttribute.from_node(self.element)

    @property
    def children(self) -> list[Element]:
        """Compilers of the child elements, in document order.

        Children whose compiler could not be created (unregistered tag, failing
        constructor) are left out; they were reported when the child phase ran.
        """
        parsers = []
        for node in self._child_nodes():
            try:
                parsers.append(self.context.element_parser(node))
            except Exception:
                continue
        return parsers

    def describe(self) -> str:
        """Short location string for messages, e.g. '<sprite> line 4'."""
        line = self.element.sourceline
        return f"<{self.tag_name}> line {line}" if line else f"<{self.tag_name}>"

    # =========================================================================
    # Schema and resolved values
    # =========================================================================

    def define_attribute(
        self,
        name: str,
        type_name: str,
        auto_assign: bool = True,
        forward: bool = False,
    ) -> None:
        """Declare how an attribute is compiled.

        Args:
            name: The attribute name.
            type_name: Type associated with an attribute compiler, or "string".
            auto_assign: Copy the compiled value onto the constructed object.
            forward: Pass the resolved value on to every child compiler.
        """
        self._definitions[name] = AttributeDefinition(
            type=type_name.strip().lower(),
            auto_assign=bool(auto_assign),
            forward=bool(forward),
        )

    def set_attribute(self, name: str, value: Any) -> None:
        self._values[name] = value

    def has_attribute(self, name: str) -> bool:
        return name in self._values

    def get_attribute(self, name: str, default: Any = None) -> Any:
        """Return the resolved value of an attribute, or default if unset."""
        return self._values.get(name, default)

    def remove_attribute(self, name: str) -> None:
        self._values.pop(name, None)

    # =========================================================================
    # Queries
    # =========================================================================

    def get_parser_by_id(self, element_id: str) -> Element | None:
        """Compiler of the first descendant whose id attribute matches."""
        matches = self.element.xpath(".//*[@id=$element_id]", element_id=element_id)
        if not matches:
            return None
        return self.context.element_parser(matches[0])

    def get_parsers_by_tag_name(self, tag_name: str) -> list[Element]:
        """Compilers of all descendants with the given tag name.

        Raises:
            UnresolvedReferenceError: If the tag has no registered compiler.
        """
        key = tag_name.lower()
        return [
            self.context.element_parser(node)
            for node in self.element.iterdescendants()
            if isinstance(node.tag, str) and tag_name_of(node) == key
        ]

    def xpath(self, expression: str, **variables: Any) -> list[Element]:
        """Compilers of the elements selected by an XPath expression."""
        result = self.element.xpath(expression, **variables)
        if not isinstance(result, list):
            return []
        return [
            self.context.element_parser(node)
            for node in result
            if isinstance(node, etree._Element) and isinstance(node.tag, str)
        ]

    # =========================================================================
    # Processing
    # =========================================================================

    async def _process(self) -> Any:
        await self._process_attributes()
        await self._process_child_elements()
        return await self._process_element()

    async def _process_attributes(self) -> None:
        self._pre_process_attributes()
        for attribute in self.markup_attributes:
            await self._process_attribute(attribute)
        self._post_process_attributes()

    async def _process_attribute(self, attribute: MarkupAttribute) -> None:
        definition = self._definitions.get(attribute.name)
        type_name = definition.type if definition else "string"

        if type_name in STRING_TYPES:
            self.set_attribute(attribute.name, attribute.value)
            return

        try:
            parser = self.context.attribute_parser(attribute, type_name)
        except UnresolvedReferenceError as e:
            self.context.diagnostics.warning(
                ATTRIBUTE_FAILED,
                f'Attribute [{attribute.name}="{attribute.value}"] ignored: {e}',
                self.describe(),
            )
            return

        parser.parent = self
        parser.owner_document = self.owner_document

        await self._defer(parser)

        if parser.failed:
            self.context.diagnostics.warning(
                ATTRIBUTE_FAILED,
                f'Attribute [{attribute.name}="{attribute.value}"] ignored: '
                f"{parser.error}",
                self.describe(),
            )
            return

        self.set_attribute(attribute.name, parser.result)

    def _pre_process_attributes(self) -> None:
        """Called before the attributes are processed."""
        pass

    def _post_process_attributes(self) -> None:
        """Called after all attributes have been processed."""
        pass

    async def _process_child_elements(self) -> None:
        for node in self._child_nodes():
            try:
                child = self.context.element_parser(node)
            except Exception as e:
                self.context.diagnostics.error(
                    CHILD_FAILED, f"Child element skipped: {e}", self.describe()
                )
                continue

            child.parent = self
            child.owner_document = self.owner_document
            self._forward_attributes(child)

            await self._defer(child)

            if child.failed:
                self.context.diagnostics.error(
                    CHILD_FAILED,
                    f"{child.describe()} failed: {child.error}",
                    self.describe(),
                )

    def _forward_attributes(self, child: Element) -> None:
        # The child's own markup attribute wins over a forwarded value
        own = {attribute.name for attribute in child.markup_attributes}
        for name, definition in self._definitions.items():
            if not definition.forward or not self.has_attribute(name):
                continue
            if name in own:
                log.debug("%s keeps its own '%s'", child.describe(), name)
                continue
            child.set_attribute(name, self.get_attribute(name))

    async def _process_element(self) -> Any:
        try:
            obj = self._construct()
            if inspect.isawaitable(obj):
                obj = await obj

            self._auto_assign(obj)

            obj = self._post_construct(obj)
            if inspect.isawaitable(obj):
                obj = await obj
        except ConstructionError:
            raise
        except Exception as e:
            raise ConstructionError(self.tag_name, e) from e

        return obj

    def _auto_assign(self, obj: Any) -> None:
        for name, definition in self._definitions.items():
            if not definition.auto_assign or name not in self._values:
                continue

            value = self._values[name]
            if isinstance(obj, MutableMapping):
                obj[name] = value
                continue

            try:
                setattr(obj, name, value)
            except (AttributeError, TypeError):
                log.debug(
                    "%s: cannot assign '%s' onto %s",
                    self.describe(),
                    name,
                    type(obj).__name__,
                )

    def _construct(self) -> Any:
        """Construct the result object. May return an awaitable."""
        return {}

    def _post_construct(self, obj: Any) -> Any:
        """Finish the constructed object. May return an awaitable."""
        return obj

    async def _defer(self, parser: Parser[Any, Any]) -> None:
        """Run a parser on the next loop turn and wait until it settles.

        The parser's failure is not raised here; callers inspect it.
        """
        loop = asyncio.get_running_loop()
        resolver: Resolver[None] = Resolver(loop)

        def start() -> None:
            parser.process().add_done_callback(lambda _: resolver.resolve())

        loop.call_soon(start)
        await resolver.future

    def _child_nodes(self) -> list[etree._Element]:
        # Comments and processing instructions have non-string tags
        return [node for node in self.element if isinstance(node.tag, str)]

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.describe()}>"
