"""Data elements - scalar values written as markup.

    <data name="title" value="Hello"/>
    <data name="count" type="int" value="3"/>
    <bool name="enabled">true</bool>
    <float name="ratio" value="0.75"/>

The tag name selects the value type; `<data>` takes it from its `type`
attribute and defaults to string. The value comes from the `value`
attribute, or from the element text when there is no such attribute.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from lxml import etree

from qwxml.parser.attribute import MarkupAttribute
from qwxml.parser.element import STRING_TYPES, Element, tag_name_of
from qwxml.parser.registry import DEFAULT_REGISTRY

if TYPE_CHECKING:
    from qwxml.parser.context import CompileContext


class Data(Element):
    """Compiles to the typed scalar it holds."""

    def __init__(
        self,
        node: etree._Element,
        context: CompileContext,
        base_url: str | None = None,
    ):
        super().__init__(node, context, base_url)

        tag_name = tag_name_of(node)
        if tag_name == "data":
            self.value_type = (node.get("type") or "string").strip().lower()
        else:
            self.value_type = tag_name

        self.define_attribute("name", "string", auto_assign=False)
        self.define_attribute("type", "string", auto_assign=False)
        self.define_attribute("value", self.value_type, auto_assign=False)

    async def _construct(self) -> Any:
        if "value" in self.element.attrib:
            # Unset if the value failed to compile
            return self.get_attribute("value")

        text = (self.element.text or "").strip()
        if not text:
            return None
        if self.value_type in STRING_TYPES:
            return text

        attribute = MarkupAttribute("value", text, self.base_url)
        parser = self.context.attribute_parser(attribute, self.value_type)
        parser.parent = self
        parser.owner_document = self.owner_document
        await parser.process()
        return parser.result


DEFAULT_REGISTRY.tags.associate(
    Data,
    "data",
    "string",
    "str",
    "bool",
    "boolean",
    "number",
    "int",
    "integer",
    "float",
)
