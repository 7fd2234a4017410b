"""Markup compilers: attributes, elements, documents.

Importing this package associates the built-in tags and attribute types
with DEFAULT_REGISTRY.
"""

from .attribute import Attribute, MarkupAttribute
from .context import CompileContext
from .element import AttributeDefinition, Element
from .registry import DEFAULT_REGISTRY, CompilerRegistry

# Built-ins register themselves on import
from . import attr  # noqa: E402
from .collection import ListElement, ObjectElement  # noqa: E402
from .data import Data  # noqa: E402
from .document import (  # noqa: E402
    CompileResult,
    Document,
    compile_document,
    compile_file,
    compile_string,
)

__all__ = [
    "Attribute",
    "AttributeDefinition",
    "CompileContext",
    "CompileResult",
    "CompilerRegistry",
    "DEFAULT_REGISTRY",
    "Data",
    "Document",
    "Element",
    "ListElement",
    "MarkupAttribute",
    "ObjectElement",
    "attr",
    "compile_document",
    "compile_file",
    "compile_string",
]
