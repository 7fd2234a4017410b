"""Compiler registry - tag and type associations plus the symbol namespace.

DEFAULT_REGISTRY is the process-wide registry that built-in compilers and
plugins associate themselves with on import. Documents use it unless given
another one; `copy()` produces an independent registry for isolated use.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from qwxml.core.namespace import DEFAULT_NAMESPACE, SymbolNamespace
from qwxml.core.registry import Registry
from qwxml.parser.attribute import Attribute
from qwxml.parser.element import Element


def _tag_registry() -> Registry[type[Element]]:
    return Registry("tag", Element)


def _type_registry() -> Registry[type[Attribute]]:
    return Registry("type", Attribute)


@dataclass
class CompilerRegistry:
    """Everything a compile pass looks names up in."""

    tags: Registry[type[Element]] = field(default_factory=_tag_registry)
    types: Registry[type[Attribute]] = field(default_factory=_type_registry)
    namespace: SymbolNamespace = field(default_factory=SymbolNamespace)

    def copy(self, namespace: SymbolNamespace | None = None) -> "CompilerRegistry":
        """Independent copy of the associations.

        Args:
            namespace: Namespace for the copy. Defaults to a copy of this one.
        """
        return CompilerRegistry(
            tags=self.tags.copy(),
            types=self.types.copy(),
            namespace=namespace if namespace is not None else self.namespace.copy(),
        )


DEFAULT_REGISTRY = CompilerRegistry(namespace=DEFAULT_NAMESPACE)
