from __future__ import annotations

from typing import Any

from qwxml.exceptions import QwxmlError, TypeMismatchError
from qwxml.parser.attribute import Attribute
from qwxml.parser.registry import DEFAULT_REGISTRY


class Constructor(Attribute):
    """class/constructor - the object at a dotted path in the symbol namespace."""

    def _construct(self) -> Any:
        if self.context is None:
            raise QwxmlError(f"{self!r} has no compile context to look symbols up in")
        return self.context.namespace.reflect(self.value.strip())


class Instance(Constructor):
    """instance - the looked up class, instantiated without arguments.

    Only classes are accepted; plain callables such as module functions are
    a type mismatch.
    """

    def _construct(self) -> Any:
        ctor = super()._construct()
        if not isinstance(ctor, type):
            raise TypeMismatchError(self.name, self.value, self.type)
        return ctor()


DEFAULT_REGISTRY.types.associate(Constructor, "class", "constructor")
DEFAULT_REGISTRY.types.associate(Instance, "instance")
