from __future__ import annotations

from qwxml.exceptions import TypeMismatchError
from qwxml.parser.attribute import Attribute
from qwxml.parser.registry import DEFAULT_REGISTRY


class Boolean(Attribute):
    """bool/boolean - "1"/"true" and "0"/"false", case-insensitive."""

    def _construct(self) -> bool:
        value = self.value.strip().lower()
        if value in ("0", "false"):
            return False
        if value in ("1", "true"):
            return True
        raise TypeMismatchError(self.name, self.value, self.type)


DEFAULT_REGISTRY.types.associate(Boolean, "bool", "boolean")
