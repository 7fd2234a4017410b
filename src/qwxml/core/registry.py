"""Registry - case-insensitive name to constructor mapping.

Last registration wins. Overwriting an existing association is allowed so
built-in compilers can be patched, but it is logged.
"""

from __future__ import annotations

import logging
from typing import Generic, Iterator, TypeVar

from qwxml.exceptions import UnresolvedReferenceError

log = logging.getLogger(__name__)

T = TypeVar("T", bound=type)


class Registry(Generic[T]):
    """Maps lower-cased names to classes.

    Args:
        kind: Human-readable label used in messages (e.g. "tag", "type").
        base: Optional base class every registered class must extend.
    """

    def __init__(self, kind: str, base: type | None = None):
        self.kind = kind
        self.base = base
        self._entries: dict[str, T] = {}

    def associate(self, ctor: T, *names: str) -> None:
        """Associate a class with one or more names.

        Args:
            ctor: The class to register.
            names: Names to register it under (case-insensitive).

        Raises:
            ValueError: If no names are given.
            TypeError: If ctor does not extend the registry's base class.
        """
        if not names:
            raise ValueError(
                f"No {self.kind} names given to associate with {ctor.__name__}"
            )

        if self.base is not None and not (
            isinstance(ctor, type) and issubclass(ctor, self.base)
        ):
            raise TypeError(
                f"Class to associate for {self.kind}s {', '.join(names)} "
                f"is not a subclass of {self.base.__name__}"
            )

        for name in names:
            key = self.normalize(name)
            if key in self._entries:
                log.warning(
                    "%s '%s' is already associated with %s, overwriting with %s",
                    self.kind.capitalize(),
                    name,
                    self._entries[key].__name__,
                    ctor.__name__,
                )
            self._entries[key] = ctor

    def lookup(self, name: str) -> T:
        """Return the class registered for a name.

        Raises:
            UnresolvedReferenceError: If nothing is registered under the name.
        """
        key = self.normalize(name)
        if key not in self._entries:
            raise UnresolvedReferenceError(self.kind, name)
        return self._entries[key]

    def copy(self) -> Registry[T]:
        """Return an independent registry with the same associations."""
        other: Registry[T] = Registry(self.kind, self.base)
        other._entries = dict(self._entries)
        return other

    def names(self) -> list[str]:
        return sorted(self._entries)

    def items(self) -> list[tuple[str, T]]:
        return sorted(self._entries.items())

    @staticmethod
    def normalize(name: str) -> str:
        return name.strip().lower()

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.normalize(name) in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"<Registry {self.kind}: {len(self)} entries>"
