"""QWXML Exceptions

Custom exceptions for the markup compiler.
"""

from __future__ import annotations

from typing import Any


class QwxmlError(Exception):
    """Base exception for all QWXML errors."""

    pass


class ProtocolViolationError(QwxmlError, RuntimeError):
    """Raised when a resolver is completed more than once."""

    def __init__(self, state: Any):
        self.state = state
        super().__init__(
            f"Cannot complete resolver, it has already been completed ({state})"
        )


class HookNotImplementedError(QwxmlError, NotImplementedError):
    """Raised when a subclass leaves a required hook unimplemented."""

    def __init__(self, owner: str, hook: str):
        self.owner = owner
        self.hook = hook
        super().__init__(f"Subclass of {owner} must implement method {hook}()")


class TypeMismatchError(QwxmlError, TypeError):
    """Raised when a raw attribute value cannot be coerced to its type."""

    def __init__(self, name: str, value: str, type_name: str):
        self.name = name
        self.value = value
        self.type_name = type_name
        super().__init__(
            f'Attribute [{name}="{value}"] could not be parsed to {type_name}'
        )


class UnresolvedReferenceError(QwxmlError, LookupError):
    """Raised when a tag name, type name or symbol path has no association."""

    def __init__(self, kind: str, reference: str):
        self.kind = kind
        self.reference = reference
        super().__init__(f"Unresolved {kind}: '{reference}'")


class ConstructionError(QwxmlError):
    """Raised when an element compiler fails to construct its object."""

    def __init__(self, tag_name: str, cause: BaseException):
        self.tag_name = tag_name
        self.cause = cause
        super().__init__(f"Failed to construct <{tag_name}>: {cause}")


class ResourceFetchError(QwxmlError):
    """Raised when a remote resource cannot be loaded."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch {url}: {reason}")


class MarkupSyntaxError(QwxmlError, ValueError):
    """Raised when a markup source is not well-formed."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Malformed markup in {source}: {reason}")


class ConfigError(QwxmlError, ValueError):
    """Raised when compiler settings cannot be loaded."""

    pass
