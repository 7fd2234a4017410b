"""Core primitives: resolver, parser, registry, namespace, diagnostics"""

from .diagnostics import Diagnostic, Diagnostics
from .namespace import DEFAULT_NAMESPACE, SymbolNamespace
from .parser import Parser
from .registry import Registry
from .resolver import Resolver, ResolverState

__all__ = [
    "DEFAULT_NAMESPACE",
    "Diagnostic",
    "Diagnostics",
    "Parser",
    "Registry",
    "Resolver",
    "ResolverState",
    "SymbolNamespace",
]
