"""qwxml - Qwex XML object compiler

Compiles declarative markup into live Python objects. Element and attribute
compilers are looked up by tag and type name; processing is asynchronous
and runs each element's attributes, then its children, then itself.
"""

from qwxml._version import __version__
from qwxml.config import CompilerSettings
from qwxml.core import (
    DEFAULT_NAMESPACE,
    Diagnostic,
    Diagnostics,
    Parser,
    Resolver,
    ResolverState,
    SymbolNamespace,
)
from qwxml.exceptions import (
    ConfigError,
    ConstructionError,
    HookNotImplementedError,
    MarkupSyntaxError,
    ProtocolViolationError,
    QwxmlError,
    ResourceFetchError,
    TypeMismatchError,
    UnresolvedReferenceError,
)
from qwxml.parser import (
    DEFAULT_REGISTRY,
    Attribute,
    CompileResult,
    CompilerRegistry,
    Document,
    Element,
    MarkupAttribute,
    compile_file,
    compile_string,
)

__all__ = [
    "__version__",
    # compilers
    "Attribute",
    "CompileResult",
    "CompilerRegistry",
    "DEFAULT_REGISTRY",
    "Document",
    "Element",
    "MarkupAttribute",
    "compile_file",
    "compile_string",
    # core
    "DEFAULT_NAMESPACE",
    "Diagnostic",
    "Diagnostics",
    "Parser",
    "Resolver",
    "ResolverState",
    "SymbolNamespace",
    "CompilerSettings",
    # errors
    "ConfigError",
    "ConstructionError",
    "HookNotImplementedError",
    "MarkupSyntaxError",
    "ProtocolViolationError",
    "QwxmlError",
    "ResourceFetchError",
    "TypeMismatchError",
    "UnresolvedReferenceError",
]
