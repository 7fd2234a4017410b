"""Document compiler - the entry point of a compile pass.

Usage:
    document = Document.from_file("scene.xml")
    await document.process()
    scene = document.result

or, with diagnostics:
    compiled = await compile_file("scene.xml")
    compiled.result, compiled.diagnostics
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from lxml import etree

from qwxml.config import CompilerSettings
from qwxml.core.diagnostics import Diagnostics
from qwxml.core.parser import Parser
from qwxml.exceptions import MarkupSyntaxError
from qwxml.net.fetch import HttpResourceFetcher, ResourceFetcher
from qwxml.net.url import cwd_url
from qwxml.parser.context import CompileContext
from qwxml.parser.element import Element
from qwxml.parser.registry import DEFAULT_REGISTRY, CompilerRegistry

log = logging.getLogger(__name__)


def xml_parser() -> etree.XMLParser:
    """XML parser with entity resolution and network access disabled."""
    return etree.XMLParser(resolve_entities=False, no_network=True, remove_comments=True)


def _document_url(tree: etree._ElementTree) -> str | None:
    url = tree.docinfo.URL
    if not url:
        return None
    if "://" in url:
        return url
    # lxml records plain filesystem paths for parsed files
    return Path(url).resolve().as_uri()


class Document(Parser[etree._ElementTree, Any]):
    """Compiles a whole markup document into its root element's object."""

    def __init__(
        self,
        doc: etree._ElementTree | etree._Element,
        base_url: str | None = None,
        *,
        registry: CompilerRegistry | None = None,
        settings: CompilerSettings | None = None,
        fetcher: ResourceFetcher | None = None,
        diagnostics: Diagnostics | None = None,
    ):
        """Initialize the document compiler.

        Args:
            doc: The parsed document, or its root element.
            base_url: Base URL for relative references. Falls back to the
                settings, then the document's URL, then the working directory.
            registry: Tag/type associations. Defaults to DEFAULT_REGISTRY.
            settings: Compiler settings. Defaults to CompilerSettings().
            fetcher: Resource fetcher. An HttpResourceFetcher built from the
                settings is created (and closed after processing) if omitted.
            diagnostics: Sink for recoverable failures.
        """
        if isinstance(doc, etree._Element):
            doc = doc.getroottree()
        super().__init__(doc)

        self.settings = settings or CompilerSettings()
        self.registry = registry or DEFAULT_REGISTRY

        # A fetcher created here is closed once processing ends
        self._own_fetcher: HttpResourceFetcher | None = None
        if fetcher is None:
            fetcher = self._own_fetcher = HttpResourceFetcher.from_settings(
                self.settings
            )

        self._context = CompileContext(self.registry, diagnostics, fetcher)
        self._base_url = (
            base_url or self.settings.base_url or _document_url(doc) or cwd_url()
        )
        self._root_parser: Element | None = None

    @classmethod
    def from_string(
        cls, text: str | bytes, base_url: str | None = None, **kwargs: Any
    ) -> "Document":
        """Parse markup text and wrap it in a Document.

        Raises:
            MarkupSyntaxError: If the text is not well-formed.
        """
        data = text.encode("utf-8") if isinstance(text, str) else text
        try:
            root = etree.fromstring(data, xml_parser(), base_url=base_url)
        except etree.XMLSyntaxError as e:
            raise MarkupSyntaxError(base_url or "<string>", str(e)) from e
        return cls(root.getroottree(), base_url, **kwargs)

    @classmethod
    def from_file(cls, path: str | Path, **kwargs: Any) -> "Document":
        """Parse a markup file and wrap it in a Document.

        Raises:
            FileNotFoundError: If the file does not exist.
            MarkupSyntaxError: If the file is not well-formed.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Markup file not found: {path}")

        try:
            tree = etree.parse(str(path), xml_parser())
        except etree.XMLSyntaxError as e:
            raise MarkupSyntaxError(str(path), str(e)) from e
        return cls(tree, **kwargs)

    @property
    def doc(self) -> etree._ElementTree:
        return self.data

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def context(self) -> CompileContext:
        return self._context

    @property
    def diagnostics(self) -> Diagnostics:
        return self._context.diagnostics

    @property
    def root_parser(self) -> Element | None:
        """The root element's compiler, once processing has started."""
        return self._root_parser

    async def _process(self) -> Any:
        try:
            root = self._context.element_parser(self.doc.getroot())
            self._root_parser = root
            root.parent = self
            root.owner_document = self

            log.debug("Compiling %s from %s", root.describe(), self.base_url)
            await root.process()
            return root.result
        finally:
            if self._own_fetcher is not None:
                await self._own_fetcher.aclose()

    def __repr__(self) -> str:
        return f"<Document {self.base_url}>"


@dataclass
class CompileResult:
    """Outcome of a compile pass."""

    result: Any
    diagnostics: Diagnostics
    document: Document


async def compile_document(document: Document) -> CompileResult:
    """Process a document and collect its result and diagnostics."""
    await document.process()
    return CompileResult(document.result, document.diagnostics, document)


async def compile_string(
    text: str | bytes, base_url: str | None = None, **kwargs: Any
) -> CompileResult:
    """Compile markup text. Keyword arguments go to Document."""
    return await compile_document(Document.from_string(text, base_url, **kwargs))


async def compile_file(path: str | Path, **kwargs: Any) -> CompileResult:
    """Compile a markup file. Keyword arguments go to Document."""
    return await compile_document(Document.from_file(path, **kwargs))
