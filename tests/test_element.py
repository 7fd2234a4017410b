"""Tests for element compilation: attributes, children, construction."""

import asyncio
from types import SimpleNamespace

import pytest

from qwxml.core.diagnostics import ATTRIBUTE_FAILED, CHILD_FAILED
from qwxml.exceptions import ConstructionError, UnresolvedReferenceError
from qwxml.parser import Attribute, Document, Element, compile_string
from qwxml.parser.attr import parse_int


class Widget(Element):
    """Test element compiling to a SimpleNamespace."""

    def __init__(self, node, context, base_url=None):
        super().__init__(node, context, base_url)
        self.define_attribute("enabled", "bool")
        self.define_attribute("size", "int")
        self.define_attribute("ratio", "number")
        self.define_attribute("points", "list")
        self.define_attribute("theme", "string", forward=True)
        self.define_attribute("scale", "number", forward=True)
        self.define_attribute("secret", "string", auto_assign=False)

    def _construct(self):
        return SimpleNamespace()

    def _post_construct(self, obj):
        obj.children = [c.result for c in self.children if not c.failed]
        return obj


class IntScaled(Widget):
    """Declares scale as int, to show forwarded values are not re-parsed."""

    def __init__(self, node, context, base_url=None):
        super().__init__(node, context, base_url)
        self.define_attribute("scale", "int", forward=True)


class Plain(Element):
    def __init__(self, node, context, base_url=None):
        super().__init__(node, context, base_url)
        self.define_attribute("size", "int")
        self.define_attribute("label", "string", auto_assign=False)


class Scalar(Element):
    def __init__(self, node, context, base_url=None):
        super().__init__(node, context, base_url)
        self.define_attribute("size", "int")

    def _construct(self):
        return 5


class Broken(Element):
    def _construct(self):
        raise RuntimeError("cannot build")


class BadInit(Element):
    def __init__(self, node, context, base_url=None):
        super().__init__(node, context, base_url)
        raise RuntimeError("bad init")


class Token(Attribute):
    """Compiles every value to a fresh object."""

    def _construct(self):
        return object()


class Tokened(Widget):
    def __init__(self, node, context, base_url=None):
        super().__init__(node, context, base_url)
        self.define_attribute("token", "token")
        self.define_attribute("colour", "colour")


@pytest.fixture
def widgets(registry):
    registry.tags.associate(Widget, "widget", "w")
    registry.tags.associate(IntScaled, "intscaled")
    registry.tags.associate(Plain, "plain")
    registry.tags.associate(Scalar, "scalar")
    registry.tags.associate(Broken, "broken")
    registry.tags.associate(Tokened, "tokened")
    registry.tags.associate(BadInit, "badinit")
    registry.types.associate(Token, "token")
    return registry


async def compile_with(registry, text):
    return await compile_string(text, "https://example.com/scene.xml", registry=registry)


# =============================================================================
# Attributes
# =============================================================================


@pytest.mark.asyncio
async def test_typed_attributes(widgets):
    compiled = await compile_with(
        widgets,
        '<widget enabled="TRUE" size="12.7" ratio="12px" points="1, 2 3" id="w1"/>',
    )
    widget = compiled.result

    assert widget.enabled is True
    assert widget.size == 12
    assert widget.ratio == 12.0
    assert widget.points == [1.0, 2.0, 3.0]
    assert not hasattr(widget, "id")
    assert not compiled.diagnostics


@pytest.mark.asyncio
async def test_undeclared_attributes_stay_strings(widgets):
    compiled = await compile_with(widgets, '<plain size="3" label="x" id="p1"/>')
    parser = compiled.document.root_parser

    assert parser.get_attribute("id") == "p1"
    assert parser.get_attribute("label") == "x"
    assert parser.attributes == {"size": 3, "label": "x", "id": "p1"}


@pytest.mark.asyncio
async def test_boolean_values(widgets):
    compiled = await compile_with(
        widgets,
        '<w><w id="a" enabled="1"/><w id="b" enabled="False"/><w id="c" enabled="yes"/></w>',
    )
    a, b, c = compiled.result.children

    assert a.enabled is True
    assert b.enabled is False
    assert not hasattr(c, "enabled")
    assert compiled.diagnostics.codes() == [ATTRIBUTE_FAILED]
    assert 'enabled="yes"' in list(compiled.diagnostics)[0].message


@pytest.mark.asyncio
async def test_int_reads_hex_and_sign(widgets):
    compiled = await compile_with(
        widgets, '<w><w size="0x1F"/><w size="-4px"/><w ratio="abc"/></w>'
    )
    hexed, signed, bad = compiled.result.children

    assert hexed.size == 31
    assert signed.size == -4
    assert not hasattr(bad, "ratio")
    assert compiled.diagnostics.codes() == [ATTRIBUTE_FAILED]


@pytest.mark.asyncio
async def test_failed_attribute_leaves_it_unset(widgets):
    compiled = await compile_with(widgets, '<widget size="oops" ratio="2"/>')
    parser = compiled.document.root_parser

    assert not parser.has_attribute("size")
    assert parser.get_attribute("size", 7) == 7
    assert compiled.result.ratio == 2.0
    [diagnostic] = compiled.diagnostics
    assert diagnostic.severity == "warning"
    assert diagnostic.subject == "<widget> line 1"


@pytest.mark.asyncio
async def test_unknown_attribute_type_is_reported(widgets):
    compiled = await compile_with(widgets, '<tokened colour="red"/>')

    assert not hasattr(compiled.result, "colour")
    [diagnostic] = compiled.diagnostics.by_code(ATTRIBUTE_FAILED)
    assert "Unresolved type: 'colour'" in diagnostic.message


@pytest.mark.asyncio
async def test_identical_attributes_share_one_value(widgets):
    compiled = await compile_with(
        widgets,
        '<tokened token="x"><tokened token="x"/><tokened token="y"/></tokened>',
    )
    root = compiled.result
    same, other = root.children

    assert root.token is same.token
    assert root.token is not other.token


@pytest.mark.asyncio
async def test_attribute_caches_are_per_document(widgets):
    first = await compile_with(widgets, '<tokened token="x"/>')
    second = await compile_with(widgets, '<tokened token="x"/>')

    assert first.result.token is not second.result.token


# =============================================================================
# Forwarding
# =============================================================================


@pytest.mark.asyncio
async def test_forwarded_values_reach_descendants(widgets):
    compiled = await compile_with(
        widgets, '<w theme="dark" scale="2.5"><w><w/></w></w>'
    )
    child = compiled.result.children[0]
    grandchild = child.children[0]

    assert child.theme == "dark"
    assert grandchild.theme == "dark"
    assert grandchild.scale == 2.5


@pytest.mark.asyncio
async def test_forwarded_value_is_not_parsed_again(widgets):
    compiled = await compile_with(widgets, '<w scale="2.5"><intscaled/></w>')

    assert compiled.result.children[0].scale == 2.5


@pytest.mark.asyncio
async def test_own_attribute_wins_over_forwarded(widgets):
    compiled = await compile_with(widgets, '<w scale="2.5"><w scale="4"/></w>')

    assert compiled.result.children[0].scale == 4.0


@pytest.mark.asyncio
async def test_failing_own_attribute_is_not_replaced_by_forwarded(widgets):
    compiled = await compile_with(widgets, '<w scale="2.5"><w scale="oops"/></w>')

    assert not hasattr(compiled.result.children[0], "scale")
    assert compiled.diagnostics.codes() == [ATTRIBUTE_FAILED]


@pytest.mark.asyncio
async def test_unset_attributes_are_not_forwarded(widgets):
    compiled = await compile_with(widgets, '<w scale="oops"><w/></w>')

    assert not hasattr(compiled.result.children[0], "scale")


# =============================================================================
# Children and construction
# =============================================================================


@pytest.mark.asyncio
async def test_processing_order(registry):
    events = []

    class Tracing(Element):
        def __init__(self, node, context, base_url=None):
            super().__init__(node, context, base_url)
            self.define_attribute("size", "int")

        def _post_process_attributes(self):
            events.append(("attributes", self.get_attribute("id")))

        async def _construct(self):
            events.append(("construct", self.get_attribute("id")))
            return SimpleNamespace()

    registry.tags.associate(Tracing, "t")
    compiled = await compile_with(
        registry, '<t id="root"><t id="a"/><t id="b" size="oops"/></t>'
    )

    assert events == [
        ("attributes", "root"),
        ("attributes", "a"),
        ("construct", "a"),
        ("attributes", "b"),
        ("construct", "b"),
        ("construct", "root"),
    ]
    assert compiled.diagnostics.codes() == [ATTRIBUTE_FAILED]


@pytest.mark.asyncio
async def test_compilation_is_deterministic(widgets):
    text = '<w theme="a"><w size="1"/><w size="x"/><nope/><w enabled="maybe"/></w>'

    runs = []
    for _ in range(3):
        compiled = await compile_with(widgets.copy(), text)
        runs.append(
            (
                [(c.theme, getattr(c, "size", None)) for c in compiled.result.children],
                [(d.code, d.message) for d in compiled.diagnostics],
            )
        )

    assert runs[0] == runs[1] == runs[2]


@pytest.mark.asyncio
async def test_unknown_child_tag_is_skipped(widgets):
    compiled = await compile_with(widgets, '<w><nope/><w size="1"/></w>')

    assert [c.size for c in compiled.result.children] == [1]
    [diagnostic] = compiled.diagnostics
    assert diagnostic.code == CHILD_FAILED
    assert diagnostic.severity == "error"
    assert "nope" in diagnostic.message


@pytest.mark.asyncio
async def test_failed_child_is_contained(widgets):
    compiled = await compile_with(widgets, '<w><broken/><w size="2"/></w>')

    assert [c.size for c in compiled.result.children] == [2]
    [diagnostic] = compiled.diagnostics.by_code(CHILD_FAILED)
    assert "cannot build" in diagnostic.message


@pytest.mark.asyncio
async def test_failed_root_fails_the_document(widgets):
    with pytest.raises(ConstructionError) as excinfo:
        await compile_with(widgets, "<broken/>")

    assert excinfo.value.tag_name == "broken"
    assert isinstance(excinfo.value.cause, RuntimeError)


@pytest.mark.asyncio
async def test_unknown_root_tag_fails_the_document(widgets):
    with pytest.raises(UnresolvedReferenceError, match="nope"):
        await compile_with(widgets, "<nope/>")


@pytest.mark.asyncio
async def test_auto_assign_into_mapping(widgets):
    compiled = await compile_with(widgets, '<plain size="3" label="x"/>')

    assert compiled.result == {"size": 3}


@pytest.mark.asyncio
async def test_auto_assign_skips_unassignable_objects(widgets):
    compiled = await compile_with(widgets, '<scalar size="3"/>')

    assert compiled.result == 5
    assert not compiled.diagnostics


@pytest.mark.asyncio
async def test_auto_assign_respects_flag(widgets):
    compiled = await compile_with(widgets, '<widget secret="s" theme="t"/>')

    assert compiled.result.theme == "t"
    assert not hasattr(compiled.result, "secret")


@pytest.mark.asyncio
async def test_comments_are_ignored(widgets):
    compiled = await compile_with(widgets, "<w><!-- note --><w/><?pi x?></w>")

    assert len(compiled.result.children) == 1


@pytest.mark.asyncio
async def test_parents_and_documents_are_linked(widgets):
    compiled = await compile_with(widgets, '<w><w id="inner"/></w>')
    root = compiled.document.root_parser
    inner = root.get_parser_by_id("inner")

    assert root.parent is compiled.document
    assert inner.parent is root
    assert inner.owner_document is compiled.document
    assert inner.base_url == "https://example.com/scene.xml"


# =============================================================================
# Queries
# =============================================================================


@pytest.mark.asyncio
async def test_queries(widgets):
    compiled = await compile_with(
        widgets, '<w><plain id="a" size="1"/><w><plain id="b" size="2"/></w></w>'
    )
    root = compiled.document.root_parser

    assert root.get_parser_by_id("b").result == {"size": 2}
    assert root.get_parser_by_id("missing") is None
    assert [p.result for p in root.get_parsers_by_tag_name("PLAIN")] == [
        {"size": 1},
        {"size": 2},
    ]
    assert [p.get_attribute("id") for p in root.xpath(".//plain[@size=$s]", s="2")] == ["b"]
    assert root.xpath("count(.//plain)") == []


def test_element_repr(widgets):
    document = Document.from_string("<w/>", registry=widgets)
    parser = document.context.element_parser(document.doc.getroot())

    assert parser.describe() == "<w> line 1"
    assert parser.tag_name == "w"
    assert repr(parser) == "<Widget <w> line 1>"


# =============================================================================
# Containment and scheduling
# =============================================================================


@pytest.mark.asyncio
async def test_failing_child_constructor_is_contained(widgets):
    compiled = await compile_with(widgets, "<list><badinit/><int>2</int></list>")

    assert compiled.result == [2]
    [diagnostic] = compiled.diagnostics
    assert diagnostic.code == CHILD_FAILED
    assert "bad init" in diagnostic.message


def test_bare_hex_prefix_is_not_an_int():
    assert parse_int("0x") is None
    assert parse_int("-0xZ") is None
    assert parse_int("0x1F") == 31
    assert parse_int("0") == 0


@pytest.mark.asyncio
async def test_bare_hex_attribute_is_a_mismatch(widgets):
    compiled = await compile_with(widgets, '<widget size="0x"/>')

    assert not hasattr(compiled.result, "size")
    assert compiled.diagnostics.codes() == [ATTRIBUTE_FAILED]


@pytest.mark.asyncio
async def test_concurrent_documents_interleave(registry):
    """Every attribute and child step yields, so passes run side by side."""
    events = []

    class Tracing(Element):
        def __init__(self, node, context, base_url=None):
            super().__init__(node, context, base_url)
            self.define_attribute("size", "int")

        def _post_process_attributes(self):
            events.append((self.get_attribute("doc"), "attributes", self.get_attribute("id")))

        def _construct(self):
            events.append((self.get_attribute("doc"), "construct", self.get_attribute("id")))
            return SimpleNamespace()

    registry.tags.associate(Tracing, "t")

    def scene(doc):
        return (
            f'<t doc="{doc}" id="root" size="1">'
            f'<t doc="{doc}" id="a" size="2"/><t doc="{doc}" id="b" size="3"/>'
            "</t>"
        )

    await asyncio.gather(
        compile_with(registry, scene("one")), compile_with(registry, scene("two"))
    )

    docs = [doc for doc, _, _ in events]
    assert docs.index("two") < len(docs) - 1 - docs[::-1].index("one")

    expected = [
        ("attributes", "root"),
        ("attributes", "a"),
        ("construct", "a"),
        ("attributes", "b"),
        ("construct", "b"),
        ("construct", "root"),
    ]
    for doc in ("one", "two"):
        assert [(step, id_) for d, step, id_ in events if d == doc] == expected
