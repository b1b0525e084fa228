"""
Unit tests for NodeSet accessors.
"""

import pytest

import domino
from domino.dom import NodeSet, Text


# ============================================================================
# TEXT TESTS
# ============================================================================


class TestText:
    """Tests for NodeSet.text()."""

    def test_concatenates_members(self, simple_doc):
        assert simple_doc.select("p").text() == "hibye"

    def test_includes_descendants(self, simple_doc):
        assert simple_doc.select("div").text() == "hibye"

    def test_empty_set(self, simple_doc):
        assert simple_doc.select("span").text() == ""

    def test_script_and_style_are_included(self):
        doc = domino.from_string("<div><style>p{}</style><script>x=1</script>t</div>")

        assert doc.select("div").text() == "p{}x=1t"

    def test_comments_are_excluded(self):
        doc = domino.from_string("<div>a<!--hidden-->b</div>")

        assert doc.select("div").text() == "ab"

    def test_text_nodes_as_members(self, simple_doc):
        text_nodes = NodeSet(simple_doc.query_selector("p").child_nodes)

        assert isinstance(text_nodes.first(), Text)
        assert text_nodes.text() == "hi"


# ============================================================================
# ATTRIBUTE TESTS
# ============================================================================


class TestAttributes:
    """Tests for NodeSet.attr() and NodeSet.attrs()."""

    def test_attr_reads_first_member(self):
        doc = domino.from_string('<p class="a">1</p><p class="b">2</p>')

        assert doc.select("p").attr("class") == "a"

    def test_attr_is_case_insensitive(self, simple_doc):
        assert simple_doc.select("div").attr("ID") == "x"

    def test_attr_missing(self, simple_doc):
        assert simple_doc.select("p").attr("href") is None

    def test_attr_empty_set(self, simple_doc):
        assert simple_doc.select("span").attr("class") is None

    def test_attr_only_looks_at_first_member(self):
        doc = domino.from_string('<p>1</p><p title="t">2</p>')

        assert doc.select("p").attr("title") is None

    def test_attr_empty_value(self):
        doc = domino.from_string('<input value="">')

        assert doc.select("input").attr("value") == ""

    def test_attr_non_element_first(self, simple_doc):
        text_nodes = NodeSet(simple_doc.query_selector("p").child_nodes)

        assert text_nodes.attr("class") is None
        assert text_nodes.attrs() is None

    def test_attrs(self, simple_doc):
        assert simple_doc.select("div").attrs() == {"id": "x"}
        assert simple_doc.select("span").attrs() is None

    def test_attrs_keeps_source_order(self):
        doc = domino.from_string('<a z="1" b="2" m="3"></a>')

        assert list(doc.select("a").attrs()) == ["z", "b", "m"]

    def test_attrs_keeps_foreign_attribute_case(self):
        doc = domino.from_string('<svg viewBox="0 0 1 1"></svg>')
        svg = doc.select("svg")

        assert svg.attrs() == {"viewBox": "0 0 1 1"}
        assert svg.attr("viewbox") == "0 0 1 1"
        assert doc.select("[viewBox]").length == 1
        assert doc.select("[viewbox]").length == 1

    def test_attrs_is_a_copy(self, simple_doc):
        attributes = simple_doc.select("div").attrs()
        attributes["id"] = "changed"

        assert simple_doc.select("div").attr("id") == "x"


# ============================================================================
# SEQUENCE TESTS
# ============================================================================


class TestSequence:
    """Tests for NodeSet as an immutable sequence."""

    def test_length(self, simple_doc):
        paragraphs = simple_doc.select("p")

        assert paragraphs.length == 2
        assert len(paragraphs) == len(list(paragraphs))

    def test_indexing_and_slicing(self, simple_doc):
        paragraphs = simple_doc.select("p")

        assert paragraphs[1].text_content == "bye"
        assert isinstance(paragraphs[:1], NodeSet)
        assert paragraphs[:1].text() == "hi"
        with pytest.raises(IndexError):
            paragraphs[5]

    def test_contains_uses_identity(self, simple_doc):
        paragraphs = simple_doc.select("p")
        p = simple_doc.query_selector("p")

        assert p in paragraphs
        assert simple_doc.query_selector("div") not in paragraphs

    def test_first_and_elements(self, simple_doc):
        mixed = NodeSet(simple_doc.query_selector("div").child_nodes
                        + simple_doc.query_selector("p").child_nodes)

        assert simple_doc.select("span").first() is None
        assert mixed.elements().length == 2

    def test_equality(self, simple_doc):
        assert simple_doc.select("p") == simple_doc.select("p")
        assert simple_doc.select("p") != simple_doc.select("p.a")
        assert NodeSet() == NodeSet()

    def test_is_immutable(self, simple_doc):
        paragraphs = simple_doc.select("p")

        with pytest.raises(AttributeError):
            paragraphs.extra = 1
        with pytest.raises(TypeError):
            paragraphs[0] = None

    def test_repr(self, simple_doc):
        assert repr(simple_doc.select("p.a")) == "NodeSet([<Element p.a>])"
        assert repr(NodeSet()) == "NodeSet([])"

    def test_select_without_engine(self, simple_doc):
        detached = NodeSet(list(simple_doc.select("div")))

        assert detached.select("p").length == 2
