"""
Unit tests for Document parsing.

Tests html5lib-backed parsing, the resulting node tree, and byte decoding.
"""

import gc

import pytest

import domino
from domino.dom import Comment, Document, DocumentType, Element, NodeType, Parser, Text
from domino.errors import ParseFailure


# ============================================================================
# PARSING TESTS
# ============================================================================


class TestParsing:
    """Tests for turning markup into a Document."""

    def test_implicit_structure_is_inserted(self):
        """A bare paragraph still gets html, head and body."""
        doc = domino.from_string("<p>x")

        assert doc.document_element.tag_name == "html"
        assert doc.head is not None
        assert doc.body is not None
        assert [child.tag_name for child in doc.body.children] == ["p"]

    def test_empty_string_parses(self):
        doc = domino.from_string("")

        assert [node.tag_name for node in doc.select("*")] == ["html", "head", "body"]

    def test_malformed_markup_is_repaired(self):
        """Unclosed tags are closed by the HTML5 algorithm."""
        doc = domino.from_string("<div><span>a</div>b")

        assert doc.select("span").text() == "a"
        assert doc.body.text_content == "ab"

    @pytest.mark.parametrize("value", [None, b"<p>x</p>", 42, ["<p>"]])
    def test_non_string_raises_parse_failure(self, value):
        with pytest.raises(ParseFailure) as exc_info:
            domino.from_string(value)

        assert exc_info.value.value is value

    def test_parse_failure_is_type_error(self):
        with pytest.raises(TypeError):
            Document.from_string(None)

    def test_whitespace_text_is_kept(self):
        doc = domino.from_string("<div> <b>x</b> </div>")

        assert doc.select("div").text() == " x "

    def test_comments_are_nodes_without_text(self):
        doc = domino.from_string("<p>a<!-- c -->b</p>")
        p = doc.query_selector("p")

        assert [type(child) for child in p.child_nodes] == [Text, Comment, Text]
        assert p.child_nodes[1].data == " c "
        assert doc.select("p").text() == "ab"

    def test_doctype_becomes_first_child(self):
        doc = domino.from_string("<!DOCTYPE html><p>x</p>")

        assert isinstance(doc.doctype, DocumentType)
        assert doc.doctype.name == "html"
        assert doc.child_nodes[0] is doc.doctype
        assert doc.child_nodes[1] is doc.document_element

    def test_duplicate_attributes_keep_first(self):
        doc = domino.from_string('<p id="a" id="b">x</p>')

        assert doc.select("p").attr("id") == "a"

    def test_attribute_names_are_lowercased(self):
        doc = domino.from_string('<p DATA-X="1">x</p>')
        p = doc.query_selector("p")

        assert p.get_attribute_names() == ["data-x"]
        assert p.get_attribute("DATA-X") == "1"

    def test_foreign_attribute_names_keep_their_case(self):
        doc = domino.from_string('<svg viewBox="0 0 1 1"></svg>')
        svg = doc.query_selector("svg")

        assert svg.get_attribute_names() == ["viewBox"]
        assert svg.get_attribute("viewbox") == "0 0 1 1"
        assert svg.get_attribute("viewBox") == "0 0 1 1"
        assert svg.has_attribute("VIEWBOX")

    def test_deep_nesting(self):
        depth = 500
        doc = domino.from_string("<div>" * depth + "x" + "</div>" * depth)

        assert doc.select("div").length == depth
        assert doc.select("div").text() == "x" * depth

    def test_parser_class(self):
        doc = Parser().parse("<p>x</p>")

        assert isinstance(doc, Document)
        assert doc.select("p").text() == "x"


# ============================================================================
# FRAGMENT TESTS
# ============================================================================


class TestFragments:
    """Tests for fragment parsing."""

    def test_fragment_has_no_implicit_elements(self):
        doc = domino.from_string("<li>a</li><li>b</li>", fragment=True)

        assert doc.node_type == NodeType.DOCUMENT_FRAGMENT_NODE
        assert doc.document_element is None
        assert doc.select("html, head, body").length == 0
        assert doc.select("li").text() == "ab"

    def test_root_never_matches_in_fragment(self):
        doc = domino.from_string("<p>a</p>", fragment=True)

        assert doc.select(":root").length == 0

    def test_fragment_container_from_config(self, config):
        """Table cells survive only inside a row context."""
        default = domino.from_string("<td>a</td>", fragment=True, config=config)
        config.set("parser.fragment_container", "tr")
        in_row = domino.from_string("<td>a</td>", fragment=True, config=config)

        assert default.select("td").length == 0
        assert in_row.select("td").length == 1


# ============================================================================
# BYTES TESTS
# ============================================================================


class TestFromBytes:
    """Tests for decoding raw bytes before parsing."""

    def test_utf8(self):
        doc = Document.from_bytes('<meta charset="utf-8"><p>café</p>'.encode("utf-8"))

        assert doc.select("p").text() == "café"

    def test_meta_charset(self):
        doc = Document.from_bytes(b'<meta charset="iso-8859-1"><p>caf\xe9</p>')

        assert doc.select("p").text() == "café"

    def test_explicit_encoding(self):
        doc = Document.from_bytes(b"<p>caf\xe9</p>", encoding="windows-1252")

        assert doc.select("p").text() == "café"

    def test_rejects_str(self):
        with pytest.raises(ParseFailure):
            Document.from_bytes("<p>x</p>")


# ============================================================================
# TREE TESTS
# ============================================================================


class TestTree:
    """Tests for the structure of the parsed tree."""

    def test_child_nodes_are_tuples(self, doc):
        for node in doc.iter_descendants():
            assert isinstance(node.child_nodes, tuple)

    def test_arena_is_preorder(self, doc):
        nodes = doc._nodes

        assert nodes[0] is doc
        assert list(doc.iter_descendants()) == nodes[1:]
        for index, node in enumerate(nodes):
            assert node._index == index

    def test_subtree_slice_matches_recursive_walk(self, doc):
        main = doc.get_element_by_id("main")

        def walk(node):
            for child in node.child_nodes:
                yield child
                yield from walk(child)

        assert list(main.iter_descendants()) == list(walk(main))

    def test_contains(self, doc):
        main = doc.get_element_by_id("main")
        p = doc.query_selector("p.a")

        assert main.contains(p)
        assert main.contains(main)
        assert not p.contains(main)
        assert not main.contains(doc.query_selector("ul"))

    def test_sibling_navigation(self, doc):
        a = doc.query_selector("p.a")
        b = doc.query_selector("p.b")

        assert a.next_element_sibling is b
        assert b.previous_element_sibling is a
        assert a.previous_sibling is None
        assert a.parent_element.id == "main"

    def test_owner_document(self, doc):
        p = doc.query_selector("p")

        assert p.owner_document is doc
        assert isinstance(p, Element)

    def test_nodes_keep_document_alive(self):
        paragraphs = domino.from_string("<p>a</p><p>b</p>").select("p")
        gc.collect()

        assert paragraphs.first().owner_document is not None
        assert paragraphs.select("*").length == 0
        assert paragraphs.text() == "ab"

    def test_element_lookups(self, doc):
        assert doc.get_element_by_id("main").tag_name == "div"
        assert doc.get_element_by_id("missing") is None
        assert doc.get_elements_by_tag_name("LI").length == 5
        assert doc.get_elements_by_class_name("wide box").length == 1
        assert doc.get_elements_by_class_name("").length == 0

    def test_element_properties(self, doc):
        main = doc.get_element_by_id("main")
        b = doc.query_selector("p.b")

        assert main.class_list == frozenset({"box", "wide"})
        assert main.class_name == "box wide"
        assert b.dataset == {"role": "note"}

    def test_element_matches_and_closest(self, doc):
        p = doc.query_selector("p.a")

        assert p.matches("#main > .a")
        assert not p.matches("span")
        assert p.closest("div").id == "main"
        assert p.closest("ul") is None

    def test_selector_cache_size_from_config(self, config):
        config.set("selector.cache_size", 1)
        doc = domino.from_string("<p>x</p>", config=config)

        assert doc.selector_engine.cache_size == 1
