"""
Document implementation for the DOM.
This module parses HTML with html5lib and builds the immutable node tree.
"""

import logging
from typing import List, Optional

import html5lib
from bs4.dammit import UnicodeDammit

from ..errors import ParseFailure
from ..utils.config import Config, get_config
from ..utils.logging import PerformanceLogger
from .comment import Comment, DocumentType
from .element import Element
from .node import Node, NodeType
from .node_set import NodeSet
from .selector_engine import DEFAULT_CACHE_SIZE, SelectorEngine
from .text import Text

logger = logging.getLogger(__name__)


class Document(Node):
    """
    Document node implementation for the DOM.

    A Document is the root of a parsed tree and is read-only once built.
    Every node of the tree is kept in a pre-order list so any subtree can be
    walked as a contiguous slice. Use ``from_string`` or ``from_bytes`` to
    create one.
    """

    def __init__(self, fragment: bool = False, config: Optional[Config] = None):
        """
        Initialize an empty document.

        Args:
            fragment: Whether this document holds a parsed fragment
            config: Configuration to read parser and selector settings from
        """
        super().__init__(NodeType.DOCUMENT_FRAGMENT_NODE if fragment else NodeType.DOCUMENT_NODE)

        self.node_name = "#document-fragment" if fragment else "#document"
        self.is_fragment = fragment
        self.config = config or get_config()

        self._nodes: List[Node] = []
        self.document_element: Optional[Element] = None
        self.head: Optional[Element] = None
        self.body: Optional[Element] = None
        self.doctype: Optional[DocumentType] = None

        self.selector_engine = SelectorEngine(
            cache_size=self.config.get("selector.cache_size", DEFAULT_CACHE_SIZE))

        self._performance = PerformanceLogger(logger, "Document")

    def __repr__(self) -> str:
        return f"<Document {self.node_name} ({len(self._nodes)} nodes)>"

    @classmethod
    def from_string(cls, markup: str, fragment: bool = False,
                    config: Optional[Config] = None) -> 'Document':
        """
        Parse an HTML string into a Document.

        Malformed markup never fails: unclosed tags are closed and the
        implicit html, head and body elements are inserted, following the
        HTML5 parsing algorithm.

        Args:
            markup: The HTML content to parse
            fragment: Parse as a fragment, without implicit html/head/body
            config: Optional configuration override

        Returns:
            The parsed Document

        Raises:
            ParseFailure: If markup is not a string
        """
        if not isinstance(markup, str):
            logger.debug(f"Refusing to parse {type(markup).__name__} markup")
            raise ParseFailure(markup)

        document = cls(fragment=fragment, config=config)
        document._parse(markup)
        return document

    @classmethod
    def from_bytes(cls, data: bytes, encoding: Optional[str] = None, fragment: bool = False,
                   config: Optional[Config] = None) -> 'Document':
        """
        Decode raw bytes and parse them into a Document.

        Args:
            data: The raw HTML bytes
            encoding: Encoding to try before sniffing
            fragment: Parse as a fragment
            config: Optional configuration override

        Returns:
            The parsed Document

        Raises:
            ParseFailure: If data is not bytes
        """
        if not isinstance(data, (bytes, bytearray)):
            raise ParseFailure(data)

        dammit = UnicodeDammit(bytes(data), known_definite_encodings=[encoding] if encoding else [],
                               is_html=True)
        markup = dammit.unicode_markup
        if markup is None:
            logger.warning("Could not detect the document encoding, decoding as UTF-8 with replacement")
            markup = bytes(data).decode('utf-8', errors='replace')
        else:
            logger.debug(f"Decoded {len(data)} bytes as {dammit.original_encoding}")

        return cls.from_string(markup, fragment=fragment, config=config)

    def _parse(self, markup: str) -> None:
        """
        Run html5lib over the markup and convert its tree into ours.

        Args:
            markup: The HTML content to parse
        """
        logger.debug(f"Parsing HTML content (first 100 chars): {markup[:100]!r}")
        self._performance.start("parse")

        parser = html5lib.HTMLParser(tree=html5lib.treebuilders.getTreeBuilder("dom"))
        if self.is_fragment:
            container = self.config.get("parser.fragment_container", "div")
            parsed = parser.parseFragment(markup, container=container)
        else:
            parsed = parser.parse(markup)

        for error in parser.errors:
            logger.debug(f"Recovered from parse error: {error}")

        self._convert_parsed_nodes(parsed, self)
        self._seal_tree()
        self._update_references()

        self._performance.end("parse")
        logger.debug(f"Parsed {len(self._nodes)} nodes")

    def _convert_parsed_nodes(self, parsed, parent: Node) -> None:
        """
        Convert the children of a parsed html5lib node into our DOM structure.

        Args:
            parsed: The parsed minidom node from html5lib
            parent: The node in our DOM structure that receives the children
        """
        # Explicit stack so deeply nested markup cannot exhaust the recursion limit
        stack = [(parsed, parent)]
        while stack:
            source, target = stack.pop()
            for child in source.childNodes:
                node = self._convert_node(child)
                if node is None:
                    continue
                target._append_child(node)
                if node.node_type == NodeType.ELEMENT_NODE:
                    stack.append((child, node))

    def _convert_node(self, node) -> Optional[Node]:
        """
        Convert a single html5lib node, without its children.

        Args:
            node: The parsed minidom node

        Returns:
            Our node, or None for node types that have no counterpart
        """
        node_type = node.nodeType

        if node_type == NodeType.ELEMENT_NODE:
            return self._convert_element(node)
        if node_type in (NodeType.TEXT_NODE, NodeType.CDATA_SECTION_NODE):
            return Text(node.nodeValue or "", self)
        if node_type == NodeType.COMMENT_NODE:
            return Comment(node.nodeValue or "", self)
        if node_type == NodeType.DOCUMENT_TYPE_NODE:
            doctype = DocumentType(node.name, getattr(node, 'publicId', None) or "",
                                   getattr(node, 'systemId', None) or "", self)
            self.doctype = doctype
            return doctype

        logger.debug(f"Skipping parsed node of type {node_type}")
        return None

    def _convert_element(self, element) -> Element:
        """
        Convert an html5lib element to our Element implementation.

        Args:
            element: The element from html5lib to convert

        Returns:
            Our Element implementation, with its attributes but no children
        """
        new_element = Element(element.tagName, getattr(element, 'namespaceURI', None), self)

        for name, value in element.attributes.items():
            new_element._set_attribute(name, value)

        return new_element

    def _seal_tree(self) -> None:
        """Number every node in pre-order and freeze all child lists."""
        nodes = self._nodes
        stack = [(self, False)]
        while stack:
            node, leaving = stack.pop()
            if leaving:
                node._end = len(nodes) - 1
                continue

            node._seal()
            node._index = len(nodes)
            nodes.append(node)

            stack.append((node, True))
            stack.extend((child, False) for child in reversed(node.child_nodes))

    def _update_references(self) -> None:
        """Find the document element, head and body."""
        if self.is_fragment:
            return

        self.document_element = next(
            (child for child in self.child_nodes if child.node_type == NodeType.ELEMENT_NODE), None)
        if self.document_element is None:
            return

        for child in self.document_element.children:
            if child.tag_name == 'head' and self.head is None:
                self.head = child
            elif child.tag_name == 'body' and self.body is None:
                self.body = child

    def select(self, selector: str) -> NodeSet:
        """
        Select every element in the document matching a CSS selector.

        Args:
            selector: The CSS selector string

        Returns:
            NodeSet of matching elements in document order

        Raises:
            InvalidSelector: If the selector cannot be compiled
        """
        return self.selector_engine.select(selector, self)

    def query_selector(self, selector: str) -> Optional[Element]:
        """
        Find the first element that matches a selector.

        Args:
            selector: The CSS selector string

        Returns:
            The first matching element or None if no match is found
        """
        return self.select(selector).first()

    def query_selector_all(self, selector: str) -> NodeSet:
        return self.select(selector)

    def get_element_by_id(self, element_id: str) -> Optional[Element]:
        """
        Get an element by its ID.

        Args:
            element_id: The ID of the element to find

        Returns:
            The first element with that ID, or None if there is none
        """
        for node in self._nodes:
            if node.node_type == NodeType.ELEMENT_NODE and node.get_attribute('id') == element_id:
                return node
        return None

    def get_elements_by_tag_name(self, tag_name: str) -> NodeSet:
        """
        Get all elements with the specified tag name.

        Args:
            tag_name: The tag name to search for, or "*" for every element

        Returns:
            NodeSet of matching elements in document order
        """
        tag_name = tag_name.lower()
        return NodeSet((node for node in self._nodes
                        if node.node_type == NodeType.ELEMENT_NODE
                        and (tag_name == '*' or node.tag_name == tag_name)),
                       self.selector_engine)

    def get_elements_by_class_name(self, class_names: str) -> NodeSet:
        """
        Get all elements that carry every one of the given classes.

        Args:
            class_names: Space-separated class names

        Returns:
            NodeSet of matching elements in document order
        """
        wanted = set(class_names.split())
        if not wanted:
            return NodeSet((), self.selector_engine)
        return NodeSet((node for node in self._nodes
                        if node.node_type == NodeType.ELEMENT_NODE and wanted <= node.class_list),
                       self.selector_engine)
