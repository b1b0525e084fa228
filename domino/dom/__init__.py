"""
DOM implementation for domino.
This package provides a read-only DOM built from html5lib parse trees,
together with the CSS selector engine that queries it.
"""

from typing import Optional

from .node import Node, NodeType
from .element import Element
from .attr import Attr
from .text import Text
from .comment import Comment, DocumentType
from .node_set import NodeSet
from .selector_engine import CompiledSelector, SelectorEngine
from .document import Document
from ..utils.config import Config


# Define a Parser class that integrates with Document
class Parser:
    """HTML Parser for creating DOM trees from HTML content."""

    def __init__(self, config: Optional[Config] = None):
        """
        Initialize the HTML parser.

        Args:
            config: Configuration shared by every document this parser creates
        """
        self.config = config

    def parse(self, html_content: str, fragment: bool = False) -> Document:
        """
        Parse HTML content into a Document.

        Args:
            html_content: The HTML content to parse
            fragment: Parse as a fragment, without implicit html/head/body

        Returns:
            The parsed Document

        Raises:
            ParseFailure: If html_content is not a string
        """
        return Document.from_string(html_content, fragment=fragment, config=self.config)

    def parse_bytes(self, data: bytes, encoding: Optional[str] = None, fragment: bool = False) -> Document:
        return Document.from_bytes(data, encoding=encoding, fragment=fragment, config=self.config)


__all__ = [
    'Node', 'NodeType', 'Element', 'Attr', 'Text', 'Comment', 'DocumentType', 'Document',
    'NodeSet', 'SelectorEngine', 'CompiledSelector', 'Parser'
]
