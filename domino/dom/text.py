"""
Text node implementation for the DOM.
"""

from typing import Iterator, Optional
from .node import Node, NodeType


class Text(Node):
    """
    Text node implementation for the DOM.

    This class represents a run of character data in the DOM tree.
    """

    def __init__(self, data: str, owner_document: Optional['Document'] = None):
        """
        Initialize a text node.

        Args:
            data: The text content
            owner_document: The document that owns this node
        """
        super().__init__(NodeType.TEXT_NODE, owner_document)

        if data is None:
            data = ""

        self.node_name = "#text"
        self.node_value = data

    def __repr__(self) -> str:
        return f"<Text {self.data!r}>"

    @property
    def data(self) -> str:
        return self.node_value

    def iter_text(self) -> Iterator[str]:
        yield self.node_value
