"""
Comment and doctype node implementations for the DOM.
"""

from typing import Iterator, Optional
from .node import Node, NodeType


class Comment(Node):
    """
    Comment node implementation for the DOM.

    Comments never contribute to the text of their ancestors.
    """

    def __init__(self, data: str, owner_document: Optional['Document'] = None):
        super().__init__(NodeType.COMMENT_NODE, owner_document)

        if data is None:
            data = ""

        self.node_name = "#comment"
        self.node_value = data

    def __repr__(self) -> str:
        return f"<Comment {self.data!r}>"

    @property
    def data(self) -> str:
        return self.node_value

    def iter_text(self) -> Iterator[str]:
        return iter(())

    @property
    def text_content(self) -> str:
        return self.node_value


class DocumentType(Node):
    """The <!DOCTYPE> node of a document."""

    def __init__(self, name: str, public_id: str = "", system_id: str = "",
                 owner_document: Optional['Document'] = None):
        super().__init__(NodeType.DOCUMENT_TYPE_NODE, owner_document)
        self.node_name = name or "html"
        self.name = self.node_name
        self.public_id = public_id or ""
        self.system_id = system_id or ""

    def __repr__(self) -> str:
        return f"<!DOCTYPE {self.name}>"

    def iter_text(self) -> Iterator[str]:
        return iter(())

    @property
    def text_content(self) -> Optional[str]:
        return None
