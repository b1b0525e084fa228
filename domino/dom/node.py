"""
Node implementation for the DOM.
This module implements the read-only part of the DOM Node interface.
"""

from enum import IntEnum
from typing import Iterator, List, Optional, Tuple
import weakref


class NodeType(IntEnum):
    """Node types as defined in the DOM specification."""
    ELEMENT_NODE = 1
    ATTRIBUTE_NODE = 2
    TEXT_NODE = 3
    CDATA_SECTION_NODE = 4
    PROCESSING_INSTRUCTION_NODE = 7
    COMMENT_NODE = 8
    DOCUMENT_NODE = 9
    DOCUMENT_TYPE_NODE = 10
    DOCUMENT_FRAGMENT_NODE = 11


class Node:
    """
    Base Node implementation for the DOM.

    Nodes are assembled once by the parser and are read-only afterwards:
    ``child_nodes`` becomes a tuple when the owning document is sealed and
    there are no public mutators.

    The owning document is held through a weak reference. It is only used
    for contextual queries (sibling lookups, subtree slices, selector
    matching) and never keeps the document alive on its own.
    """

    def __init__(self, node_type: NodeType, owner_document: Optional['Document'] = None):
        """
        Initialize a new Node.

        Args:
            node_type: The type of this node
            owner_document: The document that owns this node
        """
        self.node_type = node_type
        self._owner_ref = weakref.ref(owner_document) if owner_document is not None else None

        # Node relationships
        self.parent_node: Optional['Node'] = None
        self.child_nodes: Tuple['Node', ...] = ()
        self._pending_children: Optional[List['Node']] = []
        self._position = 0

        # Pre-order arena bounds, assigned when the document is sealed.
        # The subtree of this node spans arena[_index:_end + 1].
        self._index = -1
        self._end = -1

        # Node properties
        self.node_name: str = "#node"
        self.node_value: Optional[str] = None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.node_name}>"

    @property
    def owner_document(self) -> Optional['Document']:
        """Get the document that owns this node, if it is still alive."""
        if self._owner_ref is None:
            return None
        return self._owner_ref()

    @property
    def first_child(self) -> Optional['Node']:
        return self.child_nodes[0] if self.child_nodes else None

    @property
    def previous_sibling(self) -> Optional['Node']:
        if self.parent_node is None or self._position == 0:
            return None
        return self.parent_node.child_nodes[self._position - 1]

    @property
    def next_sibling(self) -> Optional['Node']:
        if self.parent_node is None:
            return None
        siblings = self.parent_node.child_nodes
        if self._position + 1 >= len(siblings):
            return None
        return siblings[self._position + 1]

    @property
    def previous_element_sibling(self) -> Optional['Element']:
        """Get the closest preceding sibling that is an element."""
        sibling = self.previous_sibling
        while sibling is not None and sibling.node_type != NodeType.ELEMENT_NODE:
            sibling = sibling.previous_sibling
        return sibling

    @property
    def next_element_sibling(self) -> Optional['Element']:
        """Get the closest following sibling that is an element."""
        sibling = self.next_sibling
        while sibling is not None and sibling.node_type != NodeType.ELEMENT_NODE:
            sibling = sibling.next_sibling
        return sibling

    @property
    def children(self) -> List['Element']:
        """Get a list of child elements."""
        return [child for child in self.child_nodes if child.node_type == NodeType.ELEMENT_NODE]

    @property
    def parent_element(self) -> Optional['Element']:
        """Get the parent node if it is an element."""
        parent = self.parent_node
        if parent is not None and parent.node_type == NodeType.ELEMENT_NODE:
            return parent
        return None

    def contains(self, other: Optional['Node']) -> bool:
        """
        Check if this node is an inclusive ancestor of another node.

        Args:
            other: The node to check

        Returns:
            True if this node contains the other node, False otherwise
        """
        if other is None:
            return False
        if self._index >= 0 and other._index >= 0:
            return self._index <= other._index <= self._end and self._root is other._root

        current = other
        while current is not None:
            if current is self:
                return True
            current = current.parent_node
        return False

    def iter_ancestors(self) -> Iterator['Node']:
        """Yield the parent, grandparent and so on up to the root."""
        current = self.parent_node
        while current is not None:
            yield current
            current = current.parent_node

    def iter_descendants(self) -> Iterator['Node']:
        """Yield every descendant of this node in document order."""
        root = self._root
        if root is not None and self._index >= 0:
            yield from root._nodes[self._index + 1:self._end + 1]
            return

        for child in self.child_nodes:
            yield child
            yield from child.iter_descendants()

    def iter_text(self) -> Iterator[str]:
        """Yield the data of every text node in this subtree, in document order."""
        for node in self.iter_descendants():
            if node.node_type == NodeType.TEXT_NODE:
                yield node.node_value or ""

    @property
    def text_content(self) -> str:
        """
        Get the text content of this node and all its descendants.

        Returns:
            The concatenated text of every descendant text node
        """
        return "".join(self.iter_text())

    @property
    def _root(self) -> Optional['Document']:
        """The document whose arena holds this node."""
        if self.node_type in (NodeType.DOCUMENT_NODE, NodeType.DOCUMENT_FRAGMENT_NODE) and hasattr(self, '_nodes'):
            return self
        return self.owner_document

    def _append_child(self, child: 'Node') -> 'Node':
        """Attach a child while the tree is being built by the parser."""
        if self._pending_children is None:
            raise RuntimeError(f"{self!r} is sealed and cannot be modified")

        child.parent_node = self
        child._position = len(self._pending_children)
        self._pending_children.append(child)
        return child

    def _seal(self) -> None:
        """Freeze the child list. Called once by the owning document."""
        if self._pending_children is not None:
            self.child_nodes = tuple(self._pending_children)
            self._pending_children = None
