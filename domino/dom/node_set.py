"""
NodeSet implementation.
An ordered, immutable selection of nodes with text and attribute accessors.
"""

from typing import Dict, Iterable, Iterator, Optional, Tuple, Union, overload

from .node import Node, NodeType


class NodeSet:
    """
    Ordered, immutable sequence of DOM nodes.

    A NodeSet is what selecting against a Document (or another NodeSet)
    returns. "No matches" is an empty NodeSet, never None.

    Accessors follow jQuery/cheerio conventions: ``text()`` covers every
    member, while ``attr()`` and ``attrs()`` only look at the first one.
    Missing data is reported as None rather than raised.
    """

    __slots__ = ('_nodes', '_engine')

    def __init__(self, nodes: Iterable[Node] = (), engine: Optional['SelectorEngine'] = None):
        """
        Initialize a NodeSet.

        Args:
            nodes: The member nodes, in order
            engine: Selector engine used for nested selects
        """
        self._nodes: Tuple[Node, ...] = tuple(nodes)
        self._engine = engine

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes)

    def __contains__(self, node: object) -> bool:
        return any(member is node for member in self._nodes)

    @overload
    def __getitem__(self, index: int) -> Node: ...

    @overload
    def __getitem__(self, index: slice) -> 'NodeSet': ...

    def __getitem__(self, index: Union[int, slice]) -> Union[Node, 'NodeSet']:
        if isinstance(index, slice):
            return NodeSet(self._nodes[index], self._engine)
        return self._nodes[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NodeSet):
            return NotImplemented
        return (len(self._nodes) == len(other._nodes)
                and all(mine is theirs for mine, theirs in zip(self._nodes, other._nodes)))

    def __hash__(self) -> int:
        return hash(tuple(id(node) for node in self._nodes))

    def __repr__(self) -> str:
        preview = ", ".join(repr(node) for node in self._nodes[:5])
        if len(self._nodes) > 5:
            preview += ", ..."
        return f"NodeSet([{preview}])"

    @property
    def length(self) -> int:
        """Get the number of nodes in the set."""
        return len(self._nodes)

    def first(self) -> Optional[Node]:
        """Get the first node, or None if the set is empty."""
        return self._nodes[0] if self._nodes else None

    def elements(self) -> 'NodeSet':
        """Get the members that are elements."""
        return NodeSet((node for node in self._nodes if node.node_type == NodeType.ELEMENT_NODE),
                       self._engine)

    def select(self, selector: str) -> 'NodeSet':
        """
        Select descendants of every member matching a CSS selector.

        Args:
            selector: The CSS selector string

        Returns:
            Matches for each member in turn, duplicates removed

        Raises:
            InvalidSelector: If the selector cannot be compiled
        """
        engine = self._engine
        if engine is None:
            from .selector_engine import SelectorEngine
            engine = SelectorEngine()
        return engine.select(selector, self)

    def text(self) -> str:
        """
        Get the combined text of every node in the set.

        Returns:
            The text of each member and its descendants, concatenated in
            order with no separator. Comments contribute nothing.
        """
        return "".join(chunk for node in self._nodes for chunk in node.iter_text())

    def attr(self, name: str) -> Optional[str]:
        """
        Get an attribute of the first node in the set.

        Args:
            name: The attribute name (case-insensitive)

        Returns:
            The literal attribute value (possibly ""), or None if the set is
            empty, the first node is not an element, or the attribute is missing
        """
        first = self.first()
        if first is None or first.node_type != NodeType.ELEMENT_NODE:
            return None
        return first.get_attribute(name)

    def attrs(self) -> Optional[Dict[str, str]]:
        """
        Get every attribute of the first node in the set.

        Returns:
            A new ``{name: value}`` dict in source order, or None if the set
            is empty or the first node is not an element
        """
        first = self.first()
        if first is None or first.node_type != NodeType.ELEMENT_NODE:
            return None
        return first.attribute_map()
