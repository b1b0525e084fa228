"""
Element implementation for the DOM.
This module implements the read-only part of the DOM Element interface.
"""

import re
from types import MappingProxyType
from typing import Dict, FrozenSet, List, Mapping, Optional

from .attr import Attr
from .node import Node, NodeType


class Element(Node):
    """
    Element node implementation for the DOM.

    Attributes are fixed at parse time. ``attributes`` is a read-only view
    keyed by lower-cased name; use ``attribute_map()`` for a plain
    ``{name: value}`` copy that keeps the parsed case.
    """

    def __init__(self,
                 tag_name: str,
                 namespace: Optional[str] = None,
                 owner_document: Optional['Document'] = None):
        """
        Initialize a new Element.

        Args:
            tag_name: Name of the element tag (e.g., "div", "span")
            namespace: Optional namespace URI
            owner_document: The document that owns this element
        """
        super().__init__(NodeType.ELEMENT_NODE, owner_document)

        self.tag_name = tag_name.lower()
        self.namespace_uri = namespace
        self.node_name = tag_name.upper()

        self._attributes: Dict[str, Attr] = {}
        self.attributes: Mapping[str, Attr] = MappingProxyType(self._attributes)
        self._class_list: FrozenSet[str] = frozenset()

    def __repr__(self) -> str:
        parts = [self.tag_name]
        if self.id:
            parts.append(f"#{self.id}")
        parts.extend(f".{name}" for name in sorted(self._class_list))
        return f"<Element {''.join(parts)}>"

    @property
    def id(self) -> str:
        """Get the ID of the element, or an empty string."""
        return self.get_attribute('id') or ""

    @property
    def class_name(self) -> str:
        """Get the raw class attribute of the element."""
        return self.get_attribute('class') or ""

    @property
    def class_list(self) -> FrozenSet[str]:
        """Get the set of classes applied to this element."""
        return self._class_list

    @property
    def dataset(self) -> Dict[str, str]:
        """Get the element's data-* attributes keyed by their camelCase name."""
        dataset = {}
        for name, attr in self._attributes.items():
            if name.startswith('data-'):
                key = re.sub(r'-([a-z])', lambda m: m.group(1).upper(), name[5:])
                dataset[key] = attr.value
        return dataset

    def has_attribute(self, name: str) -> bool:
        """
        Check if the element has the specified attribute.

        Args:
            name: The attribute name (case-insensitive)

        Returns:
            True if the attribute exists, False otherwise
        """
        return name.lower() in self._attributes

    def get_attribute(self, name: str) -> Optional[str]:
        """
        Get the value of an attribute.

        Args:
            name: The attribute name (case-insensitive)

        Returns:
            The attribute value, or None if the attribute doesn't exist
        """
        attr = self._attributes.get(name.lower())
        return attr.value if attr is not None else None

    def get_attribute_names(self) -> List[str]:
        """Get the attribute names in source order."""
        return [attr.name for attr in self._attributes.values()]

    def attribute_map(self) -> Dict[str, str]:
        """Get a fresh ``{name: value}`` dict of every attribute, in source order."""
        return {attr.name: attr.value for attr in self._attributes.values()}

    def matches(self, selector: str) -> bool:
        """
        Check if the element matches a CSS selector.

        Args:
            selector: The CSS selector string

        Returns:
            True if the element matches the selector, False otherwise

        Raises:
            InvalidSelector: If the selector cannot be compiled
        """
        return self._selector_engine().matches(self, selector)

    def closest(self, selector: str) -> Optional['Element']:
        """
        Find the closest ancestor element (or self) that matches a selector.

        Args:
            selector: The CSS selector string

        Returns:
            The matching element or None if no match is found
        """
        engine = self._selector_engine()
        compiled = engine.compile(selector)

        current: Optional[Node] = self
        while current is not None and current.node_type == NodeType.ELEMENT_NODE:
            if engine.matches(current, compiled):
                return current
            current = current.parent_node

        return None

    def query_selector(self, selector: str) -> Optional['Element']:
        """
        Find the first descendant element that matches a selector.

        Args:
            selector: The CSS selector string

        Returns:
            The first matching element or None if no match is found
        """
        return self.query_selector_all(selector).first()

    def query_selector_all(self, selector: str) -> 'NodeSet':
        """
        Find all descendant elements that match a selector.

        Args:
            selector: The CSS selector string

        Returns:
            NodeSet of matching elements in document order
        """
        return self._selector_engine().select(selector, self)

    def _selector_engine(self) -> 'SelectorEngine':
        document = self._root
        if document is None:
            raise RuntimeError(f"{self!r} is detached from its document")
        return document.selector_engine

    def _set_attribute(self, name: str, value: str) -> None:
        """Record an attribute while the tree is being built by the parser."""
        if self._pending_children is None:
            raise RuntimeError(f"{self!r} is sealed and cannot be modified")

        key = name.lower()
        # First occurrence wins, as in the HTML tokenizer
        if key in self._attributes:
            return
        self._attributes[key] = Attr(name, value)

        if key == 'class':
            self._class_list = frozenset(value.split())
