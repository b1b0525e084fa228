"""
CSS Selector Engine implementation.
This module matches cssselect parse trees directly against the DOM.
"""

import logging
import threading
import weakref
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

import cssselect
from cssselect import parser as css

from ..errors import InvalidSelector
from .node import Node, NodeType
from .node_set import NodeSet

logger = logging.getLogger(__name__)

DEFAULT_CACHE_SIZE = 256

NTH_FUNCTIONS = frozenset({'nth-child', 'nth-last-child', 'nth-of-type', 'nth-last-of-type'})

STRUCTURAL_PSEUDO_CLASSES = frozenset({
    'root', 'scope', 'empty', 'parent',
    'first-child', 'last-child', 'only-child',
    'first-of-type', 'last-of-type', 'only-of-type',
})

# User-interaction state never applies to a parsed document
DYNAMIC_PSEUDO_CLASSES = frozenset({
    'hover', 'active', 'focus', 'focus-within', 'focus-visible', 'visited', 'target',
})

# Pseudo-classes that are shorthands for ordinary selectors, as in cheerio
PSEUDO_ALIASES = {
    'any-link': 'a[href], area[href], link[href]',
    'link': 'a[href], area[href], link[href]',
    'checked': 'input[type="checkbox"][checked], input[type="radio"][checked], option[selected]',
    'selected': 'option[selected]',
    'disabled': ('button[disabled], input[disabled], select[disabled], textarea[disabled], '
                 'optgroup[disabled], option[disabled], fieldset[disabled]'),
    'enabled': ('button:not([disabled]), input:not([disabled]), select:not([disabled]), '
                'textarea:not([disabled]), optgroup:not([disabled]), option:not([disabled]), '
                'fieldset:not([disabled])'),
    'required': 'input[required], select[required], textarea[required]',
    'optional': 'input:not([required]), select:not([required]), textarea:not([required])',
    'header': 'h1, h2, h3, h4, h5, h6',
    'input': 'input, textarea, select, button',
    'button': 'button, input[type="button"]',
    'text': 'input:not([type]), input[type="text"]',
    'checkbox': 'input[type="checkbox"]',
    'radio': 'input[type="radio"]',
    'password': 'input[type="password"]',
    'file': 'input[type="file"]',
    'image': 'input[type="image"]',
    'submit': 'input[type="submit"], button[type="submit"]',
    'reset': 'input[type="reset"], button[type="reset"]',
}

_alias_trees: Dict[str, List[object]] = {}

SelectorScope = Union[Node, NodeSet]


class CompiledSelector:
    """A validated selector group, ready for matching."""

    __slots__ = ('source', 'selectors')

    def __init__(self, source: str, selectors: Sequence[css.Selector]):
        self.source = source
        self.selectors = tuple(selectors)

    def __repr__(self) -> str:
        return f"CompiledSelector({self.source!r})"


def _alias_selectors(name: str) -> List[object]:
    trees = _alias_trees.get(name)
    if trees is None:
        trees = [selector.parsed_tree for selector in cssselect.parse(PSEUDO_ALIASES[name])]
        trees = _alias_trees.setdefault(name, trees)
    return trees


def _token_value(token) -> str:
    # Older cssselect releases stored attribute values as plain strings
    return getattr(token, 'value', token)


def _relation_arguments(tree) -> List[Tuple[str, object]]:
    """Get the (combinator, tree) pairs of a :has() argument list."""
    arguments = getattr(tree, 'arguments', None)
    if arguments is None:
        arguments = [(tree.combinator, tree.subselector)]

    result = []
    for combinator, subselector in arguments:
        combinator = _token_value(combinator) or ' '
        result.append((combinator.strip() or ' ', getattr(subselector, 'parsed_tree', subselector)))
    return result


def _anchor_relative(tree, combinator: str):
    """Prefix the leftmost compound of a relative selector with ``:scope <combinator>``."""
    if isinstance(tree, css.CombinedSelector):
        return css.CombinedSelector(_anchor_relative(tree.selector, combinator),
                                    tree.combinator, tree.subselector)
    return css.CombinedSelector(css.Pseudo(css.Element(), 'scope'), combinator, tree)


def _is_bare_scope(tree) -> bool:
    return (isinstance(tree, css.Pseudo) and tree.ident == 'scope'
            and isinstance(tree.selector, css.Element) and tree.selector.element is None)


def _nth_matches(index: int, a: int, b: int) -> bool:
    """Check whether a 1-based index satisfies An+B for some n >= 0."""
    if a == 0:
        return index == b
    diff = index - b
    return diff % a == 0 and diff // a >= 0


class SelectorEngine:
    """
    CSS Selector Engine for DOM queries.

    Selectors are parsed with cssselect and validated once, then matched
    right-to-left against elements. Anything cssselect rejects, and anything
    it accepts but this engine cannot evaluate, raises InvalidSelector.
    """

    def __init__(self, cache_size: int = DEFAULT_CACHE_SIZE):
        """
        Initialize the selector engine.

        Args:
            cache_size: Number of compiled selectors to keep
        """
        self.cache_size = max(0, int(cache_size))
        self._selector_cache: Dict[str, CompiledSelector] = {}
        self._relations: 'weakref.WeakKeyDictionary' = weakref.WeakKeyDictionary()
        self._lock = threading.Lock()

        logger.debug(f"SelectorEngine initialized (cache_size: {self.cache_size})")

    def compile(self, selector: Union[str, CompiledSelector]) -> CompiledSelector:
        """
        Parse and validate a selector, using the cache if possible.

        Args:
            selector: The CSS selector string

        Returns:
            The compiled selector

        Raises:
            InvalidSelector: If the selector cannot be parsed or evaluated
        """
        if isinstance(selector, CompiledSelector):
            return selector
        if not isinstance(selector, str):
            error = InvalidSelector(selector, f"expected str, got {type(selector).__name__}")
            logger.warning(str(error))
            raise error

        with self._lock:
            compiled = self._selector_cache.get(selector)
        if compiled is not None:
            return compiled

        try:
            parsed = self._parse(selector)
        except InvalidSelector as e:
            logger.warning(str(e))
            raise

        compiled = CompiledSelector(selector, parsed)

        if self.cache_size:
            with self._lock:
                if selector not in self._selector_cache:
                    while len(self._selector_cache) >= self.cache_size:
                        self._selector_cache.pop(next(iter(self._selector_cache)))
                self._selector_cache[selector] = compiled

        logger.debug(f"Compiled selector {selector!r} into {len(parsed)} selector(s)")
        return compiled

    def _parse(self, selector: str) -> List[css.Selector]:
        """Parse a selector string and reject anything the matcher cannot evaluate."""
        try:
            parsed = cssselect.parse(selector)
        except cssselect.SelectorError as e:
            raise InvalidSelector(selector, str(e)) from e

        for parsed_selector in parsed:
            if parsed_selector.pseudo_element is not None:
                raise InvalidSelector(selector, f"pseudo-element ::{parsed_selector.pseudo_element} is not supported")
            self._validate(parsed_selector.parsed_tree, selector)
        return parsed

    def select(self, selector: Union[str, CompiledSelector], scope: SelectorScope) -> NodeSet:
        """
        Find all elements under a scope matching a CSS selector.

        Args:
            selector: The CSS selector string
            scope: A Document, a node, or a NodeSet of nodes to search under

        Returns:
            NodeSet of matches. Each scoping node contributes its matching
            descendants in document order; later duplicates are dropped.

        Raises:
            InvalidSelector: If the selector cannot be compiled
        """
        compiled = self.compile(selector)
        roots = list(scope) if isinstance(scope, NodeSet) else [scope]

        results: List[Node] = []
        seen = set()

        for root in roots:
            scope_node = self._scope_node(root)
            for node in root.iter_descendants():
                if node.node_type != NodeType.ELEMENT_NODE or id(node) in seen:
                    continue
                if self._matches_compiled(node, compiled, scope_node):
                    seen.add(id(node))
                    results.append(node)

        logger.debug(f"Selector {compiled.source!r} matched {len(results)} node(s) under {len(roots)} root(s)")
        return NodeSet(results, self)

    def matches(self, element: Node, selector: Union[str, CompiledSelector],
                scope: Optional[Node] = None) -> bool:
        """
        Check if an element matches a CSS selector.

        Args:
            element: The element to check
            selector: The CSS selector
            scope: Node that :scope refers to; defaults to the document element

        Returns:
            True if the element matches the selector, False otherwise

        Raises:
            InvalidSelector: If the selector cannot be compiled
        """
        compiled = self.compile(selector)
        if element.node_type != NodeType.ELEMENT_NODE:
            return False

        if scope is None:
            document = element._root
            scope = self._scope_node(document) if document is not None else element
        return self._matches_compiled(element, compiled, scope)

    def _scope_node(self, root: Node) -> Node:
        """Get the node :scope refers to when searching under root."""
        if root.node_type == NodeType.DOCUMENT_NODE:
            return getattr(root, 'document_element', None) or root
        return root

    def _validate(self, tree, source: str) -> None:
        """
        Reject parse trees this engine cannot evaluate.

        Raises:
            InvalidSelector: On namespaces, unknown pseudo-classes or bad arguments
        """
        if isinstance(tree, css.CombinedSelector):
            self._validate(tree.selector, source)
            self._validate(tree.subselector, source)
            return

        if isinstance(tree, css.Element):
            if tree.namespace not in (None, '*'):
                raise InvalidSelector(source, f"namespace prefix {tree.namespace!r} is not supported")
            return

        if isinstance(tree, css.Attrib):
            if tree.namespace not in (None, '*'):
                raise InvalidSelector(source, f"namespace prefix {tree.namespace!r} is not supported")
        elif isinstance(tree, css.Pseudo):
            name = tree.ident
            if (name not in STRUCTURAL_PSEUDO_CLASSES and name not in DYNAMIC_PSEUDO_CLASSES
                    and name not in PSEUDO_ALIASES):
                raise InvalidSelector(source, f"unknown pseudo-class :{name}")
        elif isinstance(tree, css.Function):
            self._validate_function(tree, source)
        elif isinstance(tree, css.Negation):
            self._validate(tree.subselector, source)
        elif isinstance(tree, (css.Matching, css.SpecificityAdjustment)):
            for subtree in tree.selector_list:
                self._validate(subtree, source)
        elif isinstance(tree, css.Relation):
            for _, subtree in _relation_arguments(tree):
                self._validate(subtree, source)
        elif not isinstance(tree, (css.Hash, css.Class)):
            raise InvalidSelector(source, f"unsupported selector component {type(tree).__name__}")

        self._validate(tree.selector, source)

    def _validate_function(self, tree, source: str) -> None:
        if tree.name in NTH_FUNCTIONS:
            try:
                css.parse_series(tree.arguments)
            except ValueError as e:
                raise InvalidSelector(source, f"invalid argument to :{tree.name}(): {e}") from e
        elif tree.name in ('contains', 'lang'):
            if not tree.arguments or any(token.type not in ('IDENT', 'STRING') for token in tree.arguments):
                raise InvalidSelector(source, f":{tree.name}() expects a single string or identifier")
        else:
            raise InvalidSelector(source, f"unknown pseudo-class function :{tree.name}()")

    def _matches_compiled(self, element: Node, compiled: CompiledSelector, scope: Node) -> bool:
        return any(self._matches_tree(element, selector.parsed_tree, scope)
                   for selector in compiled.selectors)

    def _matches_at(self, node: Node, tree, scope: Node) -> bool:
        """Match a node reached through a combinator, which may be a non-element scope root."""
        if node.node_type == NodeType.ELEMENT_NODE:
            return self._matches_tree(node, tree, scope)
        return node is scope and _is_bare_scope(tree)

    def _matches_tree(self, element: Node, tree, scope: Node) -> bool:
        """
        Match an element against a selector tree.

        Args:
            element: The element to check
            tree: A cssselect parse tree node
            scope: Node that :scope refers to

        Returns:
            True if the element matches, False otherwise
        """
        if isinstance(tree, css.CombinedSelector):
            return self._matches_combined(element, tree, scope)

        if isinstance(tree, css.Element):
            return tree.element is None or element.tag_name == tree.element.lower()

        if not self._matches_tree(element, tree.selector, scope):
            return False

        if isinstance(tree, css.Hash):
            return element.get_attribute('id') == tree.id
        if isinstance(tree, css.Class):
            return tree.class_name in element.class_list
        if isinstance(tree, css.Attrib):
            return self._matches_attrib(element, tree)
        if isinstance(tree, css.Pseudo):
            return self._matches_pseudo(element, tree.ident, scope)
        if isinstance(tree, css.Function):
            return self._matches_function(element, tree)
        if isinstance(tree, css.Negation):
            return not self._matches_tree(element, tree.subselector, scope)
        if isinstance(tree, (css.Matching, css.SpecificityAdjustment)):
            return any(self._matches_tree(element, subtree, scope) for subtree in tree.selector_list)
        if isinstance(tree, css.Relation):
            return self._matches_relation(element, tree)

        raise TypeError(f"Unexpected selector component {type(tree).__name__}")

    def _matches_combined(self, element: Node, tree, scope: Node) -> bool:
        """Match ``selector <combinator> subselector`` with element as the subject."""
        if not self._matches_tree(element, tree.subselector, scope):
            return False

        combinator = tree.combinator
        left = tree.selector

        if combinator == ' ':
            return any(self._matches_at(ancestor, left, scope) for ancestor in element.iter_ancestors())

        if combinator == '>':
            parent = element.parent_node
            return parent is not None and self._matches_at(parent, left, scope)

        if combinator == '+':
            sibling = element.previous_element_sibling
            return sibling is not None and self._matches_tree(sibling, left, scope)

        if combinator == '~':
            sibling = element.previous_element_sibling
            while sibling is not None:
                if self._matches_tree(sibling, left, scope):
                    return True
                sibling = sibling.previous_element_sibling
            return False

        raise TypeError(f"Unknown combinator {combinator!r}")

    def _matches_attrib(self, element: Node, tree) -> bool:
        value = element.get_attribute(tree.attrib)
        operator = tree.operator

        if operator == 'exists':
            return value is not None

        expected = _token_value(tree.value)
        if value is not None and getattr(tree, 'flag', None) == 'i':
            value, expected = value.lower(), expected.lower()

        if operator == '!=':
            return value is None or value != expected
        if value is None:
            return False

        if operator == '=':
            return value == expected
        if operator == '~=':
            return bool(expected) and not any(c.isspace() for c in expected) and expected in value.split()
        if operator == '|=':
            return value == expected or value.startswith(f"{expected}-")
        if operator == '^=':
            return bool(expected) and value.startswith(expected)
        if operator == '$=':
            return bool(expected) and value.endswith(expected)
        if operator == '*=':
            return bool(expected) and expected in value

        raise TypeError(f"Unknown attribute operator {operator!r}")

    def _matches_pseudo(self, element: Node, name: str, scope: Node) -> bool:
        parent = element.parent_node

        if name == 'scope':
            return element is scope
        if name == 'root':
            return parent is not None and parent.node_type == NodeType.DOCUMENT_NODE
        if name == 'empty':
            return not self._has_content(element)
        if name == 'parent':
            return self._has_content(element)
        if name in DYNAMIC_PSEUDO_CLASSES:
            return False
        if name in PSEUDO_ALIASES:
            return any(self._matches_tree(element, tree, scope) for tree in _alias_selectors(name))

        if parent is None:
            return False

        if name == 'first-child':
            return element.previous_element_sibling is None
        if name == 'last-child':
            return element.next_element_sibling is None
        if name == 'only-child':
            return element.previous_element_sibling is None and element.next_element_sibling is None

        same_type = [sibling for sibling in parent.children if sibling.tag_name == element.tag_name]
        if name == 'first-of-type':
            return same_type[0] is element
        if name == 'last-of-type':
            return same_type[-1] is element
        if name == 'only-of-type':
            return len(same_type) == 1

        raise TypeError(f"Unknown pseudo-class :{name}")

    def _matches_function(self, element: Node, tree) -> bool:
        name = tree.name

        if name in NTH_FUNCTIONS:
            parent = element.parent_node
            if parent is None:
                return False

            siblings = parent.children
            if name.endswith('of-type'):
                siblings = [sibling for sibling in siblings if sibling.tag_name == element.tag_name]
            if name.startswith('nth-last'):
                siblings = siblings[::-1]

            index = next(i for i, sibling in enumerate(siblings, 1) if sibling is element)
            a, b = css.parse_series(tree.arguments)
            return _nth_matches(index, a, b)

        argument = "".join(token.value for token in tree.arguments)

        if name == 'contains':
            return argument in element.text_content

        if name == 'lang':
            wanted = argument.lower()
            for node in self._self_and_ancestors(element):
                lang = node.get_attribute('lang')
                if lang is None:
                    lang = node.get_attribute('xml:lang')
                if lang is not None:
                    lang = lang.lower()
                    return lang == wanted or lang.startswith(f"{wanted}-")
            return False

        raise TypeError(f"Unknown pseudo-class function :{name}()")

    def _matches_relation(self, element: Node, tree) -> bool:
        """Match :has(), evaluating each relative selector with element as :scope."""
        for combinator, anchored in self._relative_selectors(tree):
            if combinator in (' ', '>'):
                candidates: Iterable[Node] = element.iter_descendants()
            else:
                candidates = self._following_in_parent(element)

            for candidate in candidates:
                if candidate.node_type == NodeType.ELEMENT_NODE and self._matches_tree(candidate, anchored, element):
                    return True
        return False

    def _relative_selectors(self, tree) -> List[Tuple[str, object]]:
        """Get the :has() arguments of tree, each anchored to :scope."""
        with self._lock:
            anchored = self._relations.get(tree)
        if anchored is None:
            anchored = [(combinator, _anchor_relative(subtree, combinator))
                        for combinator, subtree in _relation_arguments(tree)]
            with self._lock:
                anchored = self._relations.setdefault(tree, anchored)
        return anchored

    def _following_in_parent(self, element: Node) -> Iterable[Node]:
        """Yield the later siblings of element and their descendants."""
        sibling = element.next_sibling
        while sibling is not None:
            yield sibling
            yield from sibling.iter_descendants()
            sibling = sibling.next_sibling

    def _has_content(self, element: Node) -> bool:
        for child in element.child_nodes:
            if child.node_type == NodeType.ELEMENT_NODE:
                return True
            if child.node_type == NodeType.TEXT_NODE and child.node_value:
                return True
        return False

    def _self_and_ancestors(self, element: Node) -> Iterable[Node]:
        node: Optional[Node] = element
        while node is not None and node.node_type == NodeType.ELEMENT_NODE:
            yield node
            node = node.parent_node
