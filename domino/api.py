"""
Functional interface for domino.

Thin module-level wrappers so documents can be queried without touching the
DOM classes directly:

    doc = from_string("<p class='a'>hi</p><p>bye</p>")
    text(select(doc, "p"))       # "hibye"
    attr(select(doc, "p"), "class")  # "a"
"""

import logging
from typing import Dict, Optional, Union

from .dom.document import Document
from .dom.node import Node
from .dom.node_set import NodeSet
from .dom.selector_engine import SelectorEngine
from .result import Err, Ok, Result, read_file, rescue
from .utils.config import Config

logger = logging.getLogger(__name__)

Scope = Union[Document, Node, NodeSet]


def from_string(markup: str, fragment: bool = False, config: Optional[Config] = None) -> Document:
    """
    Parse an HTML string into a Document.

    Args:
        markup: The HTML content to parse
        fragment: Parse as a fragment, without implicit html/head/body
        config: Optional configuration override

    Returns:
        The parsed Document

    Raises:
        ParseFailure: If markup is not a string
    """
    return Document.from_string(markup, fragment=fragment, config=config)


def select(scope: Scope, selector: str) -> NodeSet:
    """
    Select the elements under a scope that match a CSS selector.

    Args:
        scope: A Document, a single node, or a NodeSet
        selector: The CSS selector string

    Returns:
        NodeSet of matches; empty if nothing matched

    Raises:
        InvalidSelector: If the selector cannot be compiled
    """
    if isinstance(scope, NodeSet):
        return scope.select(selector)
    if isinstance(scope, Document):
        return scope.select(selector)
    if isinstance(scope, Node):
        document = scope._root
        engine = document.selector_engine if document is not None else SelectorEngine()
        return engine.select(selector, scope)
    raise TypeError(f"Cannot select from {type(scope).__name__}")


def text(nodes: NodeSet) -> str:
    return nodes.text()


def attr(nodes: NodeSet, name: str) -> Optional[str]:
    return nodes.attr(name)


def attrs(nodes: NodeSet) -> Optional[Dict[str, str]]:
    return nodes.attrs()


def length(nodes: NodeSet) -> int:
    return nodes.length


def try_select(scope: Scope, selector: str) -> Result[NodeSet, str]:
    """
    Select like ``select`` but report an invalid selector as a value.

    Returns:
        Ok(NodeSet) or Err(message)
    """
    return rescue(select, scope, selector)


def load_file(path: str, encoding: Optional[str] = None) -> Result[Document, None]:
    """
    Read an HTML file and parse it.

    Args:
        path: Path of the file to read
        encoding: Encoding to try before sniffing

    Returns:
        Ok(Document), or Err(None) if the file could not be read
    """
    contents = read_file(path)
    if contents.is_err():
        logger.debug(f"Could not load {path!r}")
        return Err(None)
    return Ok(Document.from_bytes(contents.unwrap(), encoding=encoding))
