"""
domino - Query HTML documents with CSS selectors.
"""

# Import utilities
from domino.utils.config import get_config
from domino.utils.logging import setup_logging, get_default_log_file

_config = get_config()
_log_file = _config.get("logging.log_file")
if _log_file == "default":
    _log_file = get_default_log_file()

# Set up basic logging
logger = setup_logging(log_file=_log_file,
                       console_level=_config.get("logging.console_level", "WARNING"),
                       file_level=_config.get("logging.file_level", "DEBUG"))

from domino.api import attr, attrs, from_string, length, load_file, select, text, try_select
from domino.dom import Document, Element, Node, NodeSet, NodeType, Parser, SelectorEngine
from domino.errors import (DominoError, FileReadFailure, InvalidSelector, ParseFailure,
                           RescuableFailure, UnwrapError)
from domino.result import Err, Ok, Result, fail, read_file, rescue

# Package information
__version__ = "0.1.0"
__description__ = "Query HTML documents with CSS selectors"

__all__ = [
    'from_string', 'select', 'text', 'attr', 'attrs', 'length', 'try_select', 'load_file',
    'Document', 'Element', 'Node', 'NodeSet', 'NodeType', 'Parser', 'SelectorEngine',
    'DominoError', 'ParseFailure', 'InvalidSelector', 'FileReadFailure', 'RescuableFailure', 'UnwrapError',
    'Result', 'Ok', 'Err', 'rescue', 'fail', 'read_file',
]

logger.debug(f"domino v{__version__} initialized")
