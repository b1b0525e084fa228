"""
Result boundary for domino.

Converts raised failures and failed file reads into explicit Ok/Err values,
for callers that prefer checking a value over catching an exception.
"""

import logging
from typing import Any, Callable, Generic, TypeVar

from .errors import FileReadFailure, RescuableFailure, UnwrapError
from .utils.logging import log_exception

logger = logging.getLogger(__name__)

T = TypeVar('T')
E = TypeVar('E')
U = TypeVar('U')


class Result(Generic[T, E]):
    """Base class of Ok and Err."""

    __slots__ = ()

    def is_ok(self) -> bool:
        return isinstance(self, Ok)

    def is_err(self) -> bool:
        return isinstance(self, Err)


class Ok(Result[T, E]):
    """A successful result carrying a value."""

    __slots__ = ('value',)

    def __init__(self, value: T):
        self.value = value

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ok):
            return NotImplemented
        return self.value == other.value

    def __hash__(self) -> int:
        return hash(('Ok', self.value))

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def map(self, fn: Callable[[T], U]) -> 'Result[U, E]':
        return Ok(fn(self.value))


class Err(Result[T, E]):
    """A failed result carrying an error value (which may be None)."""

    __slots__ = ('error',)

    def __init__(self, error: E):
        self.error = error

    def __repr__(self) -> str:
        return f"Err({self.error!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Err):
            return NotImplemented
        return self.error == other.error

    def __hash__(self) -> int:
        return hash(('Err', self.error))

    def unwrap(self) -> T:
        """
        Raises:
            UnwrapError: Always; an Err has no value
        """
        raise UnwrapError(f"Called unwrap() on {self!r}")

    def unwrap_or(self, default: T) -> T:
        return default

    def map(self, fn: Callable[[T], U]) -> 'Result[U, E]':
        return self


def rescue(fn: Callable[..., T], *args: Any, **kwargs: Any) -> Result[T, str]:
    """
    Call a function and capture an ordinary failure as a value.

    Args:
        fn: The function to call
        *args: Positional arguments for fn
        **kwargs: Keyword arguments for fn

    Returns:
        Ok with the return value, or Err with the exception message if fn
        raised an Exception. KeyboardInterrupt, SystemExit and other
        BaseExceptions are not caught.
    """
    try:
        return Ok(fn(*args, **kwargs))
    except Exception as e:
        log_exception(logger, e, message=f"Rescued failure in {getattr(fn, '__name__', fn)!r}",
                      level=logging.DEBUG)
        return Err(str(e))


def fail(message: str) -> None:
    """
    Raise a RescuableFailure with the given message.

    Raises:
        RescuableFailure: Always
    """
    raise RescuableFailure(message)


def _read_bytes(path: str) -> bytes:
    try:
        with open(path, 'rb') as f:
            return f.read()
    except (OSError, TypeError, ValueError) as e:
        raise FileReadFailure(f"Cannot read {path!r}: {e}") from e


def read_file(path: str) -> Result[bytes, None]:
    """
    Read a whole file as raw bytes.

    Args:
        path: Path of the file to read

    Returns:
        Ok with the file contents, or Err(None) if the file is missing,
        unreadable or a directory. The cause is only logged.
    """
    try:
        return Ok(_read_bytes(path))
    except FileReadFailure as e:
        logger.debug(f"read_file failed: {e}")
        return Err(None)
