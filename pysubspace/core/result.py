"""
Tagged result container and the process-abort policy.

Engine operations raise typed exceptions (pysubspace.core.exceptions).
Applications that want the original "any contract violation ends the
process" behavior wrap their top level with abort_on_error; callers and
tests that want to inspect failures as values use attempt(), which
returns a Result tagged as success or error.

Design decisions:
    - Immutable (frozen=True) so a captured failure cannot be altered
    - Only PySubspaceError is captured; anything else is a genuine bug
      and propagates unchanged
"""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from pysubspace.core.exceptions import PySubspaceError

logger = logging.getLogger(__name__)

T = TypeVar('T')


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Immutable success-or-error envelope.

    Attributes:
        value: The operation's return value, or None on error
        error: The captured engine error, or None on success
        operation: Name of the wrapped operation, for diagnostics

    Examples:
        >>> r = attempt(inverse, M)
        >>> if not r.ok:
        ...     assert isinstance(r.error, SingularMatrixError)
    """
    value: T | None
    error: PySubspaceError | None
    operation: str

    @classmethod
    def success(cls, value: T, operation: str = '') -> Result[T]:
        return cls(value=value, error=None, operation=operation)

    @classmethod
    def failure(cls, error: PySubspaceError, operation: str = '') -> Result[T]:
        return cls(value=None, error=error, operation=operation)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """
        Return the value, re-raising the captured error on failure.

        Raises:
            PySubspaceError: The captured error
        """
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


def attempt(fn: Callable[..., T], *args: Any, **kwargs: Any) -> Result[T]:
    """Call fn and capture an engine error as a failed Result."""
    name = getattr(fn, '__name__', repr(fn))
    try:
        return Result.success(fn(*args, **kwargs), operation=name)
    except PySubspaceError as e:
        return Result.failure(e, operation=name)


def abort_on_error(fn: Callable[..., T]) -> Callable[..., T]:
    """
    Decorator: terminate the process on any unhandled engine error.

    The error is logged at CRITICAL with its traceback, then SystemExit(1)
    is raised from it.
    """
    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> T:
        try:
            return fn(*args, **kwargs)
        except PySubspaceError as e:
            logger.critical(
                "%s: fatal %s: %s", fn.__name__, type(e).__name__, e,
                exc_info=True,
            )
            raise SystemExit(1) from e
    return wrapper
