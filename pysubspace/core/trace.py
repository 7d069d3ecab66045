"""
Operation trace channel.

Every allocation and every derivational or destructive matrix operation
can emit one line describing the operator and operand shapes, e.g.

    C [3, 4] <- product(A [3, 2] * B^T [2, 4])
    A [3, 3] <- add(A [3, 3] + B [3, 3])
    d <- dist_l2(A [5, 10] : 2, B [5, 8] : 0) = 1.414214

Records go to the ``pysubspace.trace`` logger at DEBUG level and are only
built when the process-wide verbosity is Verbosity.DEBUG, so tracing is
observational and costs nothing when off.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from enum import IntEnum
from typing import Any, Iterator

from pysubspace.core.exceptions import ValidationError


logger = logging.getLogger("pysubspace.trace")


class Verbosity(IntEnum):
    """Process-wide diagnostic verbosity."""
    QUIET = 0
    INFO = 1
    VERBOSE = 2
    DEBUG = 3


_verbosity = Verbosity.INFO


def get_verbosity() -> Verbosity:
    return _verbosity


def set_verbosity(level: Verbosity | int | str) -> None:
    """
    Set the process-wide verbosity.

    Args:
        level: A Verbosity, its integer value, or its name (case-insensitive)
    """
    global _verbosity
    _verbosity = parse_verbosity(level)


def parse_verbosity(level: Verbosity | int | str) -> Verbosity:
    """
    Convert a Verbosity, its integer value, or its name to a Verbosity.

    Raises:
        ValidationError: If level names no verbosity
    """
    try:
        if isinstance(level, str):
            text = level.strip()
            if text.isdigit():
                return Verbosity(int(text))
            return Verbosity[text.upper()]
        return Verbosity(level)
    except (KeyError, ValueError):
        raise ValidationError(
            f"Unknown verbosity {level!r}; expected 0-3 or one of "
            f"{[v.name.lower() for v in Verbosity]}"
        ) from None


@contextmanager
def verbosity(level: Verbosity | int | str) -> Iterator[None]:
    """Temporarily change the verbosity."""
    previous = _verbosity
    set_verbosity(level)
    try:
        yield
    finally:
        set_verbosity(previous)


def enabled() -> bool:
    """True if trace records are currently emitted."""
    return _verbosity >= Verbosity.DEBUG and logger.isEnabledFor(logging.DEBUG)


def describe(M: Any) -> str:
    return f"{M.label} [{M.rows}, {M.cols}]"


def record(
    op: str,
    target: Any | str,
    *operands: Any,
    symbol: str | None = None,
    value: float | None = None,
) -> None:
    """
    Emit one trace line for an operation.

    Args:
        op: Operation name
        target: The result or mutated matrix, or a name for scalar results
        *operands: Operand matrices or preformatted operand strings
        symbol: Operator placed between operands (e.g. '*', '+')
        value: Scalar result, for scalar-valued operations
    """
    if not enabled():
        return

    lhs = target if isinstance(target, str) else describe(target)
    parts = [p if isinstance(p, str) else describe(p) for p in operands]
    joiner = f" {symbol} " if symbol else ", "
    line = f"{lhs} <- {op}({joiner.join(parts)})"
    if value is not None:
        line += f" = {value:.6f}"
    logger.debug(line)
