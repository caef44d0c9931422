"""PyStrassen error channels.

Two kinds of failure exist:

- `PreconditionError`: the caller broke a contract (zero dimension, a block
  that does not fit, a recursive multiply on a non power-of-two operand).
  These indicate programmer error and are never caught inside the package.
- `ShapeMismatchError`: the operands are individually valid but incompatible
  (add of 2x3 and 3x2, inner-dimension mismatch). Callers may legitimately
  provoke and handle these.
"""

from __future__ import annotations


class PyStrassenError(Exception):
    """Base class for all PyStrassen errors."""


class PreconditionError(PyStrassenError, AssertionError):
    """A documented precondition was violated."""


class ShapeMismatchError(PyStrassenError, ValueError):
    """Operands have incompatible shapes for the requested operation."""

    def __init__(
        self,
        op: str,
        left_shape: tuple[int, int],
        right_shape: tuple[int, int] | None = None,
        *,
        symbol: str = ",",
        detail: str | None = None,
    ) -> None:
        self.op = op
        self.left_shape = tuple(left_shape)
        self.right_shape = None if right_shape is None else tuple(right_shape)

        left = f"{self.left_shape[0]}x{self.left_shape[1]}"
        if self.right_shape is None:
            message = f"{op} dimension mismatch: {left}"
        else:
            right = f"{self.right_shape[0]}x{self.right_shape[1]}"
            message = f"{op} dimension mismatch: {left} {symbol} {right}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


def require(condition: bool, message: str) -> None:
    """Raise `PreconditionError(message)` unless `condition` holds."""
    if not condition:
        raise PreconditionError(message)
