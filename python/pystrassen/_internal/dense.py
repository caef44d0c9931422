from __future__ import annotations

import operator
from typing import Any, Callable

import numpy as np

from .blocks import BlockDescriptor
from .coercion import coerce_rows
from .dtypes import element_kind, promote, resolve_dtype
from .errors import ShapeMismatchError, require
from .formatting import MatrixMixin
from .runtime import get_settings


def _dimension(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise TypeError(f"{name} must be an integer, got bool")
    try:
        n = operator.index(value)
    except TypeError:
        raise TypeError(f"{name} must be an integer, got {type(value).__name__}") from None
    require(n > 0, f"{name} must be > 0, got {n}")
    return n


def _index(value: Any, bound: int, axis: str) -> int:
    if isinstance(value, bool):
        raise TypeError("indices must be integers")
    try:
        i = operator.index(value)
    except TypeError:
        raise TypeError("indices must be integers") from None
    if i < 0 or i >= bound:
        raise IndexError(f"{axis} index {i} out of range for size {bound}")
    return i


class Matrix(MatrixMixin):
    """Dense row-major matrix over a numeric dtype.

    Element (i, j) lives at ``elements[i * cols + j]`` of a contiguous 1-D
    buffer owned exclusively by this instance.

    Operations come in two disjoint groups:

    - Mutators (``set``, ``set_to_*``, ``set_block_to_copy``) change the
      receiver in place and return None.
    - Everything else is pure and returns a newly allocated ``Matrix``; the
      operands are never modified.
    """

    __hash__ = None  # type: ignore[assignment]

    def __init__(self, rows: int, cols: int | None = None, *, dtype: Any = None):
        r = _dimension(rows, "rows")
        c = r if cols is None else _dimension(cols, "cols")
        dt = resolve_dtype(dtype, default=get_settings().default_dtype)
        self._rows = r
        self._cols = c
        self._data = np.zeros(r * c, dtype=dt)

    @classmethod
    def _adopt(cls, grid: np.ndarray, dtype: Any) -> "Matrix":
        """Wrap a freshly computed 2-D array (copied into a new buffer)."""
        rows, cols = grid.shape
        out = cls(rows, cols, dtype=dtype)
        out._data[:] = grid.reshape(-1)
        return out

    @classmethod
    def from_rows(cls, data: Any, *, dtype: Any = None) -> "Matrix":
        """Build a matrix from a rectangular nested sequence or 2-D NumPy array."""
        grid = coerce_rows(data)
        if dtype is None:
            dtype = grid.dtype
        dt = resolve_dtype(dtype, default=get_settings().default_dtype)
        return cls._adopt(grid, dt)

    # --- shape ---

    def rows(self) -> int:
        return self._rows

    def cols(self) -> int:
        return self._cols

    @property
    def shape(self) -> tuple[int, int]:
        return (self._rows, self._cols)

    @property
    def dtype(self) -> np.dtype:
        return self._data.dtype

    @property
    def kind(self):
        return element_kind(self._data.dtype)

    def is_square(self) -> bool:
        return self._rows == self._cols

    def size(self) -> int:
        """Side length of a square matrix."""
        require(self.is_square(), f"size() needs a square matrix, got {self._rows}x{self._cols}")
        return self._rows

    def dimensions_match(self, other: "Matrix") -> bool:
        return self._rows == other.rows() and self._cols == other.cols()

    def _grid(self) -> np.ndarray:
        # Reshape of a contiguous buffer is a view, not a copy.
        return self._data.reshape(self._rows, self._cols)

    # --- element access ---

    def get(self, i: int, j: int) -> Any:
        i = _index(i, self._rows, "row")
        j = _index(j, self._cols, "column")
        return self._data[i * self._cols + j]

    def set(self, i: int, j: int, value: Any) -> None:
        i = _index(i, self._rows, "row")
        j = _index(j, self._cols, "column")
        self._data[i * self._cols + j] = value

    def __getitem__(self, key: Any) -> Any:
        if not (isinstance(key, tuple) and len(key) == 2):
            raise TypeError("matrix indices must be provided as [row, col]")
        i, j = key
        return self.get(i, j)

    def __setitem__(self, key: Any, value: Any) -> None:
        if not (isinstance(key, tuple) and len(key) == 2):
            raise TypeError("matrix indices must be provided as [row, col]")
        i, j = key
        self.set(i, j, value)

    # --- mutators ---

    def set_to_zero(self) -> None:
        self._data.fill(0)

    def set_to_identity(self, n: int | None = None) -> None:
        """Turn the receiver into an identity matrix.

        Without `n` the matrix must already be square and keeps its shape.
        With `n` the buffer is reallocated to an n x n identity whatever the
        previous shape was.
        """
        if n is None:
            if not self.is_square():
                raise ShapeMismatchError(
                    "set_to_identity", self.shape, detail="matrix is not square"
                )
            size = self._rows
        else:
            size = _dimension(n, "n")
            self._rows = size
            self._cols = size
            self._data = np.zeros(size * size, dtype=self.dtype)
        self._data.fill(0)
        self._data[:: size + 1] = 1

    def set_to_negative(self) -> None:
        np.negative(self._data, out=self._data)

    def set_to_copy(self, other: "Matrix") -> None:
        if not isinstance(other, Matrix):
            raise TypeError("set_to_copy expects a Matrix")
        if other is self:
            return
        self._rows = other.rows()
        self._cols = other.cols()
        self._data = other._data.copy()

    def set_block_to_copy(
        self,
        other: "Matrix",
        size: int,
        row_a: int = 0,
        col_a: int = 0,
        row_b: int = 0,
        col_b: int = 0,
    ) -> None:
        """Copy the size x size block of `other` at (row_b, col_b) into self at (row_a, col_a)."""
        block = BlockDescriptor(size, row_a, col_a, row_b, col_b)
        block.check_fits(self.shape, other.shape)
        src = other._grid()[row_b : row_b + size, col_b : col_b + size]
        self._grid()[row_a : row_a + size, col_a : col_a + size] = src

    copy_block = set_block_to_copy

    # --- pure operations ---

    def copy(self) -> "Matrix":
        out = Matrix(self._rows, self._cols, dtype=self.dtype)
        out._data[:] = self._data
        return out

    def get_negative(self) -> "Matrix":
        out = self.copy()
        out.set_to_negative()
        return out

    def _elementwise(
        self,
        other: "Matrix",
        fn: Callable[[np.ndarray, np.ndarray], np.ndarray],
        rows: int,
        cols: int,
        offsets: tuple[int, int, int, int],
    ) -> "Matrix":
        ra, ca, rb, cb = offsets
        dt = promote(self.dtype, other.dtype)
        left = self._grid()[ra : ra + rows, ca : ca + cols]
        right = other._grid()[rb : rb + rows, cb : cb + cols]
        return Matrix._adopt(fn(left.astype(dt), right.astype(dt)), dt)

    def add(self, other: "Matrix") -> "Matrix":
        if not self.dimensions_match(other):
            raise ShapeMismatchError("add", self.shape, other.shape, symbol="+")
        return self._elementwise(other, np.add, self._rows, self._cols, (0, 0, 0, 0))

    def subtract(self, other: "Matrix") -> "Matrix":
        if not self.dimensions_match(other):
            raise ShapeMismatchError("subtract", self.shape, other.shape, symbol="-")
        return self._elementwise(other, np.subtract, self._rows, self._cols, (0, 0, 0, 0))

    def add_blocks(
        self,
        other: "Matrix",
        size: int,
        row_a: int = 0,
        col_a: int = 0,
        row_b: int = 0,
        col_b: int = 0,
    ) -> "Matrix":
        """Sum of the size x size blocks of self and `other`, as a new matrix."""
        block = BlockDescriptor(size, row_a, col_a, row_b, col_b)
        block.check_fits(self.shape, other.shape)
        return self._elementwise(other, np.add, size, size, (row_a, col_a, row_b, col_b))

    def subtract_blocks(
        self,
        other: "Matrix",
        size: int,
        row_a: int = 0,
        col_a: int = 0,
        row_b: int = 0,
        col_b: int = 0,
    ) -> "Matrix":
        """Difference of the size x size blocks of self and `other`, as a new matrix."""
        block = BlockDescriptor(size, row_a, col_a, row_b, col_b)
        block.check_fits(self.shape, other.shape)
        return self._elementwise(other, np.subtract, size, size, (row_a, col_a, row_b, col_b))

    def multiply_blocks(
        self,
        other: "Matrix",
        size: int,
        row_a: int = 0,
        col_a: int = 0,
        row_b: int = 0,
        col_b: int = 0,
    ) -> "Matrix":
        """Textbook product of the size x size blocks of self and `other`."""
        block = BlockDescriptor(size, row_a, col_a, row_b, col_b)
        block.check_fits(self.shape, other.shape)
        return triple_loop_product(self, row_a, col_a, other, row_b, col_b, size, size, size)

    # --- multiplication strategies ---

    def multiply(self, other: "Matrix", *, strategy: str = "textbook") -> "Matrix":
        from .strategies import multiply

        return multiply(self, other, strategy=strategy)

    def tb_multiply(self, other: "Matrix") -> "Matrix":
        from .strategies import textbook_multiply

        return textbook_multiply(self, other)

    def bb_multiply(self, other: "Matrix") -> "Matrix":
        from .strategies import block_recursive_multiply

        return block_recursive_multiply(self, other)

    def sb_multiply(self, other: "Matrix") -> "Matrix":
        from .strategies import strassen_multiply

        return strassen_multiply(self, other)

    # --- comparison ---

    def equals(self, other: "Matrix", tolerance: float = 0) -> bool:
        """True iff shapes match and every |self[i,j] - other[i,j]| <= tolerance.

        Integer matrices only accept a zero tolerance.
        """
        if tolerance < 0:
            raise ValueError(f"tolerance must be >= 0, got {tolerance!r}")
        if not self.dimensions_match(other):
            return False
        # uint64 with int64 promotes to float64, so integer-ness comes from the operands.
        if self.kind.is_integer and other.kind.is_integer:
            if tolerance != 0:
                raise ValueError("integer matrices only support tolerance=0")
            diff = self.kind.abs_diff(self._data, other._data)
            return all(d == 0 for d in diff.tolist())
        kind = element_kind(promote(self.dtype, other.dtype))
        diff = kind.abs_diff(self._data, other._data)
        return bool(np.all(diff <= tolerance))

    # --- operators ---

    def __add__(self, other: Any) -> "Matrix":
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: Any) -> "Matrix":
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.subtract(other)

    def __neg__(self) -> "Matrix":
        return self.get_negative()

    def __matmul__(self, other: Any) -> "Matrix":
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.multiply(other)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.equals(other)

    # --- numpy interop ---

    def to_numpy(self) -> np.ndarray:
        return self._grid().copy()

    def tolist(self) -> list[list[Any]]:
        return self._grid().tolist()

    def __array__(self, dtype: Any = None, copy: Any = None) -> np.ndarray:
        out = self.to_numpy()
        if dtype is not None:
            out = out.astype(dtype)
        return out


def triple_loop_product(
    a: Matrix,
    ra: int,
    ca: int,
    b: Matrix,
    rb: int,
    cb: int,
    m: int,
    k: int,
    n: int,
) -> Matrix:
    """C = A[ra:ra+m, ca:ca+k] @ B[rb:rb+k, cb:cb+n] by three nested loops.

    Offsets must already be validated; this addresses the buffers directly.
    """
    dt = promote(a.dtype, b.dtype)
    zero = element_kind(dt).zero
    out = Matrix(m, n, dtype=dt)
    ad = a._data.astype(dt, copy=False)
    bd = b._data.astype(dt, copy=False)
    od = out._data
    a_cols = a.cols()
    b_cols = b.cols()
    for i in range(m):
        a_row = (ra + i) * a_cols + ca
        for j in range(n):
            acc = zero
            b_col = rb * b_cols + cb + j
            for p in range(k):
                acc = acc + ad[a_row + p] * bd[b_col + p * b_cols]
            od[i * n + j] = acc
    return out
