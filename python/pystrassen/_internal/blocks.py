from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .errors import require


QUADRANT_NAMES: tuple[str, ...] = ("11", "12", "21", "22")


def is_power_of_two(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0


def quadrant_offsets(size: int) -> tuple[tuple[int, int], ...]:
    """(row, col) offsets of the 11, 12, 21, 22 quadrants of a `size` square."""
    require(size >= 2 and size % 2 == 0, f"quadrant split needs an even size >= 2, got {size}")
    half = size // 2
    return ((0, 0), (0, half), (half, 0), (half, half))


def check_block_fits(shape: tuple[int, int], row: int, col: int, size: int, *, operand: str) -> None:
    rows, cols = shape
    require(
        row >= 0 and col >= 0,
        f"block offsets for {operand} must be non-negative, got ({row}, {col})",
    )
    require(
        row + size <= rows and col + size <= cols,
        f"{size}x{size} block at ({row}, {col}) does not fit {operand} of shape {rows}x{cols}",
    )


@dataclass(frozen=True)
class BlockDescriptor:
    """A `size x size` block at (row_a, col_a) in A and (row_b, col_b) in B."""

    size: int
    row_a: int = 0
    col_a: int = 0
    row_b: int = 0
    col_b: int = 0

    def __post_init__(self) -> None:
        values = (self.size, self.row_a, self.col_a, self.row_b, self.col_b)
        if not all(isinstance(x, int) and not isinstance(x, bool) for x in values):
            raise TypeError("block size and offsets must be integers")
        require(self.size >= 1, f"block size must be >= 1, got {self.size}")

    def check_fits(self, a_shape: tuple[int, int], b_shape: tuple[int, int] | None = None) -> None:
        check_block_fits(a_shape, self.row_a, self.col_a, self.size, operand="A")
        if b_shape is not None:
            check_block_fits(b_shape, self.row_b, self.col_b, self.size, operand="B")


class BlockView:
    """A no-copy square view into a `Matrix`.

    Used as the operand of the recursive strategies so quadrants are never
    materialized:
    - Construction validation (bounds, squareness)
    - Element access by delegating into the source
    - View composition: a view-of-a-view collapses into a single view
    - Structure-only printing (repr/str must not access elements)
    """

    def __init__(self, source: Any, row0: int = 0, col0: int = 0, size: int | None = None):
        # Compose views deterministically.
        if isinstance(source, BlockView):
            row0 = source.row_offset + row0
            col0 = source.col_offset + col0
            if size is None:
                size = source.size()
            source = source.source

        rows, cols = int(source.rows()), int(source.cols())
        if size is None:
            require(rows == cols, f"a full-matrix view needs a square matrix, got {rows}x{cols}")
            size = rows

        BlockDescriptor(size, row0, col0)  # type + size checks
        check_block_fits((rows, cols), row0, col0, size, operand="view source")

        self._source = source
        self._row0 = row0
        self._col0 = col0
        self._size = size

    # --- minimal matrix protocol ---

    def rows(self) -> int:
        return self._size

    def cols(self) -> int:
        return self._size

    def size(self) -> int:
        return self._size

    @property
    def shape(self) -> tuple[int, int]:
        return (self._size, self._size)

    @property
    def source(self) -> Any:
        return self._source

    @property
    def row_offset(self) -> int:
        return self._row0

    @property
    def col_offset(self) -> int:
        return self._col0

    @property
    def dtype(self) -> Any:
        return self._source.dtype

    def get(self, i: int, j: int) -> Any:
        if not (isinstance(i, int) and isinstance(j, int)):
            raise TypeError("indices must be integers")
        if i < 0 or j < 0 or i >= self._size or j >= self._size:
            raise IndexError("index out of range")
        return self._source.get(self._row0 + i, self._col0 + j)

    def __getitem__(self, key: Any) -> Any:
        if not (isinstance(key, tuple) and len(key) == 2):
            raise TypeError("matrix indices must be provided as [row, col]")
        i, j = key
        return self.get(int(i), int(j))

    # --- quadrants ---

    def quadrant(self, name: str) -> "BlockView":
        if name not in QUADRANT_NAMES:
            raise ValueError(f"quadrant must be one of {QUADRANT_NAMES}, got {name!r}")
        r, c = quadrant_offsets(self._size)[QUADRANT_NAMES.index(name)]
        return BlockView(self, r, c, self._size // 2)

    def quadrants(self) -> tuple["BlockView", "BlockView", "BlockView", "BlockView"]:
        half = self._size // 2
        q = [BlockView(self, r, c, half) for r, c in quadrant_offsets(self._size)]
        return q[0], q[1], q[2], q[3]

    def materialize(self) -> Any:
        out = type(self._source)(self._size, self._size, dtype=self.dtype)
        out.set_block_to_copy(self._source, self._size, 0, 0, self._row0, self._col0)
        return out

    # --- printing (structure-only; must not access elements) ---

    def __repr__(self) -> str:
        return self._format()

    def __str__(self) -> str:
        return self._format()

    def _format(self) -> str:
        return (
            f"BlockView(size={self._size}, offset=({self._row0},{self._col0}), "
            f"source={type(self._source).__name__}({self._source.rows()}x{self._source.cols()}))"
        )


def as_view(obj: Any) -> BlockView:
    if isinstance(obj, BlockView):
        return obj
    return BlockView(obj)
