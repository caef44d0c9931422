from __future__ import annotations

from .blocks import QUADRANT_NAMES, BlockView, quadrant_offsets
from .dense import Matrix
from .dtypes import promote
from .errors import ShapeMismatchError, require


def assemble(m11: Matrix, m12: Matrix, m21: Matrix, m22: Matrix) -> Matrix:
    """Build the 2n x 2n matrix whose quadrants are m11, m12, m21, m22.

    All four parts must be square with the same side n.
    """
    parts = (m11, m12, m21, m22)
    size = m11.rows()
    for name, part in zip(QUADRANT_NAMES, parts):
        if not part.is_square():
            raise ShapeMismatchError("assemble", part.shape, detail=f"quadrant {name} is not square")
        if part.rows() != size:
            raise ShapeMismatchError(
                "assemble",
                m11.shape,
                part.shape,
                symbol="vs",
                detail=f"quadrant {name} differs from quadrant 11",
            )

    out = Matrix(2 * size, 2 * size, dtype=promote(*(p.dtype for p in parts)))
    for (row, col), part in zip(quadrant_offsets(2 * size), parts):
        out.set_block_to_copy(part, size, row, col, 0, 0)
    return out


def split_quadrants(matrix: Matrix) -> tuple[Matrix, Matrix, Matrix, Matrix]:
    """Copy out the 11, 12, 21, 22 quadrants of an even-sized square matrix."""
    require(
        matrix.is_square() and matrix.rows() % 2 == 0,
        f"split_quadrants needs an even-sized square matrix, got {matrix.rows()}x{matrix.cols()}",
    )
    q11, q12, q21, q22 = BlockView(matrix).quadrants()
    return q11.materialize(), q12.materialize(), q21.materialize(), q22.materialize()
