from __future__ import annotations

from typing import Any

import numpy as np

from .dense import Matrix
from .dtypes import element_kind, resolve_dtype
from .runtime import get_settings


def _check_range(lower: Any, upper: Any) -> None:
    if lower > upper:
        raise ValueError(f"lower bound {lower!r} exceeds upper bound {upper!r}")


class ElementStream:
    """Seeded source of matrix entries.

    The stream is explicit state owned by the caller: every value drawn or
    discarded advances it, so filling two matrices from one stream gives them
    different contents while the whole sequence stays reproducible from the
    seed.
    """

    def __init__(self, seed: int | None = 0):
        self._seed = seed
        self._generator = np.random.default_rng(seed)
        self._draws = 0

    @property
    def seed(self) -> int | None:
        return self._seed

    @property
    def draws(self) -> int:
        """Number of values consumed so far (drawn or discarded)."""
        return self._draws

    def _take(self, lower: Any, upper: Any, dtype: Any, count: int) -> np.ndarray:
        _check_range(lower, upper)
        kind = element_kind(resolve_dtype(dtype, default=get_settings().default_dtype))
        values = kind.sample(self._generator, lower, upper, count)
        self._draws += count
        return values

    def discard(self, count: int, *, lower: Any = 0, upper: Any = 1, dtype: Any = None) -> None:
        if count < 0:
            raise ValueError(f"discard count must be >= 0, got {count}")
        if count:
            self._take(lower, upper, dtype, count)

    def draw(self, lower: Any, upper: Any, dtype: Any = None) -> Any:
        return self._take(lower, upper, dtype, 1)[0]

    def fill(self, matrix: Matrix, lower: Any, upper: Any, *, discard: int = 0) -> None:
        """Discard `discard` values, then set every cell in row-major order."""
        self.discard(discard, lower=lower, upper=upper, dtype=matrix.dtype)
        values = self._take(lower, upper, matrix.dtype, matrix.rows() * matrix.cols())
        cols = matrix.cols()
        for index, value in enumerate(values):
            matrix.set(index // cols, index % cols, value)


def random_matrix(
    rows: int,
    cols: int | None = None,
    *,
    dtype: Any = None,
    lower: Any = -8,
    upper: Any = 8,
    seed: int | None = 0,
    discard: int = 0,
    stream: ElementStream | None = None,
) -> Matrix:
    """New matrix filled from `stream` (or a fresh stream seeded with `seed`)."""
    out = Matrix(rows, cols, dtype=dtype)
    if stream is None:
        stream = ElementStream(seed)
    stream.fill(out, lower, upper, discard=discard)
    return out
