from __future__ import annotations

from collections.abc import Sequence as _SequenceABC
from typing import Any

import numpy as np

from .errors import require


def is_sequence_like(value: Any) -> bool:
    return isinstance(value, _SequenceABC) and not isinstance(value, (str, bytes, bytearray))


def coerce_sequence_rows(candidate: Any) -> list[list[Any]]:
    if not is_sequence_like(candidate):
        raise TypeError(
            "Matrix data must be provided as a rectangular nested sequence or a 2D NumPy array."
        )
    rows = []
    for row in candidate:
        if not is_sequence_like(row):
            raise TypeError("Each matrix row must be a sequence of entries.")
        rows.append(list(row))
    require(len(rows) > 0, "Matrix data must have at least one row.")
    cols = len(rows[0])
    require(cols > 0, "Matrix data must have at least one column.")
    for row in rows:
        if len(row) != cols:
            raise ValueError(
                "Matrix data must describe a rectangular matrix (every row the same length)."
            )
    return rows


def coerce_rows(candidate: Any) -> np.ndarray:
    """Return a 2D array holding `candidate`'s entries.

    Accepts anything exposing `to_numpy()` (e.g. another Matrix), a 2D NumPy
    array, or a rectangular nested sequence of numbers.
    """

    to_numpy = getattr(candidate, "to_numpy", None)
    if callable(to_numpy):
        return np.asarray(to_numpy())

    if isinstance(candidate, np.ndarray):
        if candidate.ndim != 2:
            raise ValueError(f"Matrix input must be 2D, got {candidate.ndim}D.")
        require(candidate.shape[0] > 0 and candidate.shape[1] > 0, "Matrix data must not be empty.")
        return candidate

    rows = coerce_sequence_rows(candidate)
    array = np.asarray(rows)
    if array.dtype.kind not in ("i", "u", "f"):
        raise TypeError(f"Matrix entries must be real numbers, got dtype {array.dtype}")
    return array
