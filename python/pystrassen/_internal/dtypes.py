from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any

import numpy as np


SUPPORTED_DTYPES: tuple[str, ...] = (
    "int8",
    "int16",
    "int32",
    "int64",
    "uint8",
    "uint16",
    "uint32",
    "uint64",
    "float16",
    "float32",
    "float64",
)

_ALIASES: dict[str, str] = {
    "i8": "int8",
    "i16": "int16",
    "i32": "int32",
    "int": "int32",
    "i64": "int64",
    "u8": "uint8",
    "u16": "uint16",
    "u32": "uint32",
    "uint": "uint32",
    "u64": "uint64",
    "f16": "float16",
    "half": "float16",
    "f32": "float32",
    "single": "float32",
    "float": "float64",
    "f64": "float64",
    "double": "float64",
}


def normalize_dtype(dtype: Any) -> np.dtype | None:
    """Normalize user-provided dtype tokens into a supported `numpy.dtype`.

    Returns None when `dtype` is None or names something we do not support
    (bool, complex, object, strings that are not dtype names).

    Accepted inputs include:
    - Case-insensitive strings: "int16", "INT16", "f32", "double", ...
    - Python builtins: int (-> int32), float (-> float64)
    - NumPy dtypes/scalars: np.int16, np.dtype("int16"), np.float32, ...
    """

    if dtype is None:
        return None

    if dtype is int:
        return np.dtype("int32")
    if dtype is float:
        return np.dtype("float64")
    if dtype is bool:
        return None

    if isinstance(dtype, str):
        s = dtype.strip().lower()
        s = _ALIASES.get(s, s)
        if s in SUPPORTED_DTYPES:
            return np.dtype(s)
        return None

    try:
        np_dtype = np.dtype(dtype)
    except TypeError:
        return None

    if np_dtype.name in SUPPORTED_DTYPES:
        return np_dtype
    return None


def resolve_dtype(dtype: Any, *, default: Any) -> np.dtype:
    """Like `normalize_dtype`, but falls back to `default` and rejects unknowns."""
    if dtype is None:
        dtype = default
    out = normalize_dtype(dtype)
    if out is None:
        raise TypeError(
            f"unsupported dtype {dtype!r}; expected one of {', '.join(SUPPORTED_DTYPES)}"
        )
    return out


def promote(*dtypes: np.dtype) -> np.dtype:
    """Result dtype for a binary (or n-ary) operation over the given dtypes."""
    out = np.result_type(*dtypes)
    if out.name not in SUPPORTED_DTYPES:
        raise TypeError(f"cannot combine dtypes {[d.name for d in dtypes]}")
    return out


@dataclass(frozen=True)
class ElementKind:
    """Per-dtype capabilities used by the container and its collaborators."""

    dtype: np.dtype

    @property
    def name(self) -> str:
        return self.dtype.name

    @property
    def is_integer(self) -> bool:
        return self.dtype.kind in ("i", "u")

    @property
    def zero(self) -> Any:
        return self.dtype.type(0)

    @property
    def one(self) -> Any:
        return self.dtype.type(1)

    @property
    def max_magnitude(self) -> int | float:
        if self.is_integer:
            return int(np.iinfo(self.dtype).max)
        return float(np.finfo(self.dtype).max)

    def abs_diff(self, a: np.ndarray, b: np.ndarray) -> np.ndarray:
        """Elementwise |a - b| computed wide enough that it cannot wrap."""
        if self.is_integer:
            return np.array(
                [abs(int(x) - int(y)) for x, y in zip(a.tolist(), b.tolist())],
                dtype=object,
            )
        return np.abs(a.astype(np.float64) - b.astype(np.float64))

    def sample(self, generator: np.random.Generator, lower: Any, upper: Any, count: int) -> np.ndarray:
        """Draw `count` values uniformly from the inclusive range [lower, upper]."""
        if self.is_integer:
            return generator.integers(int(lower), int(upper), size=count, endpoint=True, dtype=self.dtype)
        # uniform() is half-open; widen by one ulp and clip so `upper` is reachable.
        high = np.nextafter(float(upper), np.inf)
        values = generator.uniform(float(lower), high, size=count)
        return np.clip(values, float(lower), float(upper)).astype(self.dtype)

    def format(self, value: Any) -> str:
        if self.is_integer:
            return str(int(value))
        return f"{float(value):g}"


@lru_cache(maxsize=None)
def element_kind(dtype: np.dtype) -> ElementKind:
    return ElementKind(np.dtype(dtype))
