"""Dense matrices with textbook, block-recursive and Strassen multiplication."""
from __future__ import annotations

from ._version import version as __version__

from typing import Any

from ._internal import runtime as _runtime_mod
from ._internal import observability as _observability
from ._internal import strategies as _strategies
from ._internal.assembler import assemble, split_quadrants
from ._internal.blocks import BlockDescriptor, BlockView, is_power_of_two
from ._internal.dense import Matrix
from ._internal.dtypes import (
    SUPPORTED_DTYPES,
    ElementKind,
    element_kind as _element_kind,
    normalize_dtype as _normalize_dtype,
)
from ._internal.errors import PreconditionError, PyStrassenError, ShapeMismatchError
from ._internal.formatting import display, format_matrix
from ._internal.runtime import (
    Settings,
    get_settings,
    temporary_leaf_size,
    temporary_settings,
)
from ._internal.sampling import ElementStream, random_matrix
from ._internal.warnings import (
    PyStrassenWarning,
    PyStrassenOverflowRiskWarning,
    PyStrassenPerformanceWarning,
)

# Public dtype tokens (NumPy-like). These are simple sentinels accepted by
# Matrix and the factories below.
int8 = "int8"
int16 = "int16"
int32 = "int32"
int64 = "int64"
int_ = "int32"
uint8 = "uint8"
uint16 = "uint16"
uint32 = "uint32"
uint64 = "uint64"
uint = "uint32"
float16 = "float16"
float32 = "float32"
float64 = "float64"
float_ = "float64"


def configure(**overrides: Any) -> Settings:
    """Override runtime settings (leaf_size, edge_items, default_dtype, ...)."""
    return _runtime_mod.default_runtime().configure(**overrides)


def reset_settings() -> None:
    """Drop overrides; settings are re-read from the environment on next use."""
    _runtime_mod.default_runtime().reset()


def matrix(data: Any, *, dtype: Any = None) -> Matrix:
    """Build a Matrix from a rectangular nested sequence or 2D NumPy array."""
    return Matrix.from_rows(data, dtype=dtype)


def zeros(rows: int, cols: int | None = None, *, dtype: Any = None) -> Matrix:
    return Matrix(rows, cols, dtype=dtype)


def identity(n: int, *, dtype: Any = None) -> Matrix:
    out = Matrix(n, n, dtype=dtype)
    out.set_to_identity()
    return out


def element_kind(dtype: Any) -> ElementKind:
    dt = _normalize_dtype(dtype)
    if dt is None:
        raise TypeError(f"unsupported dtype {dtype!r}")
    return _element_kind(dt)


def multiply(a: Matrix, b: Matrix, *, strategy: str = "textbook") -> Matrix:
    """Matrix product using the named strategy ("textbook", "block" or "strassen")."""
    return _strategies.multiply(a, b, strategy=strategy)


textbook_multiply = _strategies.textbook_multiply
block_recursive_multiply = _strategies.block_recursive_multiply
strassen_multiply = _strategies.strassen_multiply


def last_op_record(op: str | None = None) -> dict[str, Any] | None:
    """Most recent observability record (optionally for a given op name)."""
    return _observability.default_instance().last(op)


def clear_op_records() -> None:
    _observability.default_instance().clear()


__all__ = [
    "BlockDescriptor",
    "BlockView",
    "ElementKind",
    "ElementStream",
    "Matrix",
    "PreconditionError",
    "PyStrassenError",
    "PyStrassenOverflowRiskWarning",
    "PyStrassenPerformanceWarning",
    "PyStrassenWarning",
    "SUPPORTED_DTYPES",
    "Settings",
    "ShapeMismatchError",
    "assemble",
    "block_recursive_multiply",
    "clear_op_records",
    "configure",
    "display",
    "element_kind",
    "format_matrix",
    "get_settings",
    "identity",
    "is_power_of_two",
    "last_op_record",
    "matrix",
    "multiply",
    "random_matrix",
    "reset_settings",
    "split_quadrants",
    "strassen_multiply",
    "temporary_leaf_size",
    "temporary_settings",
    "textbook_multiply",
    "zeros",
]
