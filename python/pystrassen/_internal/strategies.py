"""Matrix multiplication strategies.

Three interchangeable algorithms share one contract: given A (m x k) and
B (k x n), return a new C (m x n) with C[i, j] = sum_p A[i, p] * B[p, j].

- textbook: triple loop, any compatible shapes.
- block: 2x2 block-matrix recursion, 8 sub-products per level.
- strassen: Strassen's schedule, 7 sub-products and 18 block
  additions/subtractions per level.

The two recursive strategies only accept square operands of equal
power-of-two side. They recurse on `BlockView`s (offsets into the original
buffers) and fall back to the textbook block product once a block's side is
at or below the configured leaf size.
"""

from __future__ import annotations

import time
import warnings
from typing import Any, Callable

from .assembler import assemble
from .blocks import BlockView, as_view, is_power_of_two
from .dense import Matrix, triple_loop_product
from .dtypes import element_kind, promote
from .errors import ShapeMismatchError, require
from .observability import OpCounters, default_instance
from .runtime import get_settings
from .warnings import PyStrassenOverflowRiskWarning, PyStrassenPerformanceWarning


_STRATEGY_ALIASES: dict[str, str] = {
    "textbook": "textbook",
    "tb": "textbook",
    "block": "block",
    "bb": "block",
    "strassen": "strassen",
    "sb": "strassen",
}


def normalize_strategy(strategy: str) -> str:
    key = str(strategy).strip().lower()
    try:
        return _STRATEGY_ALIASES[key]
    except KeyError:
        raise ValueError(
            f"unknown multiplication strategy {strategy!r}; expected one of "
            f"{', '.join(sorted(_STRATEGY_ALIASES))}"
        ) from None


def _check_operands(op: str, a: Any, b: Any) -> None:
    if not (isinstance(a, Matrix) and isinstance(b, Matrix)):
        raise TypeError(f"{op} expects two Matrix operands")
    if a.cols() != b.rows():
        raise ShapeMismatchError(op, a.shape, b.shape, symbol="@")


def _check_recursive_operands(op: str, a: Matrix, b: Matrix) -> None:
    _check_operands(op, a, b)
    require(
        a.is_square() and b.is_square() and a.rows() == b.rows(),
        f"{op} needs square operands of equal size, got {a.rows()}x{a.cols()} and {b.rows()}x{b.cols()}",
    )
    require(is_power_of_two(a.rows()), f"{op} needs a power-of-two size, got {a.rows()}")


def _max_abs(m: Matrix) -> int:
    return max(abs(int(x)) for x in m._data.tolist())


def _overflow_preflight(op: str, a: Matrix, b: Matrix) -> None:
    if not get_settings().overflow_preflight:
        return
    kind = element_kind(promote(a.dtype, b.dtype))
    if not kind.is_integer:
        return
    bound = a.cols() * _max_abs(a) * _max_abs(b)
    if bound > kind.max_magnitude:
        warnings.warn(
            f"{op} preflight: bound k*max|A|*max|B| = {bound} may overflow {kind.name} output",
            PyStrassenOverflowRiskWarning,
            stacklevel=3,
        )


def textbook_multiply(a: Matrix, b: Matrix) -> Matrix:
    """Direct O(m*n*k) product."""
    started = time.perf_counter()
    _check_operands("textbook_multiply", a, b)
    _overflow_preflight("textbook_multiply", a, b)

    products = a.rows() * a.cols() * b.cols()
    threshold = get_settings().textbook_warn_products
    if products > threshold:
        warnings.warn(
            f"textbook_multiply: {products} scalar products in pure Python exceeds {threshold}",
            PyStrassenPerformanceWarning,
            stacklevel=2,
        )

    out = triple_loop_product(a, 0, 0, b, 0, 0, a.rows(), a.cols(), b.cols())
    default_instance().record(
        "textbook_multiply",
        strategy="textbook",
        operands=[a, b],
        result=out,
        leaf_size=None,
        counters=OpCounters(),
        started=started,
    )
    return out


# --- recursion helpers (all operands are validated BlockViews) ---


def _leaf(a: BlockView, b: BlockView, counters: OpCounters) -> Matrix:
    counters.leaf_products += 1
    return a.source.multiply_blocks(
        b.source, a.size(), a.row_offset, a.col_offset, b.row_offset, b.col_offset
    )


def _add_views(x: BlockView, y: BlockView, counters: OpCounters) -> Matrix:
    counters.additions += 1
    return x.source.add_blocks(y.source, x.size(), x.row_offset, x.col_offset, y.row_offset, y.col_offset)


def _sub_views(x: BlockView, y: BlockView, counters: OpCounters) -> Matrix:
    counters.additions += 1
    return x.source.subtract_blocks(
        y.source, x.size(), x.row_offset, x.col_offset, y.row_offset, y.col_offset
    )


def _add(x: Matrix, y: Matrix, counters: OpCounters) -> Matrix:
    counters.additions += 1
    return x.add(y)


def _sub(x: Matrix, y: Matrix, counters: OpCounters) -> Matrix:
    counters.additions += 1
    return x.subtract(y)


_Recurse = Callable[[BlockView, BlockView, int, OpCounters, int], Matrix]


def _spawn(recurse: _Recurse, leaf_size: int, counters: OpCounters, depth: int) -> Callable[[Any, Any], Matrix]:
    def mul(x: Any, y: Any) -> Matrix:
        counters.recursive_multiplications += 1
        return recurse(as_view(x), as_view(y), leaf_size, counters, depth + 1)

    return mul


def _block_recursive(a: BlockView, b: BlockView, leaf_size: int, counters: OpCounters, depth: int) -> Matrix:
    counters.reached(depth)
    if a.size() <= leaf_size:
        return _leaf(a, b, counters)

    mul = _spawn(_block_recursive, leaf_size, counters, depth)
    a11, a12, a21, a22 = a.quadrants()
    b11, b12, b21, b22 = b.quadrants()

    c11 = _add(mul(a11, b11), mul(a12, b21), counters)
    c12 = _add(mul(a11, b12), mul(a12, b22), counters)
    c21 = _add(mul(a21, b11), mul(a22, b21), counters)
    c22 = _add(mul(a21, b12), mul(a22, b22), counters)
    return assemble(c11, c12, c21, c22)


def _strassen(a: BlockView, b: BlockView, leaf_size: int, counters: OpCounters, depth: int) -> Matrix:
    counters.reached(depth)
    if a.size() <= leaf_size:
        return _leaf(a, b, counters)

    mul = _spawn(_strassen, leaf_size, counters, depth)
    a11, a12, a21, a22 = a.quadrants()
    b11, b12, b21, b22 = b.quadrants()

    m1 = mul(_add_views(a11, a22, counters), _add_views(b11, b22, counters))
    m2 = mul(_add_views(a21, a22, counters), b11)
    m3 = mul(a11, _sub_views(b12, b22, counters))
    m4 = mul(a22, _sub_views(b21, b11, counters))
    m5 = mul(_add_views(a11, a12, counters), b22)
    m6 = mul(_sub_views(a21, a11, counters), _add_views(b11, b12, counters))
    m7 = mul(_sub_views(a12, a22, counters), _add_views(b21, b22, counters))

    c11 = _add(_sub(_add(m1, m4, counters), m5, counters), m7, counters)
    c12 = _add(m3, m5, counters)
    c21 = _add(m2, m4, counters)
    c22 = _add(_add(_sub(m1, m2, counters), m3, counters), m6, counters)
    return assemble(c11, c12, c21, c22)


def _run_recursive(op: str, strategy: str, recurse: _Recurse, a: Matrix, b: Matrix) -> Matrix:
    started = time.perf_counter()
    _check_recursive_operands(op, a, b)
    _overflow_preflight(op, a, b)

    leaf_size = get_settings().leaf_size
    counters = OpCounters()
    out = recurse(BlockView(a), BlockView(b), leaf_size, counters, 0)
    default_instance().record(
        op,
        strategy=strategy,
        operands=[a, b],
        result=out,
        leaf_size=leaf_size,
        counters=counters,
        started=started,
    )
    return out


def block_recursive_multiply(a: Matrix, b: Matrix) -> Matrix:
    """Divide-and-conquer product with the plain 2x2 block formula."""
    return _run_recursive("block_recursive_multiply", "block", _block_recursive, a, b)


def strassen_multiply(a: Matrix, b: Matrix) -> Matrix:
    """Strassen's seven-product divide-and-conquer product."""
    return _run_recursive("strassen_multiply", "strassen", _strassen, a, b)


_DISPATCH: dict[str, Callable[[Matrix, Matrix], Matrix]] = {
    "textbook": textbook_multiply,
    "block": block_recursive_multiply,
    "strassen": strassen_multiply,
}


def multiply(a: Matrix, b: Matrix, *, strategy: str = "textbook") -> Matrix:
    return _DISPATCH[normalize_strategy(strategy)](a, b)
