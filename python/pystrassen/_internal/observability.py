from __future__ import annotations

import time
from dataclasses import asdict, dataclass
from typing import Any, List, Tuple


@dataclass
class OperandSnapshot:
    shape: Tuple[int, int] | None
    dtype: str | None
    estimated_bytes: int | None


@dataclass
class OpCounters:
    """Work done by one strategy call; threaded through the recursion."""

    recursive_multiplications: int = 0
    leaf_products: int = 0
    additions: int = 0
    max_depth: int = 0

    def reached(self, depth: int) -> None:
        if depth > self.max_depth:
            self.max_depth = depth


@dataclass
class OpRecord:
    op: str
    strategy: str
    trace_tag: str
    operands: List[OperandSnapshot]
    result_shape: Tuple[int, int] | None
    dtype: str | None
    leaf_size: int | None
    recursive_multiplications: int
    leaf_products: int
    additions: int
    max_depth: int
    elapsed_s: float
    timestamp: float


def _shape(obj: Any) -> Tuple[int, int] | None:
    try:
        return int(obj.rows()), int(obj.cols())
    except AttributeError:
        pass
    shape_attr = getattr(obj, "shape", None)
    if isinstance(shape_attr, tuple) and len(shape_attr) == 2:
        return int(shape_attr[0]), int(shape_attr[1])
    return None


def _dtype_label(obj: Any) -> str | None:
    dtype_attr = getattr(obj, "dtype", None)
    if dtype_attr is None:
        return None
    return str(getattr(dtype_attr, "name", dtype_attr))


def _estimate_bytes(obj: Any) -> int | None:
    shp = _shape(obj)
    itemsize = getattr(getattr(obj, "dtype", None), "itemsize", None)
    if shp is None or itemsize is None:
        return None
    return int(shp[0] * shp[1] * int(itemsize))


def snapshot(obj: Any) -> OperandSnapshot:
    return OperandSnapshot(shape=_shape(obj), dtype=_dtype_label(obj), estimated_bytes=_estimate_bytes(obj))


class OpObservability:
    """Keeps the most recent record per op name (and overall)."""

    def __init__(self) -> None:
        self._counter = 0
        self._last: dict[str, dict[str, Any]] = {}

    def clear(self) -> None:
        self._last.clear()

    def _record(self, record: OpRecord) -> dict[str, Any]:
        payload = asdict(record)
        self._last["__latest__"] = payload
        self._last[record.op] = payload
        return payload

    def record(
        self,
        op: str,
        *,
        strategy: str,
        operands: List[Any],
        result: Any,
        leaf_size: int | None,
        counters: OpCounters,
        started: float,
    ) -> dict[str, Any]:
        self._counter += 1
        return self._record(
            OpRecord(
                op=op,
                strategy=strategy,
                trace_tag=f"{op}:{self._counter}",
                operands=[snapshot(obj) for obj in operands],
                result_shape=_shape(result),
                dtype=_dtype_label(result),
                leaf_size=leaf_size,
                recursive_multiplications=counters.recursive_multiplications,
                leaf_products=counters.leaf_products,
                additions=counters.additions,
                max_depth=counters.max_depth,
                elapsed_s=time.perf_counter() - started,
                timestamp=time.time(),
            )
        )

    def last(self, op: str | None = None) -> dict[str, Any] | None:
        key = op or "__latest__"
        payload = self._last.get(key)
        if payload is None:
            return None
        return dict(payload)


# Module-level singleton helpers (optional convenience)
_default_observability = OpObservability()


def default_instance() -> OpObservability:
    return _default_observability
