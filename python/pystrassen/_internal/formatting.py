from __future__ import annotations

import sys
from typing import Any, TextIO

from .dtypes import element_kind
from .runtime import get_settings


def _edge_indices(length: int, edge_items: int) -> tuple[list[int], list[int], bool]:
    if length <= edge_items * 2:
        return list(range(length)), [], False
    head = list(range(edge_items))
    tail = list(range(length - edge_items, length))
    return head, tail, True


def _format_matrix_row(
    matrix: Any,
    row_index: int,
    col_head: list[int],
    col_tail: list[int],
    truncated: bool,
) -> str:
    kind = element_kind(matrix.dtype)
    entries = [kind.format(matrix.get(row_index, col)) for col in col_head]
    if truncated:
        entries.append("...")
    entries.extend(kind.format(matrix.get(row_index, col)) for col in col_tail)
    return " ".join(entries)


def _body_lines(matrix: Any, edge_items: int, indent: str) -> list[str]:
    rows, cols = matrix.rows(), matrix.cols()
    row_head, row_tail, rows_truncated = _edge_indices(rows, edge_items)
    col_head, col_tail, cols_truncated = _edge_indices(cols, edge_items)

    lines: list[str] = []
    for row_index in row_head:
        lines.append(indent + _format_matrix_row(matrix, row_index, col_head, col_tail, cols_truncated))
    if rows_truncated:
        lines.append(indent + "...")
    for row_index in row_tail:
        lines.append(indent + _format_matrix_row(matrix, row_index, col_head, col_tail, cols_truncated))
    return lines


def matrix_str(self: Any) -> str:
    header = f"{self.__class__.__name__}(shape=({self.rows()}, {self.cols()}), dtype={self.dtype.name})"
    edge_items = get_settings().edge_items
    body = [f" [{line}]" for line in _body_lines(self, edge_items, "")]
    return "\n".join([header, "[", *body, "]"])


def format_matrix(matrix: Any, label: str | None = None, *, show_contents: bool = True) -> str:
    """Human-readable dump: shape line, rows (optionally), and a ---- terminator."""
    shape_line = f"nRows = {matrix.rows()}; nCols = {matrix.cols()}"
    lines = [f"{label}: {shape_line}" if label else shape_line]
    if show_contents:
        lines.extend(_body_lines(matrix, get_settings().edge_items, ""))
    lines.append("----")
    return "\n".join(lines)


def display(
    matrix: Any,
    label: str | None = None,
    *,
    show_contents: bool = True,
    file: TextIO | None = None,
) -> None:
    print(format_matrix(matrix, label, show_contents=show_contents), file=file or sys.stdout)


class MatrixMixin:
    def __str__(self) -> str:
        return matrix_str(self)

    def __repr__(self) -> str:
        shape = getattr(self, "shape", None)
        return f"<{self.__class__.__name__} shape={shape} dtype={self.dtype.name}>"
