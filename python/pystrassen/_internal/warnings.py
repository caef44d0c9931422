"""PyStrassen warning categories.

These exist so users can filter/suppress PyStrassen warnings without
catching all UserWarning.

Keep this module lightweight and dependency-free to avoid import cycles.
"""


class PyStrassenWarning(UserWarning):
    """Base warning category for all PyStrassen user-facing warnings."""


class PyStrassenOverflowRiskWarning(PyStrassenWarning):
    """Heuristic warnings about possible integer overflow (preflight risk checks)."""


class PyStrassenPerformanceWarning(PyStrassenWarning):
    """Warnings about likely performance pitfalls (e.g., huge pure-Python loops)."""
