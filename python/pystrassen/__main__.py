"""Demo: multiply two random matrices for each supported demo dtype.

Run:
  - `python -m pystrassen` (A is 3x5, B is 5x4)
  - `python -m pystrassen 4 4 4 --strategy strassen`

Exit code:
  - 0: OK
  - 1: The chosen strategy rejected the shapes
  - 2: Bad command line
"""

from __future__ import annotations

import argparse
import sys
from typing import Sequence

from ._internal.dense import Matrix
from ._internal.errors import PreconditionError
from ._internal.formatting import display
from ._internal.sampling import ElementStream
from ._internal.strategies import multiply, normalize_strategy

DEMO_DTYPES = ("int32", "float64")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m pystrassen",
        description="Multiply a random AR x AC matrix by a random AC x BC matrix.",
    )
    parser.add_argument(
        "sizes",
        nargs="*",
        type=int,
        metavar="N",
        help="Either nothing or exactly three sizes: AR AC BC (default: 3 5 4)",
    )
    parser.add_argument(
        "--strategy",
        default="textbook",
        help="textbook (tb), block (bb) or strassen (sb); default: textbook",
    )
    parser.add_argument("--seed", type=int, default=0, help="Element stream seed (default: 0)")
    parser.add_argument("--lower", type=int, default=-8, help="Lower bound for entries (default: -8)")
    parser.add_argument("--upper", type=int, default=None, help="Upper bound for entries (default: -lower)")
    parser.add_argument(
        "--discard",
        type=int,
        default=100,
        help="Values discarded from the stream before each matrix (default: 100)",
    )
    parser.add_argument("--quiet", action="store_true", help="Only print shapes, not contents.")
    return parser


def _run_dtype(dtype: str, sizes: tuple[int, int, int], args: argparse.Namespace) -> None:
    ar, ac, bc = sizes
    upper = -args.lower if args.upper is None else args.upper
    stream = ElementStream(args.seed)
    show = not args.quiet

    a = Matrix(ar, ac, dtype=dtype)
    stream.fill(a, args.lower, upper, discard=args.discard)
    display(a, f"A[{dtype}]", show_contents=show)

    b = Matrix(ac, bc, dtype=dtype)
    stream.fill(b, args.lower, upper, discard=args.discard)
    display(b, f"B[{dtype}]", show_contents=show)

    c = multiply(a, b, strategy=args.strategy)
    display(c, f"C[{dtype}]", show_contents=show)


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if len(args.sizes) not in (0, 3):
        parser.error("expected either no sizes or exactly three: AR AC BC")
    sizes = tuple(args.sizes) if args.sizes else (3, 5, 4)
    try:
        normalize_strategy(args.strategy)
    except ValueError as exc:
        parser.error(str(exc))
    if args.discard < 0:
        parser.error("--discard must be >= 0")

    for dtype in DEMO_DTYPES:
        try:
            _run_dtype(dtype, sizes, args)
        except (PreconditionError, ValueError) as exc:
            print(f"ERROR: multiply failed for {dtype}: {exc}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
