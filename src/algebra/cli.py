"""
Command-line demo for algebra.

Usage:
    python -m algebra [options]

Fills a matrix with random values, transposes it, adds a random
integer to every element of the transpose and prints the result.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

import numpy as np

from .matrix import AlgebraError, Matrix, set_lock_granularity

logger = logging.getLogger("algebra.cli")


def run_demo(
    rows: int = 2,
    cols: int = 3,
    seed: Optional[int] = None,
) -> Matrix:
    """
    Build the demo matrix.

    Args:
        rows: Rows of the random matrix (the result has ``cols`` rows)
        cols: Columns of the random matrix
        seed: Seed for ``numpy.random.default_rng``; None draws fresh entropy

    Returns:
        Transposed matrix with a random integer in [0, 100) added
    """
    rng = np.random.default_rng(seed)

    m = Matrix(rows, cols)
    m.each(lambda i, j, v: rng.random())

    t = m.T
    n = float(rng.integers(0, 100))
    logger.debug("Adding %.0f to %dx%d transpose", n, t.rows, t.cols)
    t.addn(n)
    return t


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="algebra",
        description="Random matrix transpose demo",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # 2x3 random matrix, transposed, shifted and printed
  python -m algebra

  # Reproducible 4x4 run
  python -m algebra --rows 4 --cols 4 --seed 7
""",
    )

    parser.add_argument(
        "--rows", "-r",
        type=int,
        default=2,
        help="Rows of the random matrix (default: 2)",
    )
    parser.add_argument(
        "--cols", "-c",
        type=int,
        default=3,
        help="Columns of the random matrix (default: 3)",
    )
    parser.add_argument(
        "--seed", "-s",
        type=int,
        default=None,
        help="Random seed",
    )
    parser.add_argument(
        "--granularity", "-g",
        choices=["element", "operation"],
        default=None,
        help="Lock granularity for compound operations",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output",
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s: %(message)s",
        )

    if args.granularity is not None:
        set_lock_granularity(args.granularity)

    try:
        t = run_demo(args.rows, args.cols, args.seed)
    except AlgebraError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(t)
    return 0
