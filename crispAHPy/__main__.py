"""
Interactive AHP session on the console.

    python -m crispAHPy [--max-depth N] [--cr-threshold X] [--quiet]
"""
from __future__ import annotations
import argparse
import sys
from typing import List, Optional

from .config import ConfigurationContextManager, configure_parameters
from .console import ConsoleSource
from .elicitation import JudgmentSource
from .exceptions import SessionAborted
from .pipeline import Workflow
from .visualization import format_rankings, format_tree, format_weighted_tree


def main(argv: Optional[List[str]] = None, source: Optional[JudgmentSource] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="crispAHPy",
        description="Rank alternatives with the Analytic Hierarchy Process."
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=configure_parameters.MAX_DEPTH,
        help="Levels of the hierarchy including the root (default: %(default)s)"
    )
    parser.add_argument(
        "--cr-threshold",
        type=float,
        default=configure_parameters.CR_THRESHOLD,
        help="Largest accepted consistency ratio (default: %(default)s)"
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Do not print progress messages"
    )
    args = parser.parse_args(argv)
    if args.max_depth < 2:
        print(f"--max-depth must be at least 2 (the root and one level of criteria), got {args.max_depth}.")
        return 1

    source = source or ConsoleSource()
    with ConfigurationContextManager(MAX_DEPTH=args.max_depth, CR_THRESHOLD=args.cr_threshold):
        try:
            result = Workflow(source, verbose=not args.quiet).run()
        except SessionAborted as e:
            print(e)
            return 1
        except EOFError:
            print("Input ended before the session was complete.")
            return 1

    hierarchy = result.hierarchy
    print("\nHierarchy:")
    print(format_tree(hierarchy.root.children))
    print("\nWeights:")
    print(format_weighted_tree(hierarchy))
    print("\nFinalized estimates of the alternatives:")
    print(format_rankings(result.scores.items()))
    return 0


if __name__ == "__main__":
    sys.exit(main())
