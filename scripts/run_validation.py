"""
Run the reference validation cases through the trajectory integrator and print
a pass/fail report. Exits non-zero when any case fails.
"""

import argparse
import logging
import os
import sys

# Allow running from repo root without installation.
REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
SRC_ROOT = os.path.join(REPO_ROOT, "src")
if SRC_ROOT not in sys.path:
    sys.path.insert(0, SRC_ROOT)

from flight_constants import DEFAULT_CONSTANTS
from validation_cases import canonical_cases
from validation_harness import format_report, run_validation


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--tolerance", type=float, default=DEFAULT_CONSTANTS.validation_tolerance,
                        help="Relative tolerance per metric (default: %(default)s).")
    parser.add_argument("--dt", type=float, default=DEFAULT_CONSTANTS.default_dt,
                        help="Integration time step in seconds (default: %(default)s).")
    parser.add_argument("--workers", type=int, default=None,
                        help="Thread pool size (default: executor default).")
    parser.add_argument("--category", action="append", default=None,
                        help="Only run this category (Weather, Club). Repeatable.")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(levelname)s %(name)s: %(message)s")
    cases = canonical_cases()
    if args.category:
        wanted = {c.lower() for c in args.category}
        cases = [c for c in cases if c.category.lower() in wanted]
    summary = run_validation(cases, tolerance=args.tolerance, dt=args.dt, max_workers=args.workers)
    print(format_report(summary))
    return 1 if summary.failed_tests else 0


if __name__ == "__main__":
    raise SystemExit(main())
