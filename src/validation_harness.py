"""
Validation harness: fly labelled reference cases through the integrator and
compare each flight metric with its expectation under a relative tolerance.

Cases share no mutable state, so they run on a thread pool and are merged in
input order once every case has finished. A run can be cancelled between
cases with a ``threading.Event``; cases not started by then are skipped.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from flight_constants import DEFAULT_CONSTANTS, ModelConstants
from flight_errors import FlightModelError, ValidationMismatch
from flight_types import BallProperties, BallState, Environment, require_non_negative
from golf_ball_trajectory import integrate

logger = logging.getLogger(__name__)

METRIC_NAMES = (
    "carry_distance",
    "total_distance",
    "max_height",
    "time_of_flight",
    "spin_rate",
    "launch_angle",
    "launch_direction",
    "ball_speed",
)


@dataclass(frozen=True)
class ExpectedMetrics:
    carry_distance: float     # yd
    total_distance: float     # yd
    max_height: float         # yd
    time_of_flight: float     # s
    spin_rate: float          # rpm
    launch_angle: float       # deg
    launch_direction: float   # deg
    ball_speed: float         # m/s

    def as_dict(self) -> Dict[str, float]:
        return {name: getattr(self, name) for name in METRIC_NAMES}


@dataclass(frozen=True)
class ValidationCase:
    """A labelled reference flight. Names look like ``"Weather - Dry"``; the
    part before the first `` - `` is the category."""

    name: str
    initial_state: BallState
    environment: Environment
    properties: BallProperties
    expected: ExpectedMetrics

    @property
    def category(self) -> str:
        return self.name.split(" - ")[0]


@dataclass(frozen=True)
class MetricComparison:
    expected: Dict[str, float]
    actual: Dict[str, float]
    difference: float  # largest relative difference across metrics


@dataclass(frozen=True)
class ValidationResult:
    test_name: str
    passed: bool
    error: Optional[str] = None
    metrics: Optional[MetricComparison] = None
    mismatches: Tuple[ValidationMismatch, ...] = ()

    @property
    def category(self) -> str:
        return self.test_name.split(" - ")[0]


@dataclass
class CategoryStats:
    total: int = 0
    passed: int = 0

    @property
    def pass_rate(self) -> float:
        return self.passed / self.total if self.total else 0.0


@dataclass(frozen=True)
class ValidationSummary:
    results: Tuple[ValidationResult, ...]
    categories: Dict[str, CategoryStats] = field(default_factory=dict)
    skipped: int = 0
    cancelled: bool = False

    @property
    def total_tests(self) -> int:
        return len(self.results)

    @property
    def passed_tests(self) -> int:
        return sum(1 for r in self.results if r.passed)

    @property
    def failed_tests(self) -> int:
        return self.total_tests - self.passed_tests

    @property
    def pass_rate(self) -> float:
        return self.passed_tests / self.total_tests if self.total_tests else 0.0


def relative_difference(expected: float, actual: float) -> float:
    """|actual - expected| / |expected|; absolute difference when expected is zero."""
    if abs(expected) > 1e-9:
        return abs(actual - expected) / abs(expected)
    return abs(actual - expected)


def compare_metrics(
    name: str,
    expected: ExpectedMetrics,
    actual: Dict[str, float],
    tolerance: float,
) -> ValidationResult:
    wanted = expected.as_dict()
    mismatches = []
    worst = 0.0
    for metric, value in wanted.items():
        diff = relative_difference(value, actual[metric])
        worst = max(worst, diff)
        if diff > tolerance:
            mismatches.append(ValidationMismatch(metric, value, actual[metric], diff, case_name=name))
    return ValidationResult(
        test_name=name,
        passed=not mismatches,
        error="; ".join(str(m) for m in mismatches) or None,
        metrics=MetricComparison(expected=wanted, actual=actual, difference=worst),
        mismatches=tuple(mismatches),
    )


def run_case(
    case: ValidationCase,
    tolerance: float = DEFAULT_CONSTANTS.validation_tolerance,
    dt: Optional[float] = None,
    constants: ModelConstants = DEFAULT_CONSTANTS,
) -> ValidationResult:
    """Validate one case. Model errors fail the case instead of propagating."""
    try:
        _, metrics = integrate(
            case.initial_state, case.environment, case.properties, dt, constants=constants
        )
    except FlightModelError as exc:
        logger.warning("case %r errored: %s", case.name, exc)
        return ValidationResult(test_name=case.name, passed=False, error=f"{type(exc).__name__}: {exc}")
    actual = {name: value for name, value in metrics.as_dict().items() if name in METRIC_NAMES}
    return compare_metrics(case.name, case.expected, actual, tolerance)


def summarize_results(results: Iterable[ValidationResult], skipped: int = 0, cancelled: bool = False) -> ValidationSummary:
    results = tuple(results)
    categories: Dict[str, CategoryStats] = {}
    for result in results:
        stats = categories.setdefault(result.category, CategoryStats())
        stats.total += 1
        if result.passed:
            stats.passed += 1
    return ValidationSummary(results=results, categories=categories, skipped=skipped, cancelled=cancelled)


def run_validation(
    cases: Iterable[ValidationCase],
    tolerance: Optional[float] = None,
    dt: Optional[float] = None,
    max_workers: Optional[int] = None,
    cancel: Optional[threading.Event] = None,
    constants: ModelConstants = DEFAULT_CONSTANTS,
) -> ValidationSummary:
    cases = list(cases)
    tolerance = require_non_negative(
        "tolerance", constants.validation_tolerance if tolerance is None else tolerance
    )

    def _run_or_skip(case: ValidationCase) -> Optional[ValidationResult]:
        if cancel is not None and cancel.is_set():
            return None
        return run_case(case, tolerance, dt, constants)

    if not cases:
        return summarize_results([])
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        outcomes: List[Optional[ValidationResult]] = list(pool.map(_run_or_skip, cases))

    results = [r for r in outcomes if r is not None]
    skipped = len(outcomes) - len(results)
    summary = summarize_results(results, skipped=skipped, cancelled=skipped > 0)
    logger.info(
        "validation: %d/%d passed (%.1f%%), %d skipped",
        summary.passed_tests, summary.total_tests, summary.pass_rate * 100, skipped,
    )
    return summary


def format_report(summary: ValidationSummary) -> str:
    lines = [
        "Validation Suite Results:",
        "------------------------",
        f"Total Tests: {summary.total_tests}",
        f"Passed: {summary.passed_tests}",
        f"Failed: {summary.failed_tests}",
        f"Pass Rate: {summary.pass_rate * 100:.1f}%",
    ]
    if summary.cancelled:
        lines.append(f"Cancelled: {summary.skipped} case(s) skipped")
    lines += ["", "Category Summary:", "----------------"]
    for category, stats in summary.categories.items():
        lines.append(f"{category}: {stats.passed}/{stats.total} ({stats.pass_rate * 100:.1f}%)")
    lines += ["", "Detailed Results:", "----------------"]
    for result in summary.results:
        lines.append(f"{'PASS' if result.passed else 'FAIL'} | {result.test_name}")
        if result.passed:
            continue
        if result.metrics is None:
            lines.append(f"  Error: {result.error}")
            continue
        lines.append(f"  Max Difference: {result.metrics.difference * 100:.1f}%")
        for m in result.mismatches:
            lines.append(f"  {m.metric}: expected {m.expected}, actual {m.actual:.2f}")
    return "\n".join(lines)
