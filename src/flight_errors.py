"""
Structured errors raised (or, for validation, reported) by the ball flight core.
"""

from typing import Any, Optional


class FlightModelError(Exception):
    """Base class for all ball flight core errors."""


class InvalidInput(FlightModelError, ValueError):
    """A non-physical or non-finite input, rejected before any computation."""

    def __init__(self, field: str, value: Any, reason: str = "invalid value"):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"{field}={value!r}: {reason}")


class NonConvergent(FlightModelError, RuntimeError):
    """Integration ran out of step budget (or diverged) before landing."""

    def __init__(self, steps: int, elapsed: float, reason: str = "no landing within step budget"):
        self.steps = steps
        self.elapsed = elapsed
        self.reason = reason
        super().__init__(f"{reason} after {steps} steps ({elapsed:.2f} s simulated)")


class ValidationMismatch(FlightModelError):
    """A computed metric outside tolerance of its labelled expectation.

    Created by the validation harness and attached to results; never raised
    out of a harness run.
    """

    def __init__(self, metric: str, expected: float, actual: float, difference: float,
                 case_name: Optional[str] = None):
        self.metric = metric
        self.expected = expected
        self.actual = actual
        self.difference = difference
        self.case_name = case_name
        super().__init__(
            f"{metric}: expected {expected}, actual {actual:.3f} "
            f"(difference {difference * 100:.1f}%)"
        )
