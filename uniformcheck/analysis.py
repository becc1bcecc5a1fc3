"""Chi-square goodness-of-fit analysis for uniform frequency tables.

The p-value is not computed from the chi-square CDF.  It is a coarse lookup
that buckets the statistic against critical values:

``df == 99``
    The ``1..100`` range.  ``chi² <= 123.2`` gives ``0.10``, ``chi² <= 135.8``
    gives ``0.03`` and anything above gives ``0.005``.

any other ``df``
    The same three buckets scaled by the degrees of freedom: ``1.2 * df`` and
    ``1.4 * df``.

A run passes when ``p_value > 1 - confidence_level``.  With the default
``confidence_level`` of ``0.95`` this means only the ``0.10`` bucket passes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Tuple

import numpy as np

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE_LEVEL: float = 0.95
MIN_CONFIDENCE_LEVEL: float = 0.8
MAX_CONFIDENCE_LEVEL: float = 0.99

STANDARD_DEGREES_OF_FREEDOM = 99
STANDARD_CRITICAL_VALUES = (123.2, 135.8)
"""Critical values for ``df == 99`` at ``alpha = 0.05`` and ``alpha = 0.01``."""

SCALED_CRITICAL_FACTORS = (1.2, 1.4)

P_VALUE_GOOD = 0.10
P_VALUE_ACCEPTABLE = 0.03
P_VALUE_POOR = 0.005


@dataclass(frozen=True)
class ChiSquareResult:
    """Outcome of the goodness-of-fit test for one frequency table."""

    chi_square: float
    degrees_of_freedom: int
    p_value: float
    alpha: float
    passed: bool
    expected_frequency: float
    max_deviation: float


def expected_frequency(sample_size: int, range_size: int) -> float:
    return sample_size / range_size


def chi_square_statistic(table: Mapping[int, int], expected: float) -> float:
    """Return ``sum((observed - expected)² / expected)`` over every bucket."""

    observed = np.fromiter(table.values(), dtype=float, count=len(table))
    return float((((observed - expected) ** 2) / expected).sum())


def max_deviation(table: Mapping[int, int], expected: float) -> float:
    if not table:
        return 0.0
    observed = np.fromiter(table.values(), dtype=float, count=len(table))
    return float(np.abs(observed - expected).max())


def approximate_p_value(chi_square: float, degrees_of_freedom: int) -> float:
    if degrees_of_freedom == STANDARD_DEGREES_OF_FREEDOM:
        good, acceptable = STANDARD_CRITICAL_VALUES
    else:
        good, acceptable = (factor * degrees_of_freedom for factor in SCALED_CRITICAL_FACTORS)
    if chi_square <= good:
        return P_VALUE_GOOD
    if chi_square <= acceptable:
        return P_VALUE_ACCEPTABLE
    return P_VALUE_POOR


def clamp_confidence_level(level: float) -> Tuple[float, str | None]:
    """Keep ``level`` inside ``[0.8, 0.99]``.

    Returns the clamped level and a warning message when it had to move.
    """

    clamped = max(MIN_CONFIDENCE_LEVEL, min(MAX_CONFIDENCE_LEVEL, float(level)))
    if clamped == level:
        return clamped, None
    return clamped, (
        f"Confidence level {level} outside [{MIN_CONFIDENCE_LEVEL}, "
        f"{MAX_CONFIDENCE_LEVEL}]; clamped to {clamped}."
    )


class ChiSquareAnalyzer:
    """Apply the chi-square test at a configured confidence level."""

    def __init__(self, confidence_level: float = DEFAULT_CONFIDENCE_LEVEL) -> None:
        self.confidence_level, warning = clamp_confidence_level(confidence_level)
        if warning is not None:
            logger.warning(warning)

    @property
    def alpha(self) -> float:
        return 1.0 - self.confidence_level

    def analyse(self, table: Mapping[int, int], sample_size: int) -> ChiSquareResult:
        range_size = len(table)
        expected = expected_frequency(sample_size, range_size)
        chi_square = chi_square_statistic(table, expected)
        dof = range_size - 1
        p_value = approximate_p_value(chi_square, dof)
        passed = p_value > self.alpha
        logger.debug(
            "Chi-square %.3f with %d degrees of freedom -> p=%.3f (alpha %.3f)",
            chi_square,
            dof,
            p_value,
            self.alpha,
        )
        return ChiSquareResult(
            chi_square=chi_square,
            degrees_of_freedom=dof,
            p_value=p_value,
            alpha=self.alpha,
            passed=passed,
            expected_frequency=expected,
            max_deviation=max_deviation(table, expected),
        )


__all__ = [
    "ChiSquareAnalyzer",
    "ChiSquareResult",
    "DEFAULT_CONFIDENCE_LEVEL",
    "approximate_p_value",
    "chi_square_statistic",
    "clamp_confidence_level",
    "expected_frequency",
    "max_deviation",
]
