"""Skew detection for frequency tables."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

SIGNIFICANT_BIAS_PERCENT = 20.0
"""Relative deviation above which a distribution is flagged as biased."""


@dataclass(frozen=True)
class BiasReport:
    """Extremes of a frequency table measured against the expected count."""

    has_significant_bias: bool
    most_frequent_value: int
    least_frequent_value: int
    bias_percentage: float
    description: str
    max_frequency: int = 0
    min_frequency: int = 0


def detect_bias(table: Mapping[int, int], expected: float) -> BiasReport:
    """Flag ``table`` when its most extreme bucket strays over 20% from ``expected``.

    Ties resolve to the smallest value reaching the extreme count.
    """

    if not table:
        raise ValueError("Cannot analyse bias of an empty frequency table.")

    ordered = sorted(table.items())
    max_freq = max(count for _, count in ordered)
    min_freq = min(count for _, count in ordered)
    most_frequent = next(value for value, count in ordered if count == max_freq)
    least_frequent = next(value for value, count in ordered if count == min_freq)

    deviation = max(max_freq - expected, expected - min_freq)
    bias_percentage = deviation * 100.0 / expected
    significant = bias_percentage > SIGNIFICANT_BIAS_PERCENT

    if significant:
        description = (
            f"Significant bias detected: {bias_percentage:.1f}% deviation. "
            f"Value {most_frequent} appears {max_freq} times, "
            f"value {least_frequent} appears {min_freq} times "
            f"(expected: {expected:.1f})"
        )
    else:
        description = (
            f"No significant bias detected. Maximum deviation: {bias_percentage:.1f}%"
        )

    return BiasReport(
        has_significant_bias=significant,
        most_frequent_value=most_frequent,
        least_frequent_value=least_frequent,
        bias_percentage=bias_percentage,
        description=description,
        max_frequency=max_freq,
        min_frequency=min_freq,
    )


NO_BIAS_REPORT = BiasReport(
    has_significant_bias=False,
    most_frequent_value=0,
    least_frequent_value=0,
    bias_percentage=0.0,
    description="No frequency data available",
)
"""Placeholder attached to validation results that never sampled."""


__all__ = ["BiasReport", "NO_BIAS_REPORT", "SIGNIFICANT_BIAS_PERCENT", "detect_bias"]
