"""Bulk sampling of a generator into a frequency table."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Mapping, Protocol

import numpy as np

from .errors import GeneratorUnavailableError, RangeViolationAnomaly
from .generator import RangeConfig

logger = logging.getLogger(__name__)

MIN_SAMPLE_SIZE = 100
"""Smallest sample size considered reliable for the chi-square analysis."""

FrequencyTable = Mapping[int, int]


class SupportsDraw(Protocol):
    """Minimal generator surface needed by :func:`sample`."""

    @property
    def range_config(self) -> RangeConfig: ...

    def next(self) -> int: ...


def clamp_sample_size(sample_size: int) -> int:
    """Raise ``sample_size`` to :data:`MIN_SAMPLE_SIZE` when it is smaller."""

    if sample_size < MIN_SAMPLE_SIZE:
        logger.warning(
            "Sample size %d is too small for reliable statistical analysis. Using minimum of %d.",
            sample_size,
            MIN_SAMPLE_SIZE,
        )
        return MIN_SAMPLE_SIZE
    return sample_size


def sample(
    sample_size: int,
    generator: SupportsDraw | None,
    *,
    strict: bool = False,
) -> FrequencyTable:
    """Draw ``sample_size`` values from ``generator`` and count them per value.

    Every value of the generator's range is present in the returned table, even
    with a zero count.  Draws outside the range are logged and left out of the
    table; with ``strict=True`` the first one raises
    :class:`RangeViolationAnomaly` instead.
    """

    if generator is None:
        raise GeneratorUnavailableError("generator not available")

    sample_size = clamp_sample_size(sample_size)
    bounds = generator.range_config
    draws = np.fromiter(
        (generator.next() for _ in range(sample_size)),
        dtype=np.int64,
        count=sample_size,
    )

    in_range = (draws >= bounds.minimum) & (draws <= bounds.maximum)
    anomalies = draws[~in_range]
    if anomalies.size:
        if strict:
            raise RangeViolationAnomaly(int(anomalies[0]), bounds.minimum, bounds.maximum)
        for value in anomalies:
            logger.warning(
                "Generated value %d outside expected range %s", int(value), bounds
            )

    counts = np.bincount(draws[in_range] - bounds.minimum, minlength=bounds.size)
    table = {value: int(count) for value, count in zip(bounds.values(), counts)}
    return MappingProxyType(table)


def empty_table() -> FrequencyTable:
    return MappingProxyType({})


__all__ = [
    "FrequencyTable",
    "MIN_SAMPLE_SIZE",
    "SupportsDraw",
    "clamp_sample_size",
    "empty_table",
    "sample",
]
