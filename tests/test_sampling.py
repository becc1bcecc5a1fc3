"""Tests for :mod:`uniformcheck.sampling`."""

from __future__ import annotations

import itertools
import random

import pytest

from uniformcheck.errors import GeneratorUnavailableError, RangeViolationAnomaly
from uniformcheck.generator import RangeConfig, SeededGenerator
from uniformcheck.sampling import MIN_SAMPLE_SIZE, clamp_sample_size, sample


class _ScriptedGenerator:
    """Replays ``values`` forever over a fixed range."""

    def __init__(self, values: list[int], bounds: RangeConfig) -> None:
        self.range_config = bounds
        self._values = itertools.cycle(values)

    def next(self) -> int:
        return next(self._values)


def test_clamp_sample_size_raises_small_requests(caplog: pytest.LogCaptureFixture) -> None:
    assert clamp_sample_size(50) == MIN_SAMPLE_SIZE
    assert "too small" in caplog.text
    assert clamp_sample_size(100) == 100
    assert clamp_sample_size(2500) == 2500


def test_sample_clamps_to_minimum_draws() -> None:
    generator = SeededGenerator(RangeConfig(1, 10), engine=random.Random(1))

    table = sample(50, generator)

    assert sum(table.values()) == 100


def test_sample_covers_every_value_in_range() -> None:
    generator = _ScriptedGenerator([3], RangeConfig(1, 20))

    table = sample(200, generator)

    assert sorted(table) == list(range(1, 21))
    assert table[3] == 200
    assert all(count == 0 for value, count in table.items() if value != 3)


def test_sample_is_read_only() -> None:
    table = sample(100, SeededGenerator(RangeConfig(1, 5)))

    with pytest.raises(TypeError):
        table[1] = 0  # type: ignore[index]


def test_sample_excludes_and_logs_out_of_range_values(caplog: pytest.LogCaptureFixture) -> None:
    generator = _ScriptedGenerator([1, 2, 3, 4, 11], RangeConfig(1, 4))

    table = sample(100, generator)

    assert sum(table.values()) == 80
    assert set(table) == {1, 2, 3, 4}
    warnings = [record for record in caplog.records if "outside expected range" in record.getMessage()]
    assert len(warnings) == 20


def test_sample_strict_mode_raises_on_anomaly() -> None:
    generator = _ScriptedGenerator([1, 0], RangeConfig(1, 4))

    with pytest.raises(RangeViolationAnomaly) as excinfo:
        sample(100, generator, strict=True)

    assert excinfo.value.value == 0


def test_seeded_generator_never_produces_anomalies() -> None:
    generator = SeededGenerator(RangeConfig(3, 17), engine=random.Random(5))

    table = sample(3000, generator, strict=True)

    assert sum(table.values()) == 3000


def test_sample_without_generator_raises() -> None:
    with pytest.raises(GeneratorUnavailableError):
        sample(100, None)
