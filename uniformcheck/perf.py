"""Performance helpers for benchmarking and profiling validation runs."""

from __future__ import annotations

import cProfile
import io
import pstats
import statistics
import timeit
from contextlib import contextmanager
from typing import Callable, Iterator, Mapping

from .analysis import ChiSquareAnalyzer
from .generator import SeededGenerator
from .sampling import sample
from .validation import StatisticalValidator


def benchmark_sampling(
    sample_size: int = 5000,
    *,
    generator: SeededGenerator | None = None,
    repeat: int = 5,
) -> Mapping[str, float]:
    """Benchmark :func:`uniformcheck.sampling.sample` for ``sample_size`` draws."""

    target = generator or SeededGenerator()
    timer = timeit.Timer(lambda: sample(sample_size, target))
    return _summarise(timer.repeat(repeat=repeat, number=1))


def benchmark_analysis(
    table: Mapping[int, int],
    sample_size: int,
    *,
    repeat: int = 5,
) -> Mapping[str, float]:
    """Benchmark the chi-square analysis of an existing frequency table."""

    analyzer = ChiSquareAnalyzer()
    timer = timeit.Timer(lambda: analyzer.analyse(table, sample_size))
    return _summarise(timer.repeat(repeat=repeat, number=1))


def profile_validation(sample_size: int = 5000, *, repeat: int = 1, limit: int = 25) -> str:
    """Profile end-to-end validation runs using :mod:`cProfile`."""

    validator = StatisticalValidator(SeededGenerator())
    profiler = cProfile.Profile()
    for _ in range(repeat):
        profiler.runcall(validator.validate_distribution, sample_size)
    return _format_stats(profiler, limit)


@contextmanager
def capture_profile(
    validator: StatisticalValidator | None = None,
) -> Iterator[tuple[StatisticalValidator, Callable[[int], str]]]:
    """Context manager capturing profiling data for manual inspection.

    The yielded tuple contains the :class:`StatisticalValidator` to use for the
    profiled operations and a callable that returns a formatted profile
    summary when invoked.
    """

    profiler = cProfile.Profile()
    target = validator or StatisticalValidator(SeededGenerator())
    profiler.enable()

    def exporter(limit: int = 25) -> str:
        profiler.disable()
        return _format_stats(profiler, limit)

    try:
        yield target, exporter
    finally:
        profiler.disable()


def _summarise(runs: list[float]) -> Mapping[str, float]:
    return {
        "min": min(runs),
        "max": max(runs),
        "mean": statistics.fmean(runs),
    }


def _format_stats(profiler: cProfile.Profile, limit: int) -> str:
    stream = io.StringIO()
    stats = pstats.Stats(profiler, stream=stream)
    stats.strip_dirs().sort_stats("cumulative").print_stats(limit)
    return stream.getvalue()


__all__ = [
    "benchmark_analysis",
    "benchmark_sampling",
    "capture_profile",
    "profile_validation",
]
