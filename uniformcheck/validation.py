"""Statistical validation runs over a :class:`SeededGenerator`."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

from .analysis import DEFAULT_CONFIDENCE_LEVEL, ChiSquareAnalyzer
from .bias import NO_BIAS_REPORT, BiasReport, detect_bias
from .errors import GeneratorUnavailableError
from .generator import RangeConfig, SeededGenerator
from .reporting import summary_line
from .sampling import FrequencyTable, clamp_sample_size, empty_table, sample

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_SIZE = 1000
NO_RESULT_SUMMARY = "No validation performed yet"


@dataclass(frozen=True)
class ValidationResult:
    """Everything measured during a single validation run."""

    sample_size: int
    chi_square_value: float
    p_value: float
    test_passed: bool
    frequency_table: FrequencyTable
    expected_frequency: float
    max_deviation: float
    bias_report: BiasReport
    summary_text: str
    execution_time_ms: float = 0.0
    degrees_of_freedom: int = 0
    confidence_level: float = DEFAULT_CONFIDENCE_LEVEL
    range_config: RangeConfig | None = None
    seed: int | None = None
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_error(self) -> bool:
        return self.summary_text.startswith("VALIDATION ERROR")


def error_result(message: str) -> ValidationResult:
    """Sentinel result returned when a run could not sample at all."""

    return ValidationResult(
        sample_size=0,
        chi_square_value=0.0,
        p_value=0.0,
        test_passed=False,
        frequency_table=empty_table(),
        expected_frequency=0.0,
        max_deviation=0.0,
        bias_report=NO_BIAS_REPORT,
        summary_text=f"VALIDATION ERROR: {message}",
    )


class StatisticalValidator:
    """Sample a generator and judge how uniform its output is."""

    def __init__(
        self,
        generator: SeededGenerator | None,
        *,
        confidence_level: float = DEFAULT_CONFIDENCE_LEVEL,
        default_sample_size: int = DEFAULT_SAMPLE_SIZE,
        performance_monitoring: bool = True,
    ) -> None:
        self.generator = generator
        self.analyzer = ChiSquareAnalyzer(confidence_level)
        self.default_sample_size = default_sample_size
        self.performance_monitoring = performance_monitoring
        self._last_result: ValidationResult | None = None

    @property
    def last_result(self) -> ValidationResult | None:
        return self._last_result

    @property
    def last_summary(self) -> str:
        if self._last_result is None:
            return NO_RESULT_SUMMARY
        return self._last_result.summary_text

    @property
    def last_test_passed(self) -> bool:
        return self._last_result is not None and self._last_result.test_passed

    def validate_distribution(self, sample_size: int | None = None) -> ValidationResult:
        """Draw ``sample_size`` values (default size when omitted) and analyse them."""

        if sample_size is None:
            sample_size = self.default_sample_size
        sample_size = clamp_sample_size(sample_size)

        started_at = datetime.now(timezone.utc)
        start = time.perf_counter()
        try:
            table = sample(sample_size, self.generator)
        except GeneratorUnavailableError as exc:
            logger.error("Cannot perform validation: %s", exc)
            return error_result(str(exc))

        chi = self.analyzer.analyse(table, sample_size)
        bias = detect_bias(table, chi.expected_frequency)

        elapsed_ms = 0.0
        if self.performance_monitoring:
            elapsed_ms = (time.perf_counter() - start) * 1000.0
            logger.info("Validated %d samples in %.2f ms", sample_size, elapsed_ms)

        draft = ValidationResult(
            sample_size=sample_size,
            chi_square_value=chi.chi_square,
            p_value=chi.p_value,
            test_passed=chi.passed,
            frequency_table=table,
            expected_frequency=chi.expected_frequency,
            max_deviation=chi.max_deviation,
            bias_report=bias,
            summary_text="",
            execution_time_ms=elapsed_ms,
            degrees_of_freedom=chi.degrees_of_freedom,
            confidence_level=self.analyzer.confidence_level,
            range_config=self.generator.range_config,
            started_at=started_at,
        )
        result = replace(draft, summary_text=summary_line(draft))
        self._last_result = result
        logger.info("Statistical validation completed: %s", result.summary_text)
        return result

    def validate_with_seed(self, seed: int, sample_size: int) -> ValidationResult:
        """Validate with deterministic draws seeded from ``seed``.

        The generator's previous deterministic-mode setting is restored on every
        exit path.
        """

        generator = self.generator
        if generator is None:
            logger.error("Cannot perform seeded validation: generator not available")
            return error_result("generator not available")

        with generator.deterministic(seed):
            result = self.validate_distribution(sample_size)
        if result.is_error:
            return result
        seeded = replace(result, seed=seed)
        seeded = replace(seeded, summary_text=summary_line(seeded))
        self._last_result = seeded
        return seeded


__all__ = [
    "DEFAULT_SAMPLE_SIZE",
    "NO_RESULT_SUMMARY",
    "StatisticalValidator",
    "ValidationResult",
    "error_result",
]
