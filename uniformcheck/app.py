"""Application orchestration for the uniformity checker CLI."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO, Tuple

from .config import UniformCheckConfig, load_config
from .generator import DEFAULT_SEED, SeededGenerator
from .reporting import frequency_report, print_console_summary, write_markdown_report
from .runlog import log_validation_result, read_last_record
from .validation import (
    DEFAULT_SAMPLE_SIZE,
    NO_RESULT_SUMMARY,
    StatisticalValidator,
    ValidationResult,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandOutcome:
    """What a validation command produced and where it was written."""

    command: str
    result: ValidationResult
    report_path: Path | None = None
    log_path: Path | None = None


class UniformityCheckerApp:
    """High level service wiring configuration, generation, validation and output."""

    def __init__(
        self,
        config: UniformCheckConfig | None = None,
        *,
        generator: SeededGenerator | None = None,
        stream: TextIO | None = None,
    ) -> None:
        self.config = config or UniformCheckConfig()
        for warning in self.config.warnings:
            logger.warning("Configuration: %s", warning)
        self.generator = generator or SeededGenerator(
            self.config.range_config,
            deterministic_mode=self.config.generator.deterministic_mode,
            seed=self.config.generator.seed,
        )
        validation = self.config.validation
        self.validator = StatisticalValidator(
            self.generator,
            confidence_level=validation.confidence_level,
            default_sample_size=validation.default_sample_size,
            performance_monitoring=validation.performance_monitoring,
        )
        self._stream = stream

    @classmethod
    def from_config_path(cls, path: Path | None, **kwargs) -> "UniformityCheckerApp":
        return cls(load_config(path), **kwargs)

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    # ------------------------------------------------------------------
    # Generation surface used by a host
    # ------------------------------------------------------------------
    def set_range(self, minimum: int, maximum: int) -> bool:
        return self.generator.set_range(minimum, maximum)

    def generate_next(self) -> int:
        return self.generator.next()

    def generate_with_seed(self, seed: int) -> int:
        return self.generator.generate_with_seed(seed)

    def is_correct(self, guess: int) -> bool:
        return self.generator.is_correct(guess)

    def compare_to_target(self, guess: int) -> int:
        return self.generator.compare_to_target(guess)

    # ------------------------------------------------------------------
    # Validation surface
    # ------------------------------------------------------------------
    def validate_distribution(self, sample_size: int | None = None) -> ValidationResult:
        return self.validator.validate_distribution(sample_size)

    def validate_with_seed(self, seed: int, sample_size: int) -> ValidationResult:
        return self.validator.validate_with_seed(seed, sample_size)

    def frequency_report(self, result: ValidationResult) -> str:
        return frequency_report(result)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def run_test(self, *, verbose: bool = False, report_path: Path | None = None) -> CommandOutcome:
        """Validate with the configured default sample size."""

        result = self.validator.validate_distribution()
        return self._finish("run-test", result, verbose=verbose, report_path=report_path)

    def run_large_sample(
        self,
        sample_size: int | None = None,
        *,
        verbose: bool = False,
        report_path: Path | None = None,
    ) -> CommandOutcome:
        """Validate with a large sample and report how long it took."""

        size = sample_size if sample_size is not None else self.config.validation.large_sample_size
        result = self.validator.validate_distribution(size)
        outcome = self._finish("run-large-sample", result, verbose=verbose, report_path=report_path)
        if not verbose:
            print(f"Execution time: {result.execution_time_ms:.2f}ms", file=self.stream)
        return outcome

    def test_with_seed(
        self,
        seed: int = DEFAULT_SEED,
        sample_size: int = DEFAULT_SAMPLE_SIZE,
        *,
        verbose: bool = False,
        report_path: Path | None = None,
    ) -> CommandOutcome:
        """Validate with deterministic draws seeded from ``seed``."""

        result = self.validator.validate_with_seed(seed, sample_size)
        return self._finish("test-with-seed", result, verbose=verbose, report_path=report_path)

    def show_last_result(self) -> str:
        """Print the newest result, from memory or from the run history."""

        summary = self._last_summary()
        print(summary, file=self.stream)
        return summary

    def generate(self, seed: int | None = None) -> int:
        value = self.generate_next() if seed is None else self.generate_with_seed(seed)
        print(value, file=self.stream)
        return value

    def preview_sequence(self, seed: int | None = None, length: int = 10) -> Tuple[int, ...]:
        """Print the first ``length`` deterministic values for ``seed``."""

        base_seed = seed if seed is not None else self.generator.deterministic_seed
        with self.generator.deterministic(base_seed):
            values = self.generator.preview_sequence(length)
        print(
            f"Sequence (seed {base_seed}, {length} values): "
            f"[{', '.join(str(value) for value in values)}]",
            file=self.stream,
        )
        return values

    def debug_info(self) -> str:
        info = self.generator.debug_info()
        print(info, file=self.stream)
        return info

    # ------------------------------------------------------------------
    # Output helpers
    # ------------------------------------------------------------------
    def _finish(
        self,
        command: str,
        result: ValidationResult,
        *,
        verbose: bool,
        report_path: Path | None,
    ) -> CommandOutcome:
        print_console_summary(result, verbose=verbose, stream=self.stream)
        if result.is_error:
            return CommandOutcome(command=command, result=result)

        output = self.config.output
        target = report_path if report_path is not None else output.report_path
        written: Path | None = None
        if target is not None:
            written = write_markdown_report(result, target)
            logger.info("Report written to %s", written)

        log_path: Path | None = None
        if output.log_results:
            log_path = log_validation_result(
                result,
                command=command,
                report_path=written,
                log_path=output.run_log_path,
                fmt=output.run_log_format,
                retention=output.run_log_retention,
            )
        return CommandOutcome(command=command, result=result, report_path=written, log_path=log_path)

    def _last_summary(self) -> str:
        if self.validator.last_result is not None:
            return self.validator.last_summary
        output = self.config.output
        record = read_last_record(output.run_log_path, fmt=output.run_log_format)
        if record is None:
            return NO_RESULT_SUMMARY
        return record.summary


__all__ = ["CommandOutcome", "UniformityCheckerApp"]
