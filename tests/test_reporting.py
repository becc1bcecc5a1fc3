"""Tests for :mod:`uniformcheck.reporting`."""

from __future__ import annotations

import io
from datetime import datetime, timezone
from pathlib import Path
from types import MappingProxyType

import pytest

from uniformcheck.bias import NO_BIAS_REPORT, detect_bias
from uniformcheck.generator import RangeConfig
from uniformcheck.reporting import (
    NO_FREQUENCY_DATA,
    build_markdown_report,
    frequency_report,
    print_console_summary,
    summary_line,
    write_markdown_report,
)
from uniformcheck.validation import ValidationResult, error_result


def _make_result(*, seed: int | None = None, execution_time_ms: float = 12.3) -> ValidationResult:
    table = MappingProxyType({1: 30, 2: 25, 3: 20, 4: 25})
    return ValidationResult(
        sample_size=100,
        chi_square_value=2.0,
        p_value=0.10,
        test_passed=True,
        frequency_table=table,
        expected_frequency=25.0,
        max_deviation=5.0,
        bias_report=detect_bias(table, 25.0),
        summary_text="Statistical Test PASSED | Samples: 100",
        execution_time_ms=execution_time_ms,
        degrees_of_freedom=3,
        confidence_level=0.95,
        range_config=RangeConfig(1, 4),
        seed=seed,
        started_at=datetime(2023, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
    )


def test_summary_line_format() -> None:
    result = _make_result()

    assert summary_line(result) == (
        "Statistical Test PASSED | Samples: 100 | Chi²: 2.00 | p-value: 0.100 | "
        "Max deviation: 5.0 | NO BIAS"
    )


def test_summary_line_mentions_seed() -> None:
    assert summary_line(_make_result(seed=12345)).endswith("NO BIAS (Seeded with 12345)")


def test_frequency_report_lists_values_in_order() -> None:
    report = frequency_report(_make_result())
    lines = report.splitlines()

    assert lines[0] == "Frequency Distribution Report (Sample Size: 100)"
    assert lines[1] == "Expected frequency per value: 25.0"
    assert lines[2] == "Value | Frequency | Deviation"
    assert [int(line.split("|")[0]) for line in lines[3:]] == [1, 2, 3, 4]
    assert "+5.0" in lines[3]
    assert "-5.0" in lines[5]


def test_frequency_report_without_data() -> None:
    assert frequency_report(error_result("generator not available")) == NO_FREQUENCY_DATA


def test_console_summary_verbose_includes_details() -> None:
    stream = io.StringIO()

    print_console_summary(_make_result(), verbose=True, stream=stream)

    output = stream.getvalue()
    assert output.startswith("Statistical Test PASSED")
    assert "No significant bias detected" in output
    assert "Execution time: 12.30ms" in output
    assert "Value | Frequency | Deviation" in output


def test_console_summary_terse_prints_one_line() -> None:
    stream = io.StringIO()

    print_console_summary(_make_result(), stream=stream)

    assert stream.getvalue() == "Statistical Test PASSED | Samples: 100\n"


def test_markdown_report_sections() -> None:
    report = build_markdown_report(_make_result(seed=5))

    assert report.startswith("# Uniformity Validation Report")
    assert "- **Result:** PASSED" in report
    assert "- **Seed:** 5" in report
    assert "- **Range:** 1-4" in report
    assert "- **Confidence level:** 95.0%" in report
    assert "- **Degrees of freedom:** 3" in report
    assert "| 1 | 30 | +5.0 |" in report
    assert "| 3 | 20 | -5.0 |" in report
    assert "(duration: 12 ms)" in report
    assert "2023-01-02T03:04:05+00:00" in report


def test_markdown_report_duration_in_seconds() -> None:
    report = build_markdown_report(_make_result(execution_time_ms=2500.0))

    assert "(duration: 2.50 s)" in report


def test_markdown_report_for_empty_table() -> None:
    report = build_markdown_report(error_result("boom"))

    assert "| _(no samples)_ | - | - |" in report
    assert NO_BIAS_REPORT.description in report


def test_write_markdown_report_default_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)

    path = write_markdown_report(_make_result())

    assert path == (tmp_path / "reports" / "uniformity-20230102-030405.md").resolve()
    assert path.read_text(encoding="utf-8").startswith("# Uniformity Validation Report")


def test_write_markdown_report_seeded_default_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)

    path = write_markdown_report(_make_result(seed=77))

    assert path.name == "uniformity-seed77-20230102-030405.md"


def test_write_markdown_report_explicit_path(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "report.md"

    path = write_markdown_report(_make_result(), target)

    assert path == target.resolve()
    assert path.exists()
