"""Reporting utilities for console and markdown output."""

from __future__ import annotations

import sys
import textwrap
from dataclasses import dataclass
from pathlib import Path
from string import Template
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from .validation import ValidationResult


NO_FREQUENCY_DATA = "No frequency data available"


@dataclass(frozen=True)
class ReportTemplate:
    """Container for the markdown report template."""

    template: Template = Template(
        textwrap.dedent(
            """
            # Uniformity Validation Report

            ## Summary
            ${summary}

            ## Configuration
            ${configuration}

            ## Chi-Square Test
            ${chi_square}

            ## Bias Analysis
            ${bias}

            ## Frequency Distribution
            ${frequency_table}

            _Generated on ${timestamp} (duration: ${duration})._
            """
        ).strip()
    )


DEFAULT_TEMPLATE = ReportTemplate()


def summary_line(result: "ValidationResult") -> str:
    """Return the one-line verdict for ``result``."""

    status = "PASSED" if result.test_passed else "FAILED"
    bias_status = "BIAS DETECTED" if result.bias_report.has_significant_bias else "NO BIAS"
    line = (
        f"Statistical Test {status} | "
        f"Samples: {result.sample_size} | "
        f"Chi²: {result.chi_square_value:.2f} | "
        f"p-value: {result.p_value:.3f} | "
        f"Max deviation: {result.max_deviation:.1f} | "
        f"{bias_status}"
    )
    if result.seed is not None:
        line += f" (Seeded with {result.seed})"
    return line


def frequency_report(result: "ValidationResult") -> str:
    """Render the per-value frequency table sorted by value."""

    if not result.frequency_table:
        return NO_FREQUENCY_DATA
    lines = [
        f"Frequency Distribution Report (Sample Size: {result.sample_size})",
        f"Expected frequency per value: {result.expected_frequency:.1f}",
        "Value | Frequency | Deviation",
    ]
    for value, count in sorted(result.frequency_table.items()):
        deviation = count - result.expected_frequency
        lines.append(f"{value:>5} | {count:>9} | {deviation:>+9.1f}")
    return "\n".join(lines)


def print_console_summary(
    result: "ValidationResult", *, verbose: bool = False, stream: TextIO | None = None
) -> None:
    """Print a short summary of ``result`` to ``stream``."""

    output = stream if stream is not None else sys.stdout
    print(result.summary_text, file=output)
    if not verbose:
        return

    print(result.bias_report.description, file=output)
    print(f"Execution time: {result.execution_time_ms:.2f}ms", file=output)
    print(frequency_report(result), file=output)


def build_markdown_report(result: "ValidationResult", *, template: Template | None = None) -> str:
    """Generate a markdown report for ``result`` using ``template``."""

    template = template or DEFAULT_TEMPLATE.template
    return template.substitute(
        summary=_format_summary_section(result),
        configuration=_format_configuration(result),
        chi_square=_format_chi_square(result),
        bias=_format_bias(result),
        frequency_table=_format_frequency_table(result),
        timestamp=result.started_at.isoformat(),
        duration=_format_duration(result.execution_time_ms),
    )


def write_markdown_report(
    result: "ValidationResult",
    path: Path | None = None,
    *,
    template: Template | None = None,
) -> Path:
    """Render and persist a markdown report for ``result``."""

    target = _resolve_report_path(result, path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(build_markdown_report(result, template=template), encoding="utf-8")
    return target


# ---------------------------------------------------------------------------
# Helper formatting utilities
# ---------------------------------------------------------------------------

def _format_summary_section(result: "ValidationResult") -> str:
    verdict = "PASSED" if result.test_passed else "FAILED"
    lines = [
        f"- **Result:** {verdict}",
        f"- **Samples:** {result.sample_size}",
        f"- **Verdict line:** {result.summary_text}",
    ]
    if result.seed is not None:
        lines.append(f"- **Seed:** {result.seed}")
    return "\n".join(lines)


def _format_configuration(result: "ValidationResult") -> str:
    range_text = str(result.range_config) if result.range_config is not None else "unknown"
    return "\n".join(
        [
            f"- **Range:** {range_text}",
            f"- **Confidence level:** {result.confidence_level * 100:.1f}%",
        ]
    )


def _format_chi_square(result: "ValidationResult") -> str:
    return "\n".join(
        [
            f"- **Chi-square statistic:** {result.chi_square_value:.3f}",
            f"- **Degrees of freedom:** {result.degrees_of_freedom}",
            f"- **Approximate p-value:** {result.p_value:.3f}",
            f"- **Expected frequency:** {result.expected_frequency:.2f}",
            f"- **Max deviation:** {result.max_deviation:.2f}",
        ]
    )


def _format_bias(result: "ValidationResult") -> str:
    bias = result.bias_report
    flag = "yes" if bias.has_significant_bias else "no"
    return "\n".join(
        [
            f"- **Significant bias:** {flag}",
            f"- **Bias percentage:** {bias.bias_percentage:.1f}%",
            f"- {bias.description}",
        ]
    )


def _format_frequency_table(result: "ValidationResult") -> str:
    header = "| Value | Frequency | Deviation |"
    separator = "| --- | --- | --- |"
    rows = [
        f"| {value} | {count} | {count - result.expected_frequency:+.1f} |"
        for value, count in sorted(result.frequency_table.items())
    ]
    if not rows:
        rows.append("| _(no samples)_ | - | - |")
    return "\n".join([header, separator, *rows])


def _format_duration(execution_time_ms: float) -> str:
    if execution_time_ms < 1000:
        return f"{execution_time_ms:.0f} ms"
    return f"{execution_time_ms / 1000:.2f} s"


def _resolve_report_path(result: "ValidationResult", path: Path | None) -> Path:
    if path is not None:
        return Path(path).expanduser().resolve()
    timestamp = result.started_at.strftime("%Y%m%d-%H%M%S")
    stem = "uniformity" if result.seed is None else f"uniformity-seed{result.seed}"
    return (Path("reports") / f"{stem}-{timestamp}.md").resolve()


__all__ = [
    "NO_FREQUENCY_DATA",
    "ReportTemplate",
    "build_markdown_report",
    "frequency_report",
    "print_console_summary",
    "summary_line",
    "write_markdown_report",
]
