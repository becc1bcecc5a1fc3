"""Utilities for persisting validation runs to structured history files."""

from __future__ import annotations

import csv
import json
from dataclasses import dataclass
from datetime import timezone
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - import cycle safe typing
    from .validation import ValidationResult


LOG_FIELDNAMES = (
    "timestamp",
    "command",
    "seed",
    "sample_size",
    "result",
    "chi_square",
    "p_value",
    "bias_detected",
    "summary",
    "report_path",
)
"""Ordered field names used for CSV and JSON payloads."""

DEFAULT_LOG_PATH = Path("logs") / "run_log.jsonl"
"""Default location for the run history log."""


@dataclass(frozen=True)
class RunLogRecord:
    """Structured representation of a logged validation run."""

    timestamp: str
    command: str
    seed: int | None
    sample_size: int
    result: str
    chi_square: float
    p_value: float
    bias_detected: bool
    summary: str
    report_path: str

    @classmethod
    def from_validation_result(
        cls,
        result: "ValidationResult",
        *,
        command: str,
        report_path: Path | None = None,
    ) -> "RunLogRecord":
        """Create a log record from a :class:`~uniformcheck.validation.ValidationResult`."""

        return cls(
            timestamp=result.started_at.astimezone(timezone.utc).isoformat(),
            command=command,
            seed=result.seed,
            sample_size=result.sample_size,
            result="PASSED" if result.test_passed else "FAILED",
            chi_square=float(result.chi_square_value),
            p_value=float(result.p_value),
            bias_detected=result.bias_report.has_significant_bias,
            summary=result.summary_text,
            report_path=str(report_path) if report_path is not None else "",
        )

    @classmethod
    def from_dict(cls, payload: dict) -> "RunLogRecord":
        """Rebuild a record from a JSON object or CSV row."""

        seed = payload.get("seed")
        bias = payload.get("bias_detected")
        if isinstance(bias, str):
            bias = bias.strip().lower() == "true"
        return cls(
            timestamp=str(payload.get("timestamp", "")),
            command=str(payload.get("command", "")),
            seed=int(seed) if seed not in (None, "") else None,
            sample_size=int(payload.get("sample_size", 0)),
            result=str(payload.get("result", "")),
            chi_square=float(payload.get("chi_square", 0.0)),
            p_value=float(payload.get("p_value", 0.0)),
            bias_detected=bool(bias),
            summary=str(payload.get("summary", "")),
            report_path=str(payload.get("report_path", "")),
        )

    def to_dict(self) -> dict[str, str | int | float | bool | None]:
        """Serialise the record to a mapping compatible with JSON/CSV writers."""

        return {
            "timestamp": self.timestamp,
            "command": self.command,
            "seed": self.seed,
            "sample_size": self.sample_size,
            "result": self.result,
            "chi_square": self.chi_square,
            "p_value": self.p_value,
            "bias_detected": self.bias_detected,
            "summary": self.summary,
            "report_path": self.report_path,
        }


def log_validation_result(
    result: "ValidationResult",
    *,
    command: str,
    report_path: Path | None = None,
    log_path: Path | None = None,
    fmt: str = "jsonl",
    retention: int | None = 100,
) -> Path:
    """Append ``result`` to the run history and enforce retention limits."""

    record = RunLogRecord.from_validation_result(
        result, command=command, report_path=report_path
    )
    target = _prepare_log_path(log_path)
    normalised_format = _normalise_format(fmt)
    _append_record(target, record, normalised_format)
    if retention is not None and retention > 0:
        trim_log(target, retention, fmt=normalised_format)
    return target


def read_last_record(path: Path | None = None, *, fmt: str = "jsonl") -> RunLogRecord | None:
    """Return the newest record in the history at ``path``, if any."""

    target = Path(path).expanduser() if path is not None else DEFAULT_LOG_PATH
    if not target.exists():
        return None
    normalised_format = _normalise_format(fmt)
    with target.open("r", encoding="utf-8", newline="") as handle:
        if normalised_format == "jsonl":
            lines = [line for line in handle.read().splitlines() if line.strip()]
            if not lines:
                return None
            return RunLogRecord.from_dict(json.loads(lines[-1]))
        rows = list(csv.DictReader(handle))
    if not rows:
        return None
    return RunLogRecord.from_dict(rows[-1])


def trim_log(path: Path, max_entries: int, *, fmt: str = "jsonl") -> None:
    """Trim ``path`` so only the last ``max_entries`` records remain."""

    if max_entries <= 0:
        return
    if not path.exists():
        return
    if fmt == "jsonl":
        _trim_jsonl(path, max_entries)
    elif fmt == "csv":
        _trim_csv(path, max_entries)
    else:
        raise ValueError(f"Unsupported log format: {fmt}")


def _normalise_format(fmt: str) -> str:
    normalised = fmt.lower()
    if normalised not in {"jsonl", "csv"}:
        raise ValueError(f"Unsupported log format: {fmt}")
    return normalised


def _prepare_log_path(path: Path | None) -> Path:
    candidate = Path(path).expanduser() if path is not None else DEFAULT_LOG_PATH
    resolved = candidate.resolve()
    resolved.parent.mkdir(parents=True, exist_ok=True)
    return resolved


def _append_record(path: Path, record: RunLogRecord, fmt: str) -> None:
    if fmt == "jsonl":
        payload = json.dumps(record.to_dict(), ensure_ascii=False)
        with path.open("a", encoding="utf-8") as handle:
            handle.write(payload + "\n")
    else:
        is_new_file = not path.exists() or path.stat().st_size == 0
        with path.open("a", encoding="utf-8", newline="") as handle:
            writer = csv.DictWriter(handle, fieldnames=LOG_FIELDNAMES)
            if is_new_file:
                writer.writeheader()
            writer.writerow(record.to_dict())


def _trim_jsonl(path: Path, max_entries: int) -> None:
    with path.open("r", encoding="utf-8") as handle:
        lines = handle.readlines()
    if len(lines) <= max_entries:
        return
    with path.open("w", encoding="utf-8") as handle:
        handle.writelines(lines[-max_entries:])


def _trim_csv(path: Path, max_entries: int) -> None:
    with path.open("r", encoding="utf-8", newline="") as handle:
        rows = list(csv.reader(handle))
    if not rows:
        return
    header, *data_rows = rows
    if len(data_rows) <= max_entries:
        return
    with path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.writer(handle)
        writer.writerow(header)
        writer.writerows(data_rows[-max_entries:])


__all__ = [
    "LOG_FIELDNAMES",
    "RunLogRecord",
    "log_validation_result",
    "read_last_record",
    "trim_log",
]
