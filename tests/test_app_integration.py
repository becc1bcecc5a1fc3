from __future__ import annotations

import io
import json
import random
from pathlib import Path

from uniformcheck.app import UniformityCheckerApp
from uniformcheck.config import load_config
from uniformcheck.generator import RangeConfig, SeededGenerator
from uniformcheck.validation import NO_RESULT_SUMMARY

CONFIG_TEMPLATE = """
[range]
min = 1
max = 20

[validation]
default_sample_size = 400
large_sample_size = 800

[logging]
enabled = true
path = history/run_log.jsonl
retention = 10
""".strip()


def _make_app(tmp_path: Path, content: str = CONFIG_TEMPLATE) -> tuple[UniformityCheckerApp, io.StringIO]:
    config_path = tmp_path / "config.ini"
    config_path.write_text(content, encoding="utf-8")
    stream = io.StringIO()
    return UniformityCheckerApp(load_config(config_path), stream=stream), stream


def test_run_test_uses_configured_sample_size_and_logs(tmp_path: Path) -> None:
    app, stream = _make_app(tmp_path)

    outcome = app.run_test()

    assert outcome.command == "run-test"
    assert outcome.result.sample_size == 400
    assert outcome.result.range_config == RangeConfig(1, 20)
    assert stream.getvalue().startswith("Statistical Test ")
    assert outcome.report_path is None
    assert outcome.log_path == (tmp_path / "history" / "run_log.jsonl").resolve()
    entry = json.loads(outcome.log_path.read_text(encoding="utf-8").strip().splitlines()[-1])
    assert entry["command"] == "run-test"
    assert entry["summary"] == outcome.result.summary_text


def test_run_large_sample_prints_execution_time(tmp_path: Path) -> None:
    app, stream = _make_app(tmp_path)

    outcome = app.run_large_sample()

    assert outcome.result.sample_size == 800
    assert "Execution time:" in stream.getvalue()


def test_seeded_runs_are_reproducible_and_write_reports(tmp_path: Path) -> None:
    app, _ = _make_app(tmp_path)
    report = tmp_path / "reports" / "seeded.md"

    first = app.test_with_seed(12345, 1000, report_path=report)
    second = app.test_with_seed(12345, 1000)

    assert dict(first.result.frequency_table) == dict(second.result.frequency_table)
    assert first.result.summary_text.endswith("(Seeded with 12345)")
    assert first.report_path == report.resolve()
    assert "- **Seed:** 12345" in report.read_text(encoding="utf-8")
    assert app.generator.deterministic_mode is False


def test_verbose_output_includes_frequency_table(tmp_path: Path) -> None:
    app, stream = _make_app(tmp_path)

    app.run_test(verbose=True)

    assert "Value | Frequency | Deviation" in stream.getvalue()


def test_show_last_result_prefers_memory_then_history(tmp_path: Path) -> None:
    app, stream = _make_app(tmp_path)
    assert app.show_last_result() == NO_RESULT_SUMMARY

    outcome = app.run_test()
    assert app.show_last_result() == outcome.result.summary_text

    fresh, _ = _make_app(tmp_path)
    assert fresh.show_last_result() == outcome.result.summary_text


def test_logging_can_be_disabled(tmp_path: Path) -> None:
    app, _ = _make_app(tmp_path, CONFIG_TEMPLATE.replace("enabled = true", "enabled = false"))

    outcome = app.run_test()

    assert outcome.log_path is None
    assert not (tmp_path / "history").exists()


def test_error_result_skips_outputs(tmp_path: Path) -> None:
    app, stream = _make_app(tmp_path)
    app.validator.generator = None

    outcome = app.run_test()

    assert outcome.result.is_error
    assert outcome.log_path is None
    assert stream.getvalue().strip() == "VALIDATION ERROR: generator not available"


def test_generation_surface(tmp_path: Path) -> None:
    app, stream = _make_app(tmp_path)

    value = app.generate(seed=31)

    assert value == app.generate(seed=31)
    assert app.is_correct(value) is True
    assert app.compare_to_target(value) == 0
    assert stream.getvalue().splitlines() == [str(value), str(value)]
    assert 1 <= app.generate() <= 20
    assert app.set_range(30, 3) is False
    assert app.generator.range_config == RangeConfig(1, 20)


def test_preview_sequence_matches_reseeded_draws(tmp_path: Path) -> None:
    app, stream = _make_app(tmp_path)

    values = app.preview_sequence(42, 3)

    assert values == tuple(random.Random(42 + idx).randint(1, 20) for idx in range(3))
    assert stream.getvalue().startswith("Sequence (seed 42, 3 values): [")
    assert app.generator.deterministic_mode is False


def test_debug_info_reports_generator_state() -> None:
    stream = io.StringIO()
    app = UniformityCheckerApp(generator=SeededGenerator(RangeConfig(1, 6)), stream=stream)

    info = app.debug_info()

    assert "Range: 1-6" in info
    assert stream.getvalue().strip() == info


def test_frequency_report_delegates(tmp_path: Path) -> None:
    app, _ = _make_app(tmp_path)
    result = app.validate_distribution(200)

    assert app.frequency_report(result).startswith("Frequency Distribution Report (Sample Size: 200)")
    assert app.validate_with_seed(5, 200).seed == 5
