"""Configuration parsing utilities for the uniformity checker."""

from __future__ import annotations

import configparser
from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple

from .analysis import DEFAULT_CONFIDENCE_LEVEL, clamp_confidence_level
from .errors import ConfigurationError, MissingFileError
from .generator import DEFAULT_SEED, RangeConfig
from .validation import DEFAULT_SAMPLE_SIZE

DEFAULT_LARGE_SAMPLE_SIZE = 5000
LOG_FORMATS = frozenset({"jsonl", "csv"})


@dataclass(frozen=True)
class ValidationSection:
    """Sample sizes and thresholds used by validation runs."""

    default_sample_size: int = DEFAULT_SAMPLE_SIZE
    large_sample_size: int = DEFAULT_LARGE_SAMPLE_SIZE
    confidence_level: float = DEFAULT_CONFIDENCE_LEVEL
    performance_monitoring: bool = True


@dataclass(frozen=True)
class GeneratorSection:
    """Initial draw strategy of the generator."""

    deterministic_mode: bool = False
    seed: int = DEFAULT_SEED


@dataclass(frozen=True)
class OutputSection:
    """Options controlling where results are written."""

    report_path: Path | None = None
    log_results: bool = True
    run_log_path: Path = Path("logs") / "run_log.jsonl"
    run_log_format: str = "jsonl"
    run_log_retention: int | None = 100


@dataclass(frozen=True)
class UniformCheckConfig:
    """Aggregate configuration container returned by :func:`load_config`."""

    range_config: RangeConfig = field(default_factory=RangeConfig)
    validation: ValidationSection = field(default_factory=ValidationSection)
    generator: GeneratorSection = field(default_factory=GeneratorSection)
    output: OutputSection = field(default_factory=OutputSection)
    warnings: Tuple[str, ...] = field(default_factory=tuple)


def load_config(path: Path | None = None) -> UniformCheckConfig:
    """Load and validate an INI configuration file.

    ``None`` yields the built-in defaults.  Range and confidence problems are
    recovered from and reported in ``warnings``; malformed values raise
    :class:`ConfigurationError`.
    """

    if path is None:
        return UniformCheckConfig()

    parser = configparser.ConfigParser()
    try:
        with path.open("r", encoding="utf-8") as config_file:
            parser.read_file(config_file)
    except FileNotFoundError as exc:
        raise MissingFileError(f"Configuration file not found: {path}") from exc
    except OSError as exc:  # pragma: no cover - filesystem guard
        raise MissingFileError(f"Could not read configuration file: {path}") from exc
    except configparser.Error as exc:
        raise ConfigurationError(f"Configuration is not valid INI: {exc}") from exc

    warnings: list[str] = []
    range_config = _parse_range(parser, warnings)
    validation = _parse_validation(parser, warnings)
    generator = _parse_generator(parser)
    output = _parse_output(parser, path)

    return UniformCheckConfig(
        range_config=range_config,
        validation=validation,
        generator=generator,
        output=output,
        warnings=tuple(warnings),
    )


def _get_int(section: configparser.SectionProxy, key: str, default: int) -> int:
    if key not in section:
        return default
    try:
        return section.getint(key)
    except ValueError as exc:
        raise ConfigurationError(
            f"Option '{key}' in [{section.name}] must be an integer value."
        ) from exc


def _get_bool(section: configparser.SectionProxy, key: str, default: bool) -> bool:
    if key not in section:
        return default
    try:
        return section.getboolean(key)
    except ValueError as exc:
        raise ConfigurationError(
            f"Option '{key}' in [{section.name}] must be a boolean value."
        ) from exc


def _parse_range(parser: configparser.ConfigParser, warnings: list[str]) -> RangeConfig:
    default = RangeConfig()
    if not parser.has_section("range"):
        return default
    section = parser["range"]
    minimum = _get_int(section, "min", default.minimum)
    maximum = _get_int(section, "max", default.maximum)
    try:
        range_config = RangeConfig.validated(minimum, maximum)
    except ConfigurationError as exc:
        warnings.append(f"{exc} Using default range {default}.")
        return default
    if range_config.minimum != minimum:
        warnings.append(f"Minimum value {minimum} is less than 1; adjusted to 1.")
    return range_config


def _parse_validation(
    parser: configparser.ConfigParser, warnings: list[str]
) -> ValidationSection:
    default = ValidationSection()
    if not parser.has_section("validation"):
        return default
    section = parser["validation"]

    default_size = _get_int(section, "default_sample_size", default.default_sample_size)
    large_size = _get_int(section, "large_sample_size", default.large_sample_size)
    monitoring = _get_bool(section, "performance_monitoring", default.performance_monitoring)

    confidence = default.confidence_level
    if "confidence_level" in section:
        raw = section["confidence_level"].strip()
        try:
            confidence = float(raw)
        except ValueError as exc:
            raise ConfigurationError(
                "Option 'confidence_level' in [validation] must be numeric."
            ) from exc
        confidence, warning = clamp_confidence_level(confidence)
        if warning is not None:
            warnings.append(warning)

    return ValidationSection(
        default_sample_size=default_size,
        large_sample_size=large_size,
        confidence_level=confidence,
        performance_monitoring=monitoring,
    )


def _parse_generator(parser: configparser.ConfigParser) -> GeneratorSection:
    default = GeneratorSection()
    if not parser.has_section("generator"):
        return default
    section = parser["generator"]
    return GeneratorSection(
        deterministic_mode=_get_bool(section, "deterministic_mode", default.deterministic_mode),
        seed=_get_int(section, "seed", default.seed),
    )


def _parse_output(parser: configparser.ConfigParser, config_path: Path) -> OutputSection:
    base_dir = config_path.resolve().parent
    log_results = True
    report_path: Path | None = None
    log_path = (base_dir / "logs" / "run_log.jsonl").resolve()
    log_format = "jsonl"
    log_retention: int | None = 100

    def _resolve(raw: str) -> Path:
        candidate = Path(raw).expanduser()
        if not candidate.is_absolute():
            candidate = base_dir / candidate
        return candidate.resolve()

    def _apply_logging_overrides(
        section: configparser.SectionProxy, *, allow_enable: bool = False
    ) -> None:
        nonlocal log_results, log_path, log_format, log_retention
        if allow_enable:
            log_results = _get_bool(section, "enabled", log_results)
        log_results = _get_bool(section, "log_results", log_results)
        for key in ("log_path", "path"):
            if key in section:
                raw_path = section[key].strip()
                if raw_path:
                    log_path = _resolve(raw_path)
                break
        for key in ("log_format", "format"):
            if key in section:
                raw_format = section[key].strip().lower()
                if raw_format not in LOG_FORMATS:
                    raise ConfigurationError(
                        f"Option '{key}' in [{section.name}] must be either 'jsonl' or 'csv'."
                    )
                log_format = raw_format
                break
        for key in ("log_retention", "retention"):
            if key in section:
                raw_retention = section[key].strip()
                if raw_retention:
                    try:
                        parsed = int(raw_retention)
                    except ValueError as exc:
                        raise ConfigurationError(
                            f"Option '{key}' in [{section.name}] must be an integer value."
                        ) from exc
                    log_retention = parsed if parsed > 0 else None
                break

    if parser.has_section("output"):
        section = parser["output"]
        if "report_path" in section:
            raw_report = section["report_path"].strip()
            if raw_report:
                report_path = _resolve(raw_report)
        _apply_logging_overrides(section)

    if parser.has_section("logging"):
        _apply_logging_overrides(parser["logging"], allow_enable=True)

    return OutputSection(
        report_path=report_path,
        log_results=log_results,
        run_log_path=log_path,
        run_log_format=log_format,
        run_log_retention=log_retention,
    )


__all__ = [
    "GeneratorSection",
    "OutputSection",
    "UniformCheckConfig",
    "ValidationSection",
    "load_config",
]
