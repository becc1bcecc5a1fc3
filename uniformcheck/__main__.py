"""Command line entry point for the uniformity checker."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .app import UniformityCheckerApp
from .errors import ConfigurationError, MissingFileError
from .generator import DEFAULT_SEED
from .validation import DEFAULT_SAMPLE_SIZE

EXIT_SUCCESS = 0
EXIT_MISSING_FILE = 2
EXIT_INVALID_CONFIG = 3
EXIT_TEST_FAILURE = 4
EXIT_UNEXPECTED_ERROR = 1

VALIDATION_COMMANDS = {"run-test", "run-large-sample", "test-with-seed"}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="uniformcheck",
        description="Validate the uniformity of a bounded random integer generator.",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        help="Path to the INI configuration file (defaults are used when omitted).",
    )
    parser.add_argument(
        "--report",
        "-r",
        type=Path,
        help="Optional path where a markdown report will be written.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Print the bias analysis and per-value frequency table.",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Diagnostic logging level (default: WARNING).",
    )

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("run-test", help="Validate with the default sample size.")

    large = commands.add_parser("run-large-sample", help="Validate with a large sample.")
    large.add_argument("sample_size", nargs="?", type=int, help="Number of samples (default 5000).")

    seeded = commands.add_parser("test-with-seed", help="Validate with deterministic draws.")
    seeded.add_argument("seed", nargs="?", type=int, default=DEFAULT_SEED)
    seeded.add_argument("sample_size", nargs="?", type=int, default=DEFAULT_SAMPLE_SIZE)

    commands.add_parser("show-last-result", help="Show the most recent validation summary.")

    generate = commands.add_parser("generate", help="Draw a single value.")
    generate.add_argument("--seed", type=int, help="Draw from a one-off seeded engine.")

    preview = commands.add_parser(
        "preview-sequence", help="Show the deterministic sequence for a seed."
    )
    preview.add_argument("--seed", type=int, help="Base seed (default: configured seed).")
    preview.add_argument("--length", type=int, default=10)

    commands.add_parser("debug-info", help="Show generator state.")
    return parser


def _dispatch(app: UniformityCheckerApp, args: argparse.Namespace) -> int:
    command = args.command
    if command in VALIDATION_COMMANDS:
        if command == "run-test":
            outcome = app.run_test(verbose=args.verbose, report_path=args.report)
        elif command == "run-large-sample":
            outcome = app.run_large_sample(
                args.sample_size, verbose=args.verbose, report_path=args.report
            )
        else:
            outcome = app.test_with_seed(
                args.seed, args.sample_size, verbose=args.verbose, report_path=args.report
            )
        return EXIT_SUCCESS if outcome.result.test_passed else EXIT_TEST_FAILURE

    if command == "show-last-result":
        app.show_last_result()
    elif command == "generate":
        app.generate(args.seed)
    elif command == "preview-sequence":
        app.preview_sequence(args.seed, args.length)
    elif command == "debug-info":
        app.debug_info()
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        app = UniformityCheckerApp.from_config_path(args.config)
        return _dispatch(app, args)
    except MissingFileError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_MISSING_FILE
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return EXIT_INVALID_CONFIG
    except Exception as exc:  # pragma: no cover
        print(f"Unexpected error: {exc}", file=sys.stderr)
        return EXIT_UNEXPECTED_ERROR


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
