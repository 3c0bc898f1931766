"""Command-line entry point for the anime series pipeline."""

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from anime_series.config import PipelineSettings, get_settings
from anime_series.exceptions import ConfigurationError
from anime_series.pipeline import (
    PipelineContext,
    clean_artifacts,
    pipeline_status,
    run_pipeline,
)

logger = logging.getLogger(__name__)

STAGE_COMMANDS = {
    "run": None,
    "convert": ("convert",),
    "group": ("group",),
    "split": ("split",),
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="anime-series",
        description="Group anime records into series and split them by relation type",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  anime-series run                      # Convert, group and split
  anime-series -v group                 # Only regroup, with debug logging
  anime-series --base-dir ./work split  # Split using ./work/db/series.json
  anime-series status                   # Show artifacts and record counts
  anime-series clean                    # Remove results/ and db/ artifacts
  anime-series clean --all              # Also remove logs and saved run metrics

Settings can also be provided through ANIME_SERIES_* environment variables or a .env file.
        """,
    )
    parser.add_argument(
        "--base-dir",
        type=Path,
        help="Root directory for data/, results/, db/ and logs/ (default: current directory)",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    verbosity.add_argument(
        "-q", "--quiet", action="store_true", help="Only log warnings and errors"
    )

    subparsers = parser.add_subparsers(dest="command", required=True, metavar="COMMAND")
    subparsers.add_parser("run", help="Run all stages in order")
    subparsers.add_parser("convert", help="Convert CSV files in data/ to JSON")
    subparsers.add_parser("group", help="Group anime records into series")
    subparsers.add_parser("split", help="Split series by relation type")
    subparsers.add_parser("status", help="Show pipeline artifact status")
    clean = subparsers.add_parser(
        "clean",
        help="Delete generated artifacts (results/ and db/ when no option is given)",
    )
    clean.add_argument(
        "-a", "--all", action="store_true", help="Clean results/, db/ and logs/"
    )
    clean.add_argument(
        "-r", "--results", action="store_true", help="Clean generated files in results/"
    )
    clean.add_argument(
        "-d", "--db", action="store_true", help="Clean generated files in db/"
    )
    clean.add_argument(
        "-l", "--logs", action="store_true", help="Clean *.log and metrics files in logs/"
    )
    return parser


def load_settings(base_dir: Path | None) -> PipelineSettings:
    """Resolve settings, anchoring directories at ``base_dir`` when given.

    Raises:
        ConfigurationError: If the environment or .env values are invalid.
    """
    try:
        if base_dir is None:
            return get_settings()
        return PipelineSettings(base_dir=base_dir)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings: {e}") from e


def configure_logging(settings: PipelineSettings, *, verbose: bool, quiet: bool) -> None:
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = getattr(logging, settings.log_level)

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if settings.log_file is not None:
        settings.log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(settings.log_file, encoding="utf-8"))
    logging.basicConfig(
        level=level, format=settings.log_format, handlers=handlers, force=True
    )


def _clean_selection(args: argparse.Namespace) -> dict[str, bool]:
    if args.all:
        return {"results": True, "db": True, "logs": True}
    if not (args.results or args.db or args.logs):
        return {"results": True, "db": True, "logs": False}
    return {"results": args.results, "db": args.db, "logs": args.logs}


def _print_status(settings: PipelineSettings) -> None:
    print(f"Base directory: {settings.base_dir}")
    for status in pipeline_status(settings):
        if not status.exists:
            print(f"  [missing] {status.label}: {status.path}")
            continue
        records = "" if status.records is None else f", {status.records} records"
        print(f"  [ok]      {status.label}: {status.path} ({status.size} bytes{records})")


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, run the selected command and return the exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args.base_dir)
    except ConfigurationError as e:
        parser.error(str(e))

    configure_logging(settings, verbose=args.verbose, quiet=args.quiet)
    logger.debug("Using base directory %s", settings.base_dir)

    if args.command == "status":
        _print_status(settings)
        return 0
    if args.command == "clean":
        removed = clean_artifacts(settings, **_clean_selection(args))
        print(f"Removed {len(removed)} file(s)")
        return 0

    report = run_pipeline(
        PipelineContext(settings=settings),
        STAGE_COMMANDS[args.command],
    )
    if not report.success:
        failed = report.failed_stage
        if failed is not None:
            print(f"Stage {failed.stage} failed: {failed.error}", file=sys.stderr)
        return 1

    for result in report.results:
        details = ", ".join(f"{key}={value}" for key, value in result.counts.items())
        print(f"{result.stage}: {details}")
    print(f"Completed in {report.metrics.total_duration:.2f}s")
    return 0


if __name__ == "__main__":
    sys.exit(main())
