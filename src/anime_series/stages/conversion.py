"""CSV to JSON conversion stage."""

import csv
import json
import logging
from pathlib import Path
from typing import Any

from anime_series.config import PipelineSettings
from anime_series.exceptions import SeriesPipelineError
from anime_series.stages.base import StageResult
from anime_series.stages.io import write_documents

STAGE_NAME = "data-conversion"

logger = logging.getLogger(__name__)


def read_csv_rows(csv_path: Path) -> list[dict[str, Any]]:
    """Read a CSV export into a list of row objects keyed by header."""
    with csv_path.open(encoding="utf-8", newline="") as f:
        return [dict(row) for row in csv.DictReader(f)]


def convert_file(csv_path: Path, results_dir: Path) -> tuple[Path, int]:
    """Convert one CSV file and verify the written JSON parses back.

    Returns:
        Output path and number of converted rows.

    Raises:
        ArtifactWriteError: If the JSON document cannot be written.
        OSError: If the CSV cannot be read.
        csv.Error: If the CSV is malformed.
        json.JSONDecodeError: If the written file does not parse back.
    """
    rows = read_csv_rows(csv_path)
    output_path = results_dir / f"{csv_path.stem}.json"
    write_documents({output_path: rows})
    with output_path.open(encoding="utf-8") as f:
        json.load(f)
    return output_path, len(rows)


def convert_csv_files(
    settings: PipelineSettings, *, log: logging.Logger | None = None
) -> StageResult:
    """Convert every CSV in ``data_dir`` to JSON in ``results_dir``.

    The stage succeeds when at least one file converted; per-file failures are
    logged and counted.
    """
    log = log or logger
    log.info("Starting CSV to JSON conversion")

    csv_files = sorted(settings.data_dir.glob("*.csv")) if settings.data_dir.is_dir() else []
    if not csv_files:
        log.warning("No CSV files found in %s", settings.data_dir)
        return StageResult.failed(STAGE_NAME, "No CSV files found")

    log.info("Found %d CSV files to process", len(csv_files))
    result = StageResult(stage=STAGE_NAME, success=False)
    records = 0
    failed = 0
    for csv_path in csv_files:
        log.info("Processing %s...", csv_path.name)
        try:
            output_path, row_count = convert_file(csv_path, settings.results_dir)
        except (
            SeriesPipelineError,
            OSError,
            UnicodeDecodeError,
            csv.Error,
            json.JSONDecodeError,
        ) as e:
            failed += 1
            log.error("Error converting %s: %s", csv_path.name, e)
            continue
        records += row_count
        result.outputs.append(output_path)
        log.info("Saved %d records to %s", row_count, output_path)

    processed = len(result.outputs)
    result.counts = {
        "files_processed": processed,
        "files_total": len(csv_files),
        "files_failed": failed,
        "records": records,
    }
    log.info(
        "CSV conversion complete: %d/%d files processed successfully",
        processed,
        len(csv_files),
    )
    result.success = processed > 0
    if not result.success:
        result.error = "No CSV files could be converted"
    return result
