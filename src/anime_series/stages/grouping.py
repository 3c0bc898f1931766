"""Series grouping stage: anime records in, series and edge-case documents out."""

import json
import logging
from pathlib import Path
from typing import Any

from anime_series.config import PipelineSettings
from anime_series.core import RelationNormalizer, SeriesGrouper
from anime_series.core.grouper import GroupingResult
from anime_series.exceptions import SeriesPipelineError, StageError
from anime_series.models.anime import AnimeRecord
from anime_series.stages.base import StageResult
from anime_series.stages.io import load_json, write_documents

STAGE_NAME = "series-grouping"
SUMMARY_SIZE = 5

logger = logging.getLogger(__name__)


def load_anime_records(
    path: Path, normalizer: RelationNormalizer, description: str = "Anime data file"
) -> list[AnimeRecord]:
    """Load and normalize the converted anime records.

    Raises:
        MissingArtifactError: If the file does not exist.
        StageError: If the document is not a JSON array.
    """
    document = load_json(path, description)
    if not isinstance(document, list):
        raise StageError(STAGE_NAME, f"{path} must contain a JSON array of anime records")
    return normalizer.normalize_records(document)


def build_grouping_documents(
    settings: PipelineSettings, result: GroupingResult
) -> dict[Path, Any]:
    """Render every grouping output keyed by destination."""
    series_document = {"series": [group.to_document() for group in result.series]}
    return {
        settings.series_output_path: series_document,
        settings.edge_cases_path: result.edge_cases.to_document(),
        settings.updated_anime_path: result.updated_records(),
        settings.series_db_path: series_document,
    }


def log_grouping_summary(result: GroupingResult, log: logging.Logger) -> None:
    counts = result.edge_cases.counts()
    log.info("Total series groups: %d", len(result.series))
    log.info("Anime in multiple series: %d", counts["animeInMultipleSeries"])
    log.info("Orphaned anime: %d", counts["orphanedAnime"])
    log.info("Circular relations: %d", counts["circularRelations"])

    largest = sorted(result.series, key=lambda group: len(group.anime_ids), reverse=True)
    for group in largest[:SUMMARY_SIZE]:
        log.info(
            "  %s (%s): %d anime",
            group.series_name,
            group.series_id,
            len(group.anime_ids),
        )


def run_grouping(
    settings: PipelineSettings, *, log: logging.Logger | None = None
) -> StageResult:
    """Group the converted anime records into series and persist the results."""
    log = log or logger
    log.info("Starting series grouping")
    try:
        records = load_anime_records(
            settings.anime_data_path, RelationNormalizer(log)
        )
        log.info("Loaded %d anime records", len(records))

        grouper = SeriesGrouper(slug_max_length=settings.slug_max_length, logger=log)
        result = grouper.group(records)
        outputs = write_documents(build_grouping_documents(settings, result))
    except (SeriesPipelineError, OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        log.error("Error in series grouping: %s", e)
        return StageResult.failed(STAGE_NAME, e)

    log_grouping_summary(result, log)
    return StageResult(
        stage=STAGE_NAME,
        success=True,
        counts={
            "anime": len(records),
            "series": len(result.series),
            **result.edge_cases.counts(),
        },
        outputs=outputs,
    )
