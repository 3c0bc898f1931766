"""Advanced split stage: series groups in, relation-type clusters out."""

import json
import logging

from pydantic import ValidationError

from anime_series.config import PipelineSettings
from anime_series.core import RelationNormalizer, SeriesSplitter
from anime_series.exceptions import SeriesPipelineError, StageError
from anime_series.models.anime import AnimeRecord
from anime_series.models.series import SeriesGroup
from anime_series.stages.base import StageResult
from anime_series.stages.grouping import load_anime_records
from anime_series.stages.io import load_json, write_documents

STAGE_NAME = "advanced-series-split"

logger = logging.getLogger(__name__)


def load_series_groups(settings: PipelineSettings) -> list[SeriesGroup]:
    """Load the series database written by the grouping stage.

    Raises:
        MissingArtifactError: If the series database does not exist.
        StageError: If the document has no ``series`` list.
    """
    document = load_json(settings.series_db_path, "Series database file")
    if isinstance(document, dict) and isinstance(document.get("series"), list):
        return [SeriesGroup.model_validate(entry) for entry in document["series"]]
    raise StageError(
        STAGE_NAME, f"{settings.series_db_path} must contain a 'series' list"
    )


def load_naming_records(
    settings: PipelineSettings, log: logging.Logger
) -> dict[str, AnimeRecord]:
    """Load anime records for cluster naming; missing data only degrades names."""
    try:
        records = load_anime_records(
            settings.anime_data_path, RelationNormalizer(log)
        )
    except (SeriesPipelineError, OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        log.warning("Could not load anime data: %s", e)
        log.warning("Series names will use IDs instead of titles")
        return {}
    log.info("Loaded %d anime records", len(records))
    return {record.id: record for record in records}


def run_splitting(
    settings: PipelineSettings, *, log: logging.Logger | None = None
) -> StageResult:
    """Split every series group by relation semantics and persist the clusters."""
    log = log or logger
    log.info("Starting advanced series split")
    try:
        groups = load_series_groups(settings)
        log.info("Loaded %d series records", len(groups))

        splitter = SeriesSplitter(load_naming_records(settings, log), logger=log)
        split = splitter.split_all(groups)
        outputs = write_documents({settings.split_output_path: split.to_document()})
    except (
        SeriesPipelineError,
        OSError,
        UnicodeDecodeError,
        json.JSONDecodeError,
        ValidationError,
    ) as e:
        log.error("Error in advanced series split: %s", e)
        return StageResult.failed(STAGE_NAME, e)

    counts = split.counts()
    log.info("Original series: %d", len(groups))
    for category, count in counts.items():
        log.info("  %s groups: %d", category, count)

    return StageResult(
        stage=STAGE_NAME,
        success=True,
        counts={"series": len(groups), **counts},
        outputs=outputs,
    )
