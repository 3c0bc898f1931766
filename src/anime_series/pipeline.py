"""Stage orchestration, artifact status and cleanup."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from anime_series.config import PipelineSettings
from anime_series.monitoring import METRICS_FILE_PREFIX, PipelineMetrics, StageMonitor
from anime_series.stages import (
    StageResult,
    convert_csv_files,
    run_grouping,
    run_splitting,
)
from anime_series.stages.io import count_records

logger = logging.getLogger(__name__)

StageFunc = Callable[..., StageResult]

STAGES: tuple[tuple[str, StageFunc], ...] = (
    ("convert", convert_csv_files),
    ("group", run_grouping),
    ("split", run_splitting),
)


@dataclass(slots=True)
class PipelineContext:
    """Dependencies shared by every stage of one run."""

    settings: PipelineSettings
    logger: logging.Logger = field(default_factory=lambda: logger)
    monitor: StageMonitor | None = None

    def __post_init__(self) -> None:
        if self.monitor is None:
            self.monitor = StageMonitor(self.logger, metrics_dir=self.settings.logs_dir)


@dataclass(slots=True)
class PipelineReport:
    """Results of a pipeline run in execution order."""

    results: list[StageResult]
    metrics: PipelineMetrics

    @property
    def success(self) -> bool:
        return bool(self.results) and all(result.success for result in self.results)

    @property
    def failed_stage(self) -> StageResult | None:
        return next((result for result in self.results if not result.success), None)


@dataclass(slots=True)
class ArtifactStatus:
    """Presence, size and record count of one pipeline artifact."""

    label: str
    path: Path
    exists: bool
    size: int = 0
    records: int | None = None


def ensure_directories(settings: PipelineSettings) -> None:
    for directory in settings.required_directories():
        if not directory.exists():
            directory.mkdir(parents=True, exist_ok=True)
            logger.info("Created directory: %s", directory)


def run_stage(context: PipelineContext, name: str, stage: StageFunc) -> StageResult:
    """Run one stage under the context's monitor."""
    context.monitor.start_stage(name)
    result = stage(context.settings, log=context.logger)
    context.monitor.end_stage(name, result.success, result.error)
    return result


def run_pipeline(
    context: PipelineContext, stages: tuple[str, ...] | None = None
) -> PipelineReport:
    """Run the selected stages in order, halting at the first failure.

    Args:
        context: Settings, logger and monitor for this run.
        stages: Stage names to run; all stages when omitted.

    Returns:
        Per-stage results up to and including the first failure, plus timing.
    """
    selected = [(name, func) for name, func in STAGES if stages is None or name in stages]
    context.logger.info("Starting anime series pipeline")
    ensure_directories(context.settings)

    results: list[StageResult] = []
    for name, stage in selected:
        result = run_stage(context, name, stage)
        results.append(result)
        if not result.success:
            context.logger.error("Pipeline halted at stage %s: %s", name, result.error)
            break

    report = PipelineReport(results=results, metrics=context.monitor.complete())
    if report.success:
        _log_run_summary(report, context.logger)
    return report


def _log_run_summary(report: PipelineReport, log: logging.Logger) -> None:
    log.info("Pipeline completed successfully")
    for result in report.results:
        details = ", ".join(f"{key}={value}" for key, value in result.counts.items())
        log.info("  %s: %s", result.stage, details)
    log.info("Total time: %.2fs", report.metrics.total_duration)


def generated_artifacts(settings: PipelineSettings) -> list[tuple[str, Path]]:
    """Artifacts produced by the stages, labelled for status output."""
    converted = [
        (f"converted {csv_path.name}", settings.results_dir / f"{csv_path.stem}.json")
        for csv_path in sorted(settings.data_dir.glob("*.csv"))
    ] if settings.data_dir.is_dir() else []
    return [
        *converted,
        ("series groups", settings.series_output_path),
        ("edge cases", settings.edge_cases_path),
        ("updated anime data", settings.updated_anime_path),
        ("series database", settings.series_db_path),
        ("advanced split", settings.split_output_path),
    ]


def pipeline_status(settings: PipelineSettings) -> list[ArtifactStatus]:
    """Describe every known input and output artifact."""
    statuses = [
        ArtifactStatus(
            label=f"source {csv_path.name}",
            path=csv_path,
            exists=True,
            size=csv_path.stat().st_size,
        )
        for csv_path in sorted(settings.data_dir.glob("*.csv"))
    ] if settings.data_dir.is_dir() else []

    seen: set[Path] = set()
    for label, path in [("anime data", settings.anime_data_path), *generated_artifacts(settings)]:
        if path in seen:
            continue
        seen.add(path)
        if path.is_file():
            statuses.append(
                ArtifactStatus(
                    label=label,
                    path=path,
                    exists=True,
                    size=path.stat().st_size,
                    records=count_records(path),
                )
            )
        else:
            statuses.append(ArtifactStatus(label=label, path=path, exists=False))
    return statuses


def clean_artifacts(
    settings: PipelineSettings,
    *,
    results: bool = True,
    db: bool = True,
    logs: bool = False,
) -> list[Path]:
    """Delete generated artifacts; source files in ``data_dir`` are never touched.

    Args:
        settings: Pipeline directory layout.
        results: Remove converted records and grouping outputs in ``results_dir``.
        db: Remove the series database and split document in ``db_dir``.
        logs: Remove ``*.log`` files and saved run metrics in ``logs_dir``.

    Returns:
        Paths that were removed.
    """
    removed: list[Path] = []
    targets = [
        path
        for _, path in generated_artifacts(settings)
        if (results and path.parent == settings.results_dir)
        or (db and path.parent == settings.db_dir)
    ]
    if logs and settings.logs_dir.is_dir():
        targets.extend(sorted(settings.logs_dir.glob("*.log")))
        targets.extend(sorted(settings.logs_dir.glob(f"{METRICS_FILE_PREFIX}*.json")))

    for path in targets:
        if path.is_file() and settings.data_dir not in path.parents:
            path.unlink()
            removed.append(path)
            logger.info("Removed %s", path)
    return removed
