"""Per-stage timing, resource and outcome tracking for pipeline runs."""

import logging
import os
import sys
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from anime_series.exceptions import ArtifactWriteError
from anime_series.stages.io import write_documents

try:
    import resource
except ImportError:  # Windows
    resource = None

METRICS_FILE_PREFIX = "pipeline-metrics-"


@dataclass(slots=True)
class ResourceSample:
    """Process memory and host load at one point in time."""

    max_rss_mb: float | None = None
    load_average: tuple[float, float, float] | None = None

    def to_document(self) -> dict[str, Any]:
        return {
            "maxRssMb": self.max_rss_mb,
            "loadAverage": list(self.load_average) if self.load_average else None,
        }


def sample_resources() -> ResourceSample:
    """Peak resident memory of this process and the 1/5/15 minute load average."""
    max_rss_mb = None
    if resource is not None:
        max_rss = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
        # kilobytes on Linux, bytes on macOS
        max_rss_mb = max_rss / (1024 * 1024 if sys.platform == "darwin" else 1024)

    load_average = None
    if hasattr(os, "getloadavg"):
        try:
            load_average = os.getloadavg()
        except OSError:
            load_average = None
    return ResourceSample(max_rss_mb=max_rss_mb, load_average=load_average)


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat(timespec="microseconds") if value else None


@dataclass(slots=True)
class StageMetrics:
    """Timing, resources and outcome of one stage."""

    name: str
    started_at: float
    finished_at: float | None = None
    success: bool | None = None
    error: str | None = None
    resources: dict[str, ResourceSample] = field(default_factory=dict)

    @property
    def duration(self) -> float | None:
        if self.finished_at is None:
            return None
        return self.finished_at - self.started_at

    def to_document(self) -> dict[str, Any]:
        return {
            "duration": self.duration,
            "success": self.success,
            "error": self.error,
            "resources": {
                marker: sample.to_document() for marker, sample in self.resources.items()
            },
        }


@dataclass(slots=True)
class PipelineMetrics:
    """Summary returned when a monitored run completes."""

    total_duration: float
    stages: dict[str, StageMetrics] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)
    started_at: datetime | None = None
    finished_at: datetime | None = None
    metrics_path: Path | None = None

    @property
    def success(self) -> bool:
        return not self.errors and all(stage.success for stage in self.stages.values())

    @property
    def success_rate(self) -> float:
        """Percentage of started stages that succeeded; 0 when none ran."""
        if not self.stages:
            return 0.0
        succeeded = sum(1 for stage in self.stages.values() if stage.success)
        return succeeded / len(self.stages) * 100

    def to_document(self) -> dict[str, Any]:
        return {
            "startTime": _isoformat(self.started_at),
            "endTime": _isoformat(self.finished_at),
            "totalDuration": self.total_duration,
            "successRate": self.success_rate,
            "stages": {name: stage.to_document() for name, stage in self.stages.items()},
            "errors": list(self.errors),
        }


class StageMonitor:
    """Records start, end, resources and outcome of each stage in a run.

    Args:
        logger: Destination for stage progress messages.
        clock: Monotonic time source, replaceable in tests.
        metrics_dir: Directory that receives a ``pipeline-metrics-<timestamp>.json``
            summary when the run completes; nothing is written when omitted.
        sampler: Resource snapshot source, replaceable in tests.
    """

    def __init__(
        self,
        logger: logging.Logger | None = None,
        clock=time.perf_counter,
        *,
        metrics_dir: Path | None = None,
        sampler: Callable[[], ResourceSample] = sample_resources,
    ) -> None:
        self._logger = logger or logging.getLogger(__name__)
        self._clock = clock
        self._metrics_dir = metrics_dir
        self._sampler = sampler
        self._started_at = clock()
        self._started_wall = datetime.now(UTC)
        self._stages: dict[str, StageMetrics] = {}
        self._errors: list[str] = []

    def start_stage(self, name: str) -> None:
        self._logger.info("Starting stage: %s", name)
        metrics = StageMetrics(name=name, started_at=self._clock())
        metrics.resources["start"] = self._sampler()
        self._stages[name] = metrics

    def end_stage(self, name: str, success: bool, error: str | None = None) -> None:
        metrics = self._stages.get(name)
        if metrics is None:
            self._logger.warning("Trying to end a stage that wasn't started: %s", name)
            return
        metrics.finished_at = self._clock()
        metrics.success = success
        metrics.error = error
        metrics.resources["end"] = self._sampler()
        if success:
            self._logger.info("Stage %s completed in %.2fs", name, metrics.duration)
        else:
            self._errors.append(f"{name}: {error}")
            self._logger.error("Stage %s failed: %s", name, error)

    def complete(self) -> PipelineMetrics:
        """Close the run, log a per-stage summary and save it when configured."""
        summary = PipelineMetrics(
            total_duration=self._clock() - self._started_at,
            stages=dict(self._stages),
            errors=list(self._errors),
            started_at=self._started_wall,
            finished_at=datetime.now(UTC),
        )
        self._logger.info(
            "Pipeline completed in %.2fs (%.0f%% of stages succeeded)",
            summary.total_duration,
            summary.success_rate,
        )
        for metrics in summary.stages.values():
            status = "ok" if metrics.success else "failed"
            duration = metrics.duration if metrics.duration is not None else 0.0
            self._logger.info("  %s: %s (%.2fs)", metrics.name, status, duration)

        if self._metrics_dir is not None:
            self._save(summary)
        return summary

    def _save(self, summary: PipelineMetrics) -> None:
        stamp = summary.finished_at.strftime("%Y-%m-%dT%H-%M-%S-%fZ")
        path = self._metrics_dir / f"{METRICS_FILE_PREFIX}{stamp}.json"
        try:
            write_documents({path: summary.to_document()})
        except ArtifactWriteError as e:
            self._logger.warning("Could not save monitoring metrics: %s", e)
            return
        summary.metrics_path = path
        self._logger.info("Monitoring metrics saved to %s", path)
