"""Passive collector for grouping diagnostics."""

import logging

from anime_series.models.series import (
    PROPOSED_SERIES_ID,
    PROPOSED_SERIES_NAME,
    CircularRelation,
    EdgeCaseReport,
    MultiSeriesConflict,
    OrphanedAnime,
    OrphanReason,
    SeriesReference,
)

NO_RELATIONS: OrphanReason = "No relations found"
NO_RECIPROCAL_RELATIONS: OrphanReason = "No reciprocal relations found"


class EdgeCaseCollector:
    """Accumulates conflicts, orphans and cycles observed while grouping.

    Entries are appended in the order they are observed; nothing here affects
    the grouping outcome.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger(__name__)
        self._report = EdgeCaseReport()
        self._seen_cycles: set[tuple[str, ...]] = set()

    @property
    def report(self) -> EdgeCaseReport:
        return self._report

    def record_orphan(
        self, anime_id: str, title: str | None, reason: OrphanReason
    ) -> None:
        self._report.orphaned_anime.append(
            OrphanedAnime(anime_id=anime_id, title=title, reason=reason)
        )
        self._logger.debug("Orphaned anime %s: %s", anime_id, reason)

    def record_conflict(
        self,
        anime_id: str,
        title: str | None,
        existing_series_id: str,
        existing_series_name: str,
    ) -> None:
        self._report.anime_in_multiple_series.append(
            MultiSeriesConflict(
                anime_id=anime_id,
                title=title or "Unknown",
                found_in_series=[
                    SeriesReference(
                        series_id=existing_series_id,
                        series_name=existing_series_name,
                    ),
                    SeriesReference(
                        series_id=PROPOSED_SERIES_ID,
                        series_name=PROPOSED_SERIES_NAME,
                    ),
                ],
            )
        )
        self._logger.debug(
            "Anime %s already belongs to series %s", anime_id, existing_series_id
        )

    def record_cycle(self, path: list[str], closing_id: str) -> None:
        """Record the loop at the end of ``path`` that closes back on ``closing_id``.

        Only the looping part of the path is stored, starting at ``closing_id``.
        """
        start = path.index(closing_id) if closing_id in path else 0
        chain = [*path[start:], closing_id]
        key = tuple(sorted(chain[:-1]))
        if key in self._seen_cycles:
            return
        self._seen_cycles.add(key)
        cycle = CircularRelation(anime_id=closing_id, chain=chain)
        self._report.circular_relations.append(cycle)
        self._logger.warning("Circular relation detected: %s", cycle.trace)
