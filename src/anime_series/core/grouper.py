"""Series grouping over the directed relation graph.

Every record is expanded, in input order, to the set of records reachable by
following relations of any type from source to target. Each closure becomes one
series group unless one of its members was already claimed by an earlier group,
in which case the whole closure is vetoed and reported.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from anime_series.core.edge_cases import (
    NO_RECIPROCAL_RELATIONS,
    NO_RELATIONS,
    EdgeCaseCollector,
)
from anime_series.core.naming import NamingResolver
from anime_series.models.anime import AnimeRecord
from anime_series.models.series import (
    AnimeDetail,
    EdgeCaseReport,
    SeriesGroup,
    SeriesRelation,
)
from anime_series.utils.id_generation import DEFAULT_SLUG_LENGTH, generate_series_id


@dataclass(slots=True)
class GroupingResult:
    """Output of one grouping run."""

    series: list[SeriesGroup]
    edge_cases: EdgeCaseReport
    records: list[AnimeRecord] = field(default_factory=list)

    def updated_records(self) -> list[dict[str, Any]]:
        """Input records with ``seriesId`` attached where one was resolved."""
        return [record.to_updated_document() for record in self.records]


class SeriesGrouper:
    """Partitions records into disjoint series groups."""

    def __init__(
        self,
        *,
        slug_max_length: int = DEFAULT_SLUG_LENGTH,
        logger: logging.Logger | None = None,
    ) -> None:
        self._slug_max_length = slug_max_length
        self._logger = logger or logging.getLogger(__name__)

    def group(self, records: Sequence[AnimeRecord]) -> GroupingResult:
        """Group normalized records into series.

        Args:
            records: Normalized records in input order. Each grouped record gets
                its ``series_id`` set in place.

        Returns:
            Series groups in creation order plus the edge-case report.
        """
        record_map: dict[str, AnimeRecord] = {}
        for record in records:
            record_map.setdefault(record.id, record)

        naming = NamingResolver(record_map)
        collector = EdgeCaseCollector(self._logger)

        series: list[SeriesGroup] = []
        visited: set[str] = set()
        membership: dict[str, SeriesGroup] = {}
        used_ids: set[str] = set()

        for record in record_map.values():
            if record.id in visited:
                continue

            if not record.relations:
                collector.record_orphan(record.id, record.title, NO_RELATIONS)
                visited.add(record.id)
                continue

            members = self._closure(record.id, record_map, collector)

            if len(members) == 1:
                collector.record_orphan(record.id, record.title, NO_RECIPROCAL_RELATIONS)
                visited.add(record.id)
                continue

            conflicting = [anime_id for anime_id in members if anime_id in membership]
            if conflicting:
                for anime_id in conflicting:
                    existing = membership[anime_id]
                    known = record_map.get(anime_id)
                    collector.record_conflict(
                        anime_id,
                        known.title if known else None,
                        existing.series_id,
                        existing.series_name,
                    )
                self._logger.debug(
                    "Skipping closure of %s (%d members): %d already grouped",
                    record.id,
                    len(members),
                    len(conflicting),
                )
                visited.update(members)
                continue

            group = self._finalize(members, record_map, naming, used_ids)
            for anime_id in members:
                membership[anime_id] = group
            visited.update(members)
            series.append(group)

        return GroupingResult(
            series=series, edge_cases=collector.report, records=list(records)
        )

    def _closure(
        self,
        start: str,
        record_map: dict[str, AnimeRecord],
        collector: EdgeCaseCollector,
    ) -> list[str]:
        """Collect everything reachable from ``start`` with an explicit stack.

        Members are returned in depth-first visit order. A neighbour that is
        already an ancestor on the traversal path, other than the immediate
        predecessor, is reported as a circular relation.
        """
        members: dict[str, None] = {}
        parent_of: dict[str, str | None] = {}
        stack: list[tuple[str, str | None]] = [(start, None)]

        while stack:
            node, parent = stack.pop()
            if node in members:
                continue
            members[node] = None
            parent_of[node] = parent

            record = record_map.get(node)
            neighbors = [edge.target_id for edge in record.relations] if record else []
            for neighbor in neighbors:
                if neighbor == parent or neighbor not in members:
                    continue
                if neighbor == node or self._is_ancestor(neighbor, node, parent_of):
                    collector.record_cycle(self._path_to(node, parent_of), neighbor)

            for neighbor in reversed(neighbors):
                if neighbor not in members:
                    stack.append((neighbor, node))

        return list(members)

    @staticmethod
    def _is_ancestor(candidate: str, node: str, parent_of: dict[str, str | None]) -> bool:
        current = parent_of.get(node)
        while current is not None:
            if current == candidate:
                return True
            current = parent_of.get(current)
        return False

    @staticmethod
    def _path_to(node: str, parent_of: dict[str, str | None]) -> list[str]:
        path: list[str] = []
        current: str | None = node
        while current is not None:
            path.append(current)
            current = parent_of.get(current)
        path.reverse()
        return path

    def _finalize(
        self,
        members: list[str],
        record_map: dict[str, AnimeRecord],
        naming: NamingResolver,
        used_ids: set[str],
    ) -> SeriesGroup:
        known = [record_map[anime_id] for anime_id in members if anime_id in record_map]
        representative_id = naming.representative(
            [record.id for record in known] or members
        )
        representative = record_map.get(representative_id or "")
        slug_title = (
            (representative.title or representative.title_romaji)
            if representative
            else None
        )
        series_id = generate_series_id(
            slug_title,
            representative_id or members[0],
            used_ids,
            self._slug_max_length,
        )
        used_ids.add(series_id)

        group = SeriesGroup(
            series_id=series_id,
            series_name=naming.title_of(representative_id or members[0]),
            anime_ids=list(members),
        )

        for record in known:
            group.anime_details[record.id] = AnimeDetail(
                id=record.id, title=record.display_title or "Unknown Title"
            )
            record.series_id = series_id

            for edge in record.relations:
                group.relations.append(
                    SeriesRelation(
                        source_id=record.id,
                        target_id=edge.target_id,
                        relation_type=edge.relation_type,
                    )
                )
                keys = group.relation_types.setdefault(edge.relation_type, [])
                relation_key = f"{record.id}->{edge.target_id}"
                if relation_key not in keys:
                    keys.append(relation_key)

        self._logger.debug(
            "Created series %s with %d anime", series_id, len(group.anime_ids)
        )
        return group
