"""Relation-type split of series groups.

Each series group is re-partitioned using only its continuity-defining
("structural") relations; the connected components of that graph become MAIN
clusters. Soft relation categories are clustered separately, and any soft
cluster member already claimed by a MAIN cluster of the same group is dropped.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from anime_series.core.naming import NamingResolver
from anime_series.models.anime import AnimeRecord, RelationCategory
from anime_series.models.series import SeriesGroup, SeriesRelation
from anime_series.models.split import SplitCluster, SplitResult
from anime_series.utils.graph import RelationGraph
from anime_series.utils.id_generation import (
    anime_id_sort_key,
    sort_anime_ids,
    split_cluster_id,
)

MAIN_CLUSTER_PREFIX = "series"

CATEGORY_SUFFIXES: dict[RelationCategory, str] = {
    RelationCategory.CHARACTER: "Character",
    RelationCategory.ADAPTATION: "Adaptation",
    RelationCategory.SPIN_OFF: "Spin Off",
    RelationCategory.OTHER: "Other",
    RelationCategory.PARENT: "Parent",
}

# Relation types that feed each soft category graph.
CATEGORY_RELATION_TYPES: dict[RelationCategory, frozenset[str]] = {
    RelationCategory.CHARACTER: frozenset({"CHARACTER"}),
    RelationCategory.ADAPTATION: frozenset({"ADAPTATION"}),
    RelationCategory.SPIN_OFF: frozenset({"SPIN_OFF"}),
    RelationCategory.OTHER: frozenset({"OTHER", "PARENT"}),
    RelationCategory.PARENT: frozenset({"PARENT"}),
}

SOFT_RELATION_TYPES = frozenset().union(*CATEGORY_RELATION_TYPES.values())


def is_structural(relation_type: str) -> bool:
    """True for relation types that define series continuity."""
    return relation_type not in SOFT_RELATION_TYPES


def _relation_sort_key(relation: SeriesRelation) -> tuple:
    return (anime_id_sort_key(relation.source_id), anime_id_sort_key(relation.target_id))


@dataclass(slots=True)
class _CategoryGraphs:
    """Structural graph plus one graph per soft category for a single group."""

    structural: RelationGraph = field(default_factory=RelationGraph)
    soft: dict[RelationCategory, RelationGraph] = field(
        default_factory=lambda: {category: RelationGraph() for category in RelationCategory}
    )

    @classmethod
    def build(cls, relations: Iterable[SeriesRelation]) -> "_CategoryGraphs":
        graphs = cls()
        for relation in relations:
            if is_structural(relation.relation_type):
                graphs.structural.add_edge(relation.source_id, relation.target_id)
                continue
            for category, types in CATEGORY_RELATION_TYPES.items():
                if relation.relation_type in types:
                    graphs.soft[category].add_edge(relation.source_id, relation.target_id)
        return graphs


class SeriesSplitter:
    """Splits series groups into MAIN and soft-category clusters."""

    def __init__(
        self,
        records: Mapping[str, AnimeRecord] | None = None,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._naming = NamingResolver(records or {})
        self._logger = logger or logging.getLogger(__name__)

    def split_all(self, groups: Iterable[SeriesGroup]) -> SplitResult:
        """Split every group and concatenate the per-category results in order."""
        result = SplitResult()
        for group in groups:
            result.extend(self.split(group))
        return result

    def split(self, group: SeriesGroup) -> SplitResult:
        """Split one series group.

        Args:
            group: Finalized series group with its internal relation list.

        Returns:
            Clusters of this group bucketed by category. MAIN clusters come from
            the structural graph; soft clusters never contain a MAIN member and
            always have at least two members.
        """
        graphs = _CategoryGraphs.build(group.relations)
        result = SplitResult()

        main_ids: set[str] = set()
        for index, component in enumerate(graphs.structural.connected_components(), start=1):
            if len(component) < 2:
                continue
            cluster = self._main_cluster(group, component, index)
            main_ids.update(cluster.anime_ids)
            result.main.append(cluster)

        for category in RelationCategory:
            components = graphs.soft[category].connected_components()
            for index, component in enumerate(components, start=1):
                members = [anime_id for anime_id in component if anime_id not in main_ids]
                if len(members) < 2:
                    continue
                result.bucket(category).append(
                    self._soft_cluster(group, category, members, index)
                )

        self._logger.debug(
            "Split series %s into %s", group.series_id, result.counts()
        )
        return result

    def _main_cluster(
        self, group: SeriesGroup, component: list[str], index: int
    ) -> SplitCluster:
        members = set(component)
        other_ids: set[str] = set()
        character_ids: set[str] = set()
        adaptation_ids: set[str] = set()
        spin_off_ids: set[str] = set()
        internal: dict[str, SeriesRelation] = {}

        for relation in group.relations:
            source_in = relation.source_id in members
            target_in = relation.target_id in members
            if not (source_in or target_in):
                continue
            outside = relation.target_id if source_in else relation.source_id

            typed_ids = {
                "CHARACTER": character_ids,
                "ADAPTATION": adaptation_ids,
                "SPIN_OFF": spin_off_ids,
            }.get(relation.relation_type)
            if typed_ids is not None:
                if outside not in members:
                    typed_ids.add(outside)
            elif source_in and target_in:
                internal.setdefault(relation.dedupe_key, relation)
            else:
                other_ids.add(outside)

        return SplitCluster(
            series_id=split_cluster_id(MAIN_CLUSTER_PREFIX, group.series_id, index),
            series_name=self._naming.resolve(component),
            original_series_id=group.series_id,
            anime_ids=sort_anime_ids(component),
            other_ids=sort_anime_ids(other_ids),
            character_ids=sort_anime_ids(character_ids),
            adaptation_ids=sort_anime_ids(adaptation_ids),
            spin_off_ids=sort_anime_ids(spin_off_ids),
            relations=sorted(internal.values(), key=_relation_sort_key),
        )

    def _soft_cluster(
        self,
        group: SeriesGroup,
        category: RelationCategory,
        members: list[str],
        index: int,
    ) -> SplitCluster:
        member_set = set(members)
        types = CATEGORY_RELATION_TYPES[category]
        internal: dict[str, SeriesRelation] = {}
        for relation in group.relations:
            if (
                relation.relation_type in types
                and relation.source_id in member_set
                and relation.target_id in member_set
            ):
                internal.setdefault(relation.dedupe_key, relation)

        name = self._naming.resolve(members)
        return SplitCluster(
            series_id=split_cluster_id(category.value.lower(), group.series_id, index),
            series_name=f"{name} ({CATEGORY_SUFFIXES[category]})",
            original_series_id=group.series_id,
            anime_ids=sort_anime_ids(members),
            series_type=category,
            relations=sorted(internal.values(), key=_relation_sort_key),
        )
