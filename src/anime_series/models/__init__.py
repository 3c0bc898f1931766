"""Data models shared by the grouping and splitting stages."""

from .anime import (
    UNKNOWN_RELATION,
    AnimeId,
    AnimeRecord,
    RelationCategory,
    RelationEdge,
    canonical_anime_id,
    normalize_relation_type,
)
from .series import (
    PROPOSED_SERIES_ID,
    PROPOSED_SERIES_NAME,
    AnimeDetail,
    CircularRelation,
    EdgeCaseReport,
    MultiSeriesConflict,
    OrphanedAnime,
    SeriesGroup,
    SeriesReference,
    SeriesRelation,
)
from .split import SplitCluster, SplitResult

__all__ = [
    "PROPOSED_SERIES_ID",
    "PROPOSED_SERIES_NAME",
    "UNKNOWN_RELATION",
    "AnimeDetail",
    "AnimeId",
    "AnimeRecord",
    "CircularRelation",
    "EdgeCaseReport",
    "MultiSeriesConflict",
    "OrphanedAnime",
    "RelationCategory",
    "RelationEdge",
    "SeriesGroup",
    "SeriesReference",
    "SeriesRelation",
    "SplitCluster",
    "SplitResult",
    "canonical_anime_id",
    "normalize_relation_type",
]
