"""Series pipeline utility functions.

This package provides:
- Deterministic series id generation and numeric-aware id ordering
- Release date parsing
- An undirected relation graph with connected-component discovery
"""

from anime_series.utils.datetime_utils import parse_release_date
from anime_series.utils.graph import RelationGraph
from anime_series.utils.id_generation import (
    anime_id_sort_key,
    generate_series_id,
    slugify_title,
    sort_anime_ids,
    split_cluster_id,
)

__all__ = [
    "RelationGraph",
    "anime_id_sort_key",
    "generate_series_id",
    "parse_release_date",
    "slugify_title",
    "sort_anime_ids",
    "split_cluster_id",
]
