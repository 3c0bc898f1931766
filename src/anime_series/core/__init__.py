"""Grouping and splitting engine."""

from anime_series.core.edge_cases import EdgeCaseCollector
from anime_series.core.grouper import GroupingResult, SeriesGrouper
from anime_series.core.naming import NamingResolver
from anime_series.core.normalizer import RelationNormalizer
from anime_series.core.splitter import SeriesSplitter

__all__ = [
    "EdgeCaseCollector",
    "GroupingResult",
    "NamingResolver",
    "RelationNormalizer",
    "SeriesGrouper",
    "SeriesSplitter",
]
