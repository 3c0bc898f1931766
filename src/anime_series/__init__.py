"""Anime series grouping and relation-type splitting.

Normalized anime records are grouped into disjoint series by relation-graph
connectivity, then each series is split into a continuity (MAIN) cluster and
soft-relation clusters for characters, adaptations, spin-offs and other
references.
"""

from anime_series.core import (
    NamingResolver,
    RelationNormalizer,
    SeriesGrouper,
    SeriesSplitter,
)

__version__ = "0.1.0"

__all__ = [
    "NamingResolver",
    "RelationNormalizer",
    "SeriesGrouper",
    "SeriesSplitter",
    "__version__",
]
