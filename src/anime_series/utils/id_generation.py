"""Identifier utilities for series and split clusters.

This module provides standard functions for:
1. Deterministic slug ids for series groups derived from a representative title.
2. Numeric-aware ordering of opaque anime ids.
"""

import re
from collections.abc import Iterable

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_NUMERIC_ID = re.compile(r"^-?\d+$")

DEFAULT_SLUG_LENGTH = 30


def slugify_title(title: str | None, max_length: int = DEFAULT_SLUG_LENGTH) -> str:
    """Create a lower-case ASCII slug from a title.

    Args:
        title: Source title. ``None`` or blank yields an empty slug.
        max_length: Maximum slug length after truncation.

    Returns:
        Slug with non-alphanumeric runs collapsed to ``_`` (e.g. 'fullmetal_alchemist')
    """
    if not title:
        return ""
    slug = _NON_ALNUM.sub("_", title.lower()).strip("_")
    return slug[:max_length].rstrip("_")


def generate_series_id(
    title: str | None,
    fallback_id: str,
    existing_ids: set[str],
    max_length: int = DEFAULT_SLUG_LENGTH,
) -> str:
    """Generate a unique series id from a representative title.

    Args:
        title: Representative title of the series.
        fallback_id: Anime id used when the title yields no slug.
        existing_ids: Series ids already allocated in this run.
        max_length: Maximum slug length before any numeric suffix.

    Returns:
        Slug disambiguated with ``_1``, ``_2``, ... on collision.
    """
    slug = slugify_title(title, max_length) or f"series_{fallback_id}"

    series_id = slug
    counter = 1
    while series_id in existing_ids:
        series_id = f"{slug}_{counter}"
        counter += 1
    return series_id


def anime_id_sort_key(anime_id: str) -> tuple[int, int, str]:
    """Sort key placing numeric ids first (by value) and other ids after them."""
    text = str(anime_id)
    if _NUMERIC_ID.match(text):
        return (0, int(text), "")
    return (1, 0, text)


def sort_anime_ids(anime_ids: Iterable[str]) -> list[str]:
    """Return anime ids sorted ascending numerically."""
    return sorted(anime_ids, key=anime_id_sort_key)


def split_cluster_id(prefix: str, original_series_id: str, index: int) -> str:
    """Build a split cluster id such as 'character_naruto_2'."""
    return f"{prefix}_{original_series_id}_{index}"
