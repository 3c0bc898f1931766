"""Deterministic representative-title selection for series and clusters."""

from collections.abc import Iterable, Mapping
from datetime import datetime
from functools import cmp_to_key

from anime_series.models.anime import AnimeRecord
from anime_series.utils.datetime_utils import parse_release_date
from anime_series.utils.id_generation import anime_id_sort_key

UNKNOWN_SERIES_NAME = "Unknown Series"


def _sign(a: object, b: object) -> int:
    return (a > b) - (a < b)  # type: ignore[operator]


class NamingResolver:
    """Picks the oldest member of a group and names the group after it.

    Two candidates compare by release date when both parse; otherwise (or when
    either record is unknown) they compare by numeric id.
    """

    def __init__(self, records: Mapping[str, AnimeRecord]) -> None:
        self._records = records
        self._dates: dict[str, datetime | None] = {}

    def _release_date(self, anime_id: str) -> datetime | None:
        if anime_id not in self._dates:
            record = self._records.get(anime_id)
            self._dates[anime_id] = (
                parse_release_date(record.start_date) if record else None
            )
        return self._dates[anime_id]

    def _compare(self, a: str, b: str) -> int:
        if a in self._records and b in self._records:
            date_a = self._release_date(a)
            date_b = self._release_date(b)
            if date_a is not None and date_b is not None:
                return _sign(date_a, date_b)
        return _sign(anime_id_sort_key(a), anime_id_sort_key(b))

    def ordered(self, anime_ids: Iterable[str]) -> list[str]:
        """Return candidates oldest first."""
        return sorted(anime_ids, key=cmp_to_key(self._compare))

    def representative(self, anime_ids: Iterable[str]) -> str | None:
        """Return the id of the oldest candidate, or None for an empty set."""
        ordered = self.ordered(anime_ids)
        return ordered[0] if ordered else None

    def title_of(self, anime_id: str) -> str:
        """Romanized title, else plain title, else a ``Series {id}`` placeholder."""
        record = self._records.get(anime_id)
        if record is not None and record.display_title:
            return record.display_title
        return f"Series {anime_id}"

    def resolve(self, anime_ids: Iterable[str]) -> str:
        """Name a member set after its oldest candidate."""
        anime_id = self.representative(anime_ids)
        if anime_id is None:
            return UNKNOWN_SERIES_NAME
        return self.title_of(anime_id)
