"""Pydantic models for anime records and their relation edges."""
from enum import Enum
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PrivateAttr,
    field_validator,
)

UNKNOWN_RELATION = "UNKNOWN"


class RelationCategory(str, Enum):
    """Soft relation categories that do not define series continuity."""

    CHARACTER = "CHARACTER"
    ADAPTATION = "ADAPTATION"
    SPIN_OFF = "SPIN_OFF"
    OTHER = "OTHER"
    PARENT = "PARENT"


def canonical_anime_id(value: Any) -> str | None:
    """Return the canonical string form of an anime id, or None if unusable.

    Integral floats render without a decimal part so ``1.0`` and ``1`` collide.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else str(value)
    if isinstance(value, str):
        return value.strip() or None
    return None


def _require_anime_id(value: Any) -> str:
    anime_id = canonical_anime_id(value)
    if anime_id is None:
        raise ValueError(f"Invalid anime id: {value!r}")
    return anime_id


AnimeId = Annotated[str, BeforeValidator(_require_anime_id)]


def normalize_relation_type(value: Any) -> str:
    """Upper-case a relation type tag, defaulting to UNKNOWN."""
    if not isinstance(value, str) or not value.strip():
        return UNKNOWN_RELATION
    return value.strip().upper()


class RelationEdge(BaseModel):
    """Canonical relation from one record to a target record."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    target_id: AnimeId = Field(..., alias="targetAnimeId", description="Target anime id")
    relation_type: str = Field(
        default=UNKNOWN_RELATION,
        alias="relationType",
        description="Upper-case relation category (SEQUEL, CHARACTER, ...)",
    )

    @field_validator("relation_type", mode="before")
    @classmethod
    def _upper_relation_type(cls, v: Any) -> str:
        return normalize_relation_type(v)


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, dict):
        # AniList FuzzyDate shape: {"year": 2013, "month": 4, "day": 7}
        try:
            year = int(value.get("year") or 0)
            month = int(value.get("month") or 1)
            day = int(value.get("day") or 1)
        except (TypeError, ValueError):
            return None
        if not year:
            return None
        return f"{year:04d}-{month:02d}-{day:02d}"
    text = str(value).strip()
    return text or None


class AnimeRecord(BaseModel):
    """One anime entity with title fields and normalized relation edges.

    The grouping stage sets ``series_id`` in place once the record joins a series.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: AnimeId = Field(..., description="Opaque anime identifier")
    title: str | None = Field(None, description="Primary title")
    title_romaji: str | None = Field(None, description="Romanized title")
    start_date: str | None = Field(None, description="Release date as provided")
    relations: list[RelationEdge] = Field(
        default_factory=list, description="Normalized relation edges"
    )
    series_id: str | None = Field(
        None, alias="seriesId", description="Resolved series id"
    )

    _raw: dict[str, Any] = PrivateAttr(default_factory=dict)

    @field_validator("title", "title_romaji", "start_date", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> str | None:
        return _optional_text(v)

    @property
    def display_title(self) -> str | None:
        """Best available title: romanized first, then plain."""
        return self.title_romaji or self.title

    def attach_raw(self, raw: dict[str, Any]) -> "AnimeRecord":
        """Keep the source mapping so outputs can echo every input field."""
        self._raw = dict(raw)
        return self

    def to_updated_document(self) -> dict[str, Any]:
        """Render the record as it appears in the UpdatedRecords document."""
        document = dict(self._raw) if self._raw else {"id": self.id, "title": self.title}
        document["relations"] = [
            edge.model_dump(by_alias=True) for edge in self.relations
        ]
        if self.series_id:
            document["seriesId"] = self.series_id
        return document
