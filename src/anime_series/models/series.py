"""Pydantic models for series groups and the grouping edge-case report."""
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from .anime import AnimeId

PROPOSED_SERIES_ID = "proposed_new_series"
PROPOSED_SERIES_NAME = "Proposed New Series"

OrphanReason = Literal["No relations found", "No reciprocal relations found"]


class _WireModel(BaseModel):
    """Accepts snake_case or camelCase on input and dumps camelCase."""

    model_config = ConfigDict(populate_by_name=True)

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class AnimeDetail(_WireModel):
    """Per-member snapshot kept on a series group."""

    id: AnimeId
    title: str = Field(default="Unknown Title")


class SeriesRelation(_WireModel):
    """Relation stored on a series group, keyed by its source record."""

    source_id: AnimeId = Field(..., alias="sourceAnimeId")
    target_id: AnimeId = Field(..., alias="targetAnimeId")
    relation_type: str = Field(..., alias="relationType")
    direction: str = Field(default="forward")

    @property
    def dedupe_key(self) -> str:
        return f"{self.source_id}-{self.target_id}-{self.relation_type}"


class SeriesGroup(_WireModel):
    """Connected component of the relation graph over all relation types."""

    series_id: str = Field(..., alias="seriesId", description="Stable slug id")
    series_name: str = Field(..., alias="seriesName")
    anime_ids: list[AnimeId] = Field(default_factory=list, alias="animeIds")
    anime_details: dict[str, AnimeDetail] = Field(
        default_factory=dict, alias="animeDetails"
    )
    relations: list[SeriesRelation] = Field(default_factory=list)
    relation_types: dict[str, list[str]] = Field(
        default_factory=dict,
        alias="relationTypes",
        description="Relation type -> ordered unique 'source->target' keys",
    )


class SeriesReference(_WireModel):
    series_id: str = Field(..., alias="seriesId")
    series_name: str = Field(..., alias="seriesName")


class MultiSeriesConflict(_WireModel):
    """A record that a later closure tried to claim after it was grouped."""

    anime_id: AnimeId = Field(..., alias="animeId")
    title: str = Field(default="Unknown")
    found_in_series: list[SeriesReference] = Field(
        default_factory=list, alias="foundInSeries"
    )


class OrphanedAnime(_WireModel):
    anime_id: AnimeId = Field(..., alias="animeId")
    title: str | None = None
    reason: OrphanReason


class CircularRelation(_WireModel):
    """Informational trace of a relation chain that loops back on itself."""

    anime_id: AnimeId = Field(..., alias="animeId", description="Record closing the loop")
    chain: list[AnimeId] = Field(default_factory=list)

    @property
    def trace(self) -> str:
        return "->".join(self.chain)

    def to_document(self) -> dict[str, Any]:
        document = super().to_document()
        document["trace"] = self.trace
        return document


class EdgeCaseReport(_WireModel):
    """Diagnostics collected alongside series grouping."""

    anime_in_multiple_series: list[MultiSeriesConflict] = Field(
        default_factory=list, alias="animeInMultipleSeries"
    )
    orphaned_anime: list[OrphanedAnime] = Field(
        default_factory=list, alias="orphanedAnime"
    )
    circular_relations: list[CircularRelation] = Field(
        default_factory=list, alias="circularRelations"
    )

    def to_document(self) -> dict[str, Any]:
        return {
            "animeInMultipleSeries": [
                entry.to_document() for entry in self.anime_in_multiple_series
            ],
            "orphanedAnime": [entry.to_document() for entry in self.orphaned_anime],
            "circularRelations": [
                entry.to_document() for entry in self.circular_relations
            ],
        }

    def counts(self) -> dict[str, int]:
        return {
            "animeInMultipleSeries": len(self.anime_in_multiple_series),
            "orphanedAnime": len(self.orphaned_anime),
            "circularRelations": len(self.circular_relations),
        }
