"""Pydantic models for the relation-type split of series groups."""
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .anime import AnimeId, RelationCategory
from .series import SeriesRelation


class SplitCluster(BaseModel):
    """Sub-cluster of one series group scoped to a relation category.

    MAIN clusters carry the external reference lists and no ``series_type``;
    soft-category clusters carry ``series_type`` and no reference lists.
    """

    model_config = ConfigDict(populate_by_name=True)

    series_id: str = Field(..., alias="seriesId")
    series_name: str = Field(..., alias="seriesName")
    original_series_id: str = Field(..., alias="originalSeriesId")
    anime_ids: list[AnimeId] = Field(default_factory=list, alias="animeIds")
    series_type: RelationCategory | None = Field(None, alias="seriesType")
    other_ids: list[AnimeId] | None = Field(None, alias="otherIds")
    character_ids: list[AnimeId] | None = Field(None, alias="characterIds")
    adaptation_ids: list[AnimeId] | None = Field(None, alias="adaptationIds")
    spin_off_ids: list[AnimeId] | None = Field(None, alias="spinOffIds")
    relations: list[SeriesRelation] = Field(default_factory=list)

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class SplitResult(BaseModel):
    """Split clusters bucketed by category."""

    model_config = ConfigDict(populate_by_name=True)

    main: list[SplitCluster] = Field(default_factory=list)
    character: list[SplitCluster] = Field(default_factory=list)
    adaptation: list[SplitCluster] = Field(default_factory=list)
    spin_off: list[SplitCluster] = Field(default_factory=list, alias="spinOff")
    other: list[SplitCluster] = Field(default_factory=list)
    parent: list[SplitCluster] = Field(default_factory=list)

    def bucket(self, category: RelationCategory) -> list[SplitCluster]:
        """Return the list that holds soft clusters of ``category``."""
        buckets = {
            RelationCategory.CHARACTER: self.character,
            RelationCategory.ADAPTATION: self.adaptation,
            RelationCategory.SPIN_OFF: self.spin_off,
            RelationCategory.OTHER: self.other,
            RelationCategory.PARENT: self.parent,
        }
        if category not in buckets:
            raise ValueError(f"Unknown relation category: {category!r}")
        return buckets[category]

    def extend(self, other: "SplitResult") -> None:
        self.main.extend(other.main)
        self.character.extend(other.character)
        self.adaptation.extend(other.adaptation)
        self.spin_off.extend(other.spin_off)
        self.other.extend(other.other)
        self.parent.extend(other.parent)

    def counts(self) -> dict[str, int]:
        return {key: len(clusters) for key, clusters in self._buckets().items()}

    def to_document(self) -> dict[str, Any]:
        return {
            key: [cluster.to_document() for cluster in clusters]
            for key, clusters in self._buckets().items()
        }

    def _buckets(self) -> dict[str, list[SplitCluster]]:
        return {
            "main": self.main,
            "character": self.character,
            "adaptation": self.adaptation,
            "spinOff": self.spin_off,
            "other": self.other,
            "parent": self.parent,
        }
