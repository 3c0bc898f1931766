"""Relation normalization for raw anime records.

Raw relation fields arrive as JSON-encoded strings, native lists, or nothing
at all. Each element is matched against the accepted shapes and converted to
a canonical ``RelationEdge``:

- bare id (``"21"`` or ``21``) -> ``UNKNOWN``-typed edge
- nested node wrapper (``{"relationType": "SEQUEL", "node": {"id": 21}}``)
- target-field object (``{"targetAnimeId": 21, "relationType": "SEQUEL"}`` or
  ``{"id": 21, "type": "sequel"}``)

Anything else is dropped with a warning. Normalization never raises.
"""

import json
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from anime_series.models.anime import (
    UNKNOWN_RELATION,
    AnimeRecord,
    RelationEdge,
    canonical_anime_id,
    normalize_relation_type,
)


class RelationNormalizer:
    """Coerces heterogeneous relation values into canonical edge lists."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger(__name__)

    def normalize(self, raw: Any, *, anime_id: str | None = None) -> list[RelationEdge]:
        """Normalize one record's raw relation value.

        Args:
            raw: JSON string, list of relation elements, or None.
            anime_id: Owning record id, used only for diagnostics.

        Returns:
            Canonical edges in input order. Malformed input yields an empty list.
        """
        elements = self._decode(raw, anime_id)
        edges: list[RelationEdge] = []
        for element in elements:
            edge = self._match_edge(element, anime_id)
            if edge is not None:
                edges.append(edge)
        return edges

    def _decode(self, raw: Any, anime_id: str | None) -> list[Any]:
        if raw is None:
            return []
        if isinstance(raw, str):
            if not raw.strip():
                return []
            try:
                raw = json.loads(raw)
            except json.JSONDecodeError as e:
                self._logger.warning(
                    "Error parsing relations for anime %s: %s", anime_id, e
                )
                return []
        if isinstance(raw, list):
            return raw
        self._logger.warning(
            "Ignoring relations for anime %s: expected a list, got %s",
            anime_id,
            type(raw).__name__,
        )
        return []

    def _match_edge(self, element: Any, anime_id: str | None) -> RelationEdge | None:
        if isinstance(element, (str, int, float)) and not isinstance(element, bool):
            target = canonical_anime_id(element)
            if target is not None:
                return RelationEdge(target_id=target, relation_type=UNKNOWN_RELATION)
        elif isinstance(element, Mapping):
            node = element.get("node")
            candidates = (
                node.get("id") if isinstance(node, Mapping) else None,
                element.get("targetAnimeId"),
                element.get("id"),
            )
            for target in candidates:
                if canonical_anime_id(target):
                    return self._typed_edge(target, element)

        self._logger.warning(
            "Dropping unrecognized relation for anime %s: %r", anime_id, element
        )
        return None

    @staticmethod
    def _typed_edge(target: Any, element: Mapping[str, Any]) -> RelationEdge:
        relation_type = element.get("relationType") or element.get("type")
        return RelationEdge(
            target_id=canonical_anime_id(target),
            relation_type=normalize_relation_type(relation_type),
        )

    def normalize_record(self, raw: Any) -> AnimeRecord | None:
        """Coerce one raw record into an ``AnimeRecord``.

        Returns:
            The record, or None when the input has no usable id.
        """
        if not isinstance(raw, Mapping):
            self._logger.warning("Skipping non-object anime record: %r", raw)
            return None

        anime_id = canonical_anime_id(raw.get("id"))
        if anime_id is None:
            self._logger.warning(
                "Skipping anime record without a usable id (title=%r)", raw.get("title")
            )
            return None

        record = AnimeRecord(
            id=anime_id,
            title=raw.get("title"),
            title_romaji=raw.get("title_romaji"),
            start_date=raw.get("start_date") or raw.get("startDate"),
            relations=self.normalize(raw.get("relations"), anime_id=anime_id),
        )
        return record.attach_raw(dict(raw))

    def normalize_records(self, raws: Iterable[Any]) -> list[AnimeRecord]:
        """Normalize a batch, keeping input order and the first record per id."""
        records: list[AnimeRecord] = []
        seen: set[str] = set()
        for raw in raws:
            record = self.normalize_record(raw)
            if record is None:
                continue
            if record.id in seen:
                self._logger.warning(
                    "Duplicate anime id %s; keeping the first occurrence", record.id
                )
                continue
            seen.add(record.id)
            records.append(record)
        return records
