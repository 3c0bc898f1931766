"""
Root test configuration for all tests.

Provides record builders and settings isolated from the developer's environment.
"""

import os
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest

from anime_series.config import PipelineSettings, get_settings
from anime_series.core import RelationNormalizer
from anime_series.models import AnimeRecord

RawRecord = dict[str, Any]


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Drop ANIME_SERIES_* variables and reset the cached settings around each test."""
    for key in list(os.environ):
        if key.upper().startswith("ANIME_SERIES_"):
            monkeypatch.delenv(key)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def raw_record() -> Callable[..., RawRecord]:
    """
    Build a raw anime record as produced by the conversion stage.

    Relations are given as ``(target_id, relation_type)`` pairs and rendered in
    the ``targetAnimeId``/``relationType`` object shape.
    """

    def _build(
        anime_id: int | str,
        *relations: tuple[int | str, str],
        title: str | None = None,
        title_romaji: str | None = None,
        start_date: str | None = None,
    ) -> RawRecord:
        record: RawRecord = {
            "id": anime_id,
            "title": title if title is not None else f"Anime {anime_id}",
            "relations": [
                {"targetAnimeId": target, "relationType": relation_type}
                for target, relation_type in relations
            ],
        }
        if title_romaji is not None:
            record["title_romaji"] = title_romaji
        if start_date is not None:
            record["start_date"] = start_date
        return record

    return _build


@pytest.fixture
def normalize() -> Callable[[list[RawRecord]], list[AnimeRecord]]:
    """Normalize a list of raw records with a fresh RelationNormalizer."""
    normalizer = RelationNormalizer()
    return normalizer.normalize_records


@pytest.fixture
def pipeline_settings(tmp_path: Path) -> PipelineSettings:
    """Settings rooted at a temporary directory, ignoring any .env file."""
    return PipelineSettings(base_dir=tmp_path, _env_file=None)
