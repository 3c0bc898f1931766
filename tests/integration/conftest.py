"""Fixtures for stage and CLI tests against temporary pipeline directories."""

import csv
import json
import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

CSV_FIELDS = ["id", "title", "title_romaji", "start_date", "relations"]

SAMPLE_ROWS = [
    {
        "id": "1",
        "title": "Attack on Titan",
        "title_romaji": "Shingeki no Kyojin",
        "start_date": "2013-04-07",
        "relations": json.dumps(
            [
                {"targetAnimeId": 2, "relationType": "SEQUEL"},
                {"targetAnimeId": 4, "relationType": "CHARACTER"},
            ]
        ),
    },
    {
        "id": "2",
        "title": "Attack on Titan Season 2",
        "title_romaji": "Shingeki no Kyojin Season 2",
        "start_date": "2017-04-01",
        "relations": json.dumps([{"targetAnimeId": 1, "relationType": "PREQUEL"}]),
    },
    {
        "id": "3",
        "title": "Mushishi",
        "title_romaji": "Mushishi",
        "start_date": "2005-10-23",
        "relations": "",
    },
    {
        "id": "4",
        "title": "Attack on Titan: Junior High",
        "title_romaji": "Shingeki! Kyojin Chuugakkou",
        "start_date": "2015-10-04",
        "relations": json.dumps([{"targetAnimeId": 5, "relationType": "ADAPTATION"}]),
    },
    {
        "id": "5",
        "title": "Junior High Manga",
        "title_romaji": "",
        "start_date": "2016",
        "relations": "[]",
    },
]


def write_csv(path: Path, rows: list[dict[str, str]]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=CSV_FIELDS)
        writer.writeheader()
        writer.writerows(rows)
    return path


@pytest.fixture
def csv_writer():
    return write_csv


@pytest.fixture
def sample_csv(pipeline_settings) -> Path:
    """Write the sample export as data/anilist_anime_data_complete.csv."""
    return write_csv(
        pipeline_settings.data_dir / "anilist_anime_data_complete.csv", SAMPLE_ROWS
    )


@pytest.fixture
def anime_data(pipeline_settings) -> Path:
    """Write the sample records directly where the grouping stage reads them."""
    path = pipeline_settings.anime_data_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(SAMPLE_ROWS), encoding="utf-8")
    return path


@pytest.fixture
def restore_logging() -> Iterator[None]:
    """Undo root logger changes made by the CLI's logging setup."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
