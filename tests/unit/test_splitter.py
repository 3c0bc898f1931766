"""Tests for the relation-type split of series groups."""

import json

import pytest

from anime_series.core import SeriesGrouper, SeriesSplitter
from anime_series.models import RelationCategory, SeriesGroup


@pytest.fixture
def build_group(raw_record, normalize):
    """Group raw records and return the single resulting series with its records."""

    def _build(*raws):
        records = normalize(list(raws))
        result = SeriesGrouper().group(records)
        assert len(result.series) == 1
        return result.series[0], {record.id: record for record in records}

    return _build


class TestMainClusters:
    """Test continuity clusters built from structural relations."""

    def test_character_link_stays_outside_main(self, build_group, raw_record):
        group, records = build_group(
            raw_record(1, (2, "SEQUEL")),
            raw_record(2, (3, "CHARACTER")),
            raw_record(3),
        )

        result = SeriesSplitter(records).split(group)

        assert len(result.main) == 1
        main = result.main[0]
        assert main.series_id == "series_anime_1_1"
        assert main.anime_ids == ["1", "2"]
        assert main.character_ids == ["3"]
        assert main.adaptation_ids == []
        assert main.spin_off_ids == []
        assert main.other_ids == []
        assert result.character == []

    def test_main_cluster_document_shape(self, build_group, raw_record):
        group, records = build_group(
            raw_record(1, (2, "SEQUEL"), title="Monogatari"),
            raw_record(2, (1, "PREQUEL"), (3, "ADAPTATION")),
            raw_record(3),
        )

        document = SeriesSplitter(records).split(group).main[0].to_document()

        assert document == {
            "seriesId": "series_monogatari_1",
            "seriesName": "Monogatari",
            "originalSeriesId": "monogatari",
            "animeIds": ["1", "2"],
            "otherIds": [],
            "characterIds": [],
            "adaptationIds": ["3"],
            "spinOffIds": [],
            "relations": [
                {
                    "sourceAnimeId": "1",
                    "targetAnimeId": "2",
                    "relationType": "SEQUEL",
                    "direction": "forward",
                },
                {
                    "sourceAnimeId": "2",
                    "targetAnimeId": "1",
                    "relationType": "PREQUEL",
                    "direction": "forward",
                },
            ],
        }

    def test_other_relations_fill_other_ids(self, build_group, raw_record):
        group, records = build_group(
            raw_record(1, (2, "SEQUEL")),
            raw_record(2, (3, "OTHER")),
            raw_record(3),
        )

        main = SeriesSplitter(records).split(group).main[0]

        assert main.other_ids == ["3"]

    def test_soft_bridges_yield_several_main_clusters(self, build_group, raw_record):
        group, records = build_group(
            raw_record(1, (2, "SEQUEL")),
            raw_record(2, (3, "CHARACTER")),
            raw_record(3, (4, "SEQUEL")),
            raw_record(4),
        )

        result = SeriesSplitter(records).split(group)

        assert [c.anime_ids for c in result.main] == [["1", "2"], ["3", "4"]]
        assert [c.series_id for c in result.main] == ["series_anime_1_1", "series_anime_1_2"]
        assert result.main[0].character_ids == ["3"]
        assert result.main[1].character_ids == ["2"]
        assert result.character == []

    def test_ids_and_relations_sort_numerically(self, build_group, raw_record):
        group, records = build_group(
            raw_record(10, (9, "PREQUEL")),
            raw_record(9, (100, "SEQUEL")),
            raw_record(100),
        )

        main = SeriesSplitter(records).split(group).main[0]

        assert main.anime_ids == ["9", "10", "100"]
        assert [(r.source_id, r.target_id) for r in main.relations] == [
            ("9", "100"),
            ("10", "9"),
        ]

    def test_duplicate_relations_are_collapsed(self, build_group, raw_record):
        group, records = build_group(
            raw_record(1, (2, "SEQUEL"), (2, "SEQUEL")),
            raw_record(2),
        )

        main = SeriesSplitter(records).split(group).main[0]

        assert len(group.relations) == 2
        assert len(main.relations) == 1


class TestSoftClusters:
    """Test category clusters, exclusivity and singleton suppression."""

    def test_adaptation_only_cluster(self, build_group, raw_record):
        group, records = build_group(
            raw_record(1, (2, "ADAPTATION")),
            raw_record(2, (3, "ADAPTATION")),
            raw_record(3, (1, "ADAPTATION")),
        )

        result = SeriesSplitter(records).split(group)

        assert result.main == []
        assert len(result.adaptation) == 1
        cluster = result.adaptation[0]
        assert cluster.series_id == "adaptation_anime_1_1"
        assert cluster.series_name == "Anime 1 (Adaptation)"
        assert cluster.series_type is RelationCategory.ADAPTATION
        assert cluster.anime_ids == ["1", "2", "3"]
        assert len(cluster.relations) == 3
        document = cluster.to_document()
        assert document["seriesType"] == "ADAPTATION"
        assert "characterIds" not in document

    def test_numbering_keeps_discovery_index(self, build_group, raw_record):
        """A dropped component still consumes its number."""
        group, records = build_group(
            raw_record(1, (2, "SEQUEL")),
            raw_record(2, (3, "CHARACTER")),
            raw_record(3, (4, "OTHER")),
            raw_record(4, (5, "CHARACTER")),
            raw_record(5),
        )

        result = SeriesSplitter(records).split(group)

        assert [c.series_id for c in result.character] == ["character_anime_1_2"]
        assert result.character[0].anime_ids == ["4", "5"]
        assert result.character[0].series_name == "Anime 4 (Character)"
        assert [c.anime_ids for c in result.other] == [["3", "4"]]

    def test_parent_relations_feed_other_and_parent(self, build_group, raw_record):
        group, records = build_group(
            raw_record(1, (2, "PARENT")),
            raw_record(2, (3, "OTHER")),
            raw_record(3),
        )

        result = SeriesSplitter(records).split(group)

        assert [c.anime_ids for c in result.other] == [["1", "2", "3"]]
        assert {r.relation_type for r in result.other[0].relations} == {"PARENT", "OTHER"}
        assert [c.anime_ids for c in result.parent] == [["1", "2"]]
        assert result.parent[0].series_name == "Anime 1 (Parent)"
        assert result.parent[0].relations[0].relation_type == "PARENT"

    def test_spin_offs_use_spin_off_key(self, build_group, raw_record):
        group, records = build_group(
            raw_record(1, (2, "SPIN_OFF")),
            raw_record(2),
        )

        document = SeriesSplitter(records).split(group).to_document()

        assert list(document) == ["main", "character", "adaptation", "spinOff", "other", "parent"]
        assert document["spinOff"][0]["seriesId"] == "spin_off_anime_1_1"
        assert document["spinOff"][0]["seriesName"] == "Anime 1 (Spin Off)"

    def test_soft_clusters_exclude_main_members(self, build_group, raw_record):
        group, records = build_group(
            raw_record(1, (2, "SEQUEL"), (3, "SPIN_OFF"), (4, "SPIN_OFF")),
            raw_record(3, (4, "SPIN_OFF")),
            raw_record(2),
            raw_record(4),
        )

        result = SeriesSplitter(records).split(group)

        main_ids = {anime_id for cluster in result.main for anime_id in cluster.anime_ids}
        assert main_ids == {"1", "2"}
        for bucket in (result.character, result.adaptation, result.spin_off, result.other, result.parent):
            for cluster in bucket:
                assert main_ids.isdisjoint(cluster.anime_ids)
                assert len(cluster.anime_ids) >= 2
        assert [c.anime_ids for c in result.spin_off] == [["3", "4"]]
        assert [(r.source_id, r.target_id) for r in result.spin_off[0].relations] == [("3", "4")]


class TestNamingAndBatch:
    """Test naming without titles and multi-group splitting."""

    def test_names_fall_back_to_ids_without_records(self, build_group, raw_record):
        group, _ = build_group(raw_record(1, (2, "SEQUEL")), raw_record(2))

        result = SeriesSplitter().split(group)

        assert result.main[0].series_name == "Series 1"

    def test_split_all_concatenates_in_group_order(self):
        groups = [
            SeriesGroup.model_validate(
                {
                    "seriesId": series_id,
                    "seriesName": series_id,
                    "animeIds": [a, b],
                    "relations": [
                        {"sourceAnimeId": a, "targetAnimeId": b, "relationType": "SEQUEL"}
                    ],
                }
            )
            for series_id, a, b in [("alpha", "1", "2"), ("beta", "3", "4")]
        ]

        result = SeriesSplitter().split_all(groups)

        assert [c.original_series_id for c in result.main] == ["alpha", "beta"]
        assert result.counts() == {
            "main": 2,
            "character": 0,
            "adaptation": 0,
            "spinOff": 0,
            "other": 0,
            "parent": 0,
        }

    def test_group_and_split_are_deterministic(self, raw_record, normalize):
        raws = [
            raw_record(1, (2, "SEQUEL"), (3, "SPIN_OFF")),
            raw_record(2, (1, "PREQUEL"), (7, "CHARACTER")),
            raw_record(3, (4, "SEQUEL")),
            raw_record(4),
            raw_record(5, (6, "ADAPTATION")),
            raw_record(6),
            raw_record(7, (8, "CHARACTER")),
            raw_record(8),
        ]

        def run():
            records = normalize(raws)
            grouping = SeriesGrouper().group(records)
            splitter = SeriesSplitter({record.id: record for record in records})
            return splitter.split_all(grouping.series).to_document()

        first, second = run(), run()

        assert json.dumps(first) == json.dumps(second)
        assert [c["originalSeriesId"] for c in first["main"]] == ["anime_1", "anime_1"]
        assert sorted(c["animeIds"] for c in first["main"]) == [["1", "2"], ["3", "4"]]
        assert sorted(c["seriesId"] for c in first["main"]) == [
            "series_anime_1_1",
            "series_anime_1_2",
        ]
        assert [c["animeIds"] for c in first["character"]] == [["7", "8"]]
        assert [c["animeIds"] for c in first["adaptation"]] == [["5", "6"]]
