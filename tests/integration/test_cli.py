"""Integration tests for the anime-series command line."""

import json

import pytest

from anime_series.cli import build_parser, main

pytestmark = pytest.mark.usefixtures("restore_logging")


class TestCommands:
    """Test exit codes and output of each subcommand."""

    def test_run(self, tmp_path, sample_csv, capsys):
        exit_code = main(["--base-dir", str(tmp_path), "-q", "run"])

        assert exit_code == 0
        out = capsys.readouterr().out
        assert "series-grouping: anime=5, series=1" in out
        assert "advanced-series-split:" in out
        with (tmp_path / "db" / "advanced_split_series.json").open(encoding="utf-8") as f:
            assert len(json.load(f)["main"]) == 1

    def test_group_only(self, tmp_path, anime_data):
        assert main(["--base-dir", str(tmp_path), "-q", "group"]) == 0
        assert (tmp_path / "db" / "series.json").is_file()
        assert not (tmp_path / "db" / "advanced_split_series.json").exists()

    def test_failed_stage_exits_one(self, tmp_path, capsys):
        exit_code = main(["--base-dir", str(tmp_path), "-q", "split"])

        assert exit_code == 1
        assert "Stage advanced-series-split failed" in capsys.readouterr().err

    def test_status(self, tmp_path, capsys):
        assert main(["--base-dir", str(tmp_path), "status"]) == 0

        out = capsys.readouterr().out
        assert f"Base directory: {tmp_path}" in out
        assert "[missing] series database" in out

    def test_clean(self, tmp_path, anime_data, capsys):
        main(["--base-dir", str(tmp_path), "-q", "group"])
        capsys.readouterr()

        assert main(["--base-dir", str(tmp_path), "clean"]) == 0
        assert "Removed 4 file(s)" in capsys.readouterr().out

    def test_clean_selectors(self, tmp_path, anime_data, capsys):
        main(["--base-dir", str(tmp_path), "-q", "group"])
        capsys.readouterr()

        assert main(["--base-dir", str(tmp_path), "clean", "--db"]) == 0
        assert "Removed 1 file(s)" in capsys.readouterr().out
        assert (tmp_path / "results" / "main_series.json").exists()

        assert main(["--base-dir", str(tmp_path), "clean", "--all"]) == 0
        assert "Removed 4 file(s)" in capsys.readouterr().out
        assert list((tmp_path / "logs").glob("pipeline-metrics-*.json")) == []
        assert anime_data.exists()

    def test_log_file(self, tmp_path, anime_data, monkeypatch):
        monkeypatch.setenv("ANIME_SERIES_LOG_FILE", "pipeline.log")

        assert main(["--base-dir", str(tmp_path), "group"]) == 0
        log_text = (tmp_path / "logs" / "pipeline.log").read_text(encoding="utf-8")
        assert "Starting series grouping" in log_text


class TestUsageErrors:
    """Test argparse usage errors exit with status 2."""

    def test_missing_command(self):
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 2

    def test_verbose_and_quiet_conflict(self):
        with pytest.raises(SystemExit) as exc_info:
            main(["-v", "-q", "run"])
        assert exc_info.value.code == 2

    def test_invalid_settings(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ANIME_SERIES_LOG_LEVEL", "LOUD")

        with pytest.raises(SystemExit) as exc_info:
            main(["--base-dir", str(tmp_path), "status"])
        assert exc_info.value.code == 2

    def test_parser_lists_subcommands(self):
        help_text = build_parser().format_help()

        for command in ("run", "convert", "group", "split", "status", "clean"):
            assert command in help_text
