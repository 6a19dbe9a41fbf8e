"""Tests for the command-line interface."""

import pytest

from timeline_ics.cli import build_parser, main


@pytest.fixture
def source_dir(tmp_path, sample_timeline_json: str):
    source = tmp_path / "json"
    source.mkdir()
    (source / "2011_NOVEMBER.json").write_text(sample_timeline_json, encoding="utf-8")
    return source


def convert_args(source_dir, dest_dir, timezone_file, *extra: str) -> list[str]:
    return [
        "convert",
        "--source", str(source_dir),
        "--dest", str(dest_dir),
        "--timezones", str(timezone_file),
        *extra,
    ]


class TestParser:
    """Tests for argument parsing."""

    def test_convert_flags(self):
        args = build_parser().parse_args(
            ["convert", "--miles", "--no-places", "--ignore-place", "a", "--ignore-place", "b"]
        )
        assert args.miles is True
        assert args.no_places is True
        assert args.no_activities is False
        assert args.ignore_place == ["a", "b"]
        assert args.places_lookup is None

    def test_places_lookup_toggle(self):
        parser = build_parser()
        assert parser.parse_args(["convert", "--places-lookup"]).places_lookup is True
        assert parser.parse_args(["convert", "--no-places-lookup"]).places_lookup is False


class TestMain:
    """Tests for the convert command."""

    def test_no_command(self, capsys):
        assert main([]) == 0
        assert "convert" in capsys.readouterr().out

    def test_convert(self, source_dir, tmp_path, timezone_file, capsys):
        dest = tmp_path / "ical"

        assert main(convert_args(source_dir, dest, timezone_file)) == 0

        assert (dest / "2011_NOVEMBER.ics").exists()
        out = capsys.readouterr().out
        assert "2011_NOVEMBER.json: 3 events (0 excluded)" in out

    def test_convert_with_options(self, source_dir, tmp_path, timezone_file):
        dest = tmp_path / "ical"
        args = convert_args(
            source_dir, dest, timezone_file,
            "--miles", "--no-places", "--ignore-place", "end-place-id",
        )

        assert main(args) == 0

        text = (dest / "2011_NOVEMBER.ics").read_text(encoding="utf-8")
        assert "BEGIN:VEVENT" not in text

    def test_ignore_place_added_to_configured(
        self, source_dir, tmp_path, timezone_file, monkeypatch, capsys
    ):
        monkeypatch.setenv("TIMELINE_ICS_IGNORED_VISITED_PLACE_IDS", "some-child-visit-place-id")
        dest = tmp_path / "ical"

        args = convert_args(source_dir, dest, timezone_file, "--ignore-place", "end-place-id")
        assert main(args) == 0
        assert "1 events (2 excluded)" in capsys.readouterr().out

    def test_bad_file_exit_code(self, source_dir, tmp_path, timezone_file):
        (source_dir / "broken.json").write_text("[]", encoding="utf-8")
        assert main(convert_args(source_dir, tmp_path / "ical", timezone_file)) == 1

    def test_lookup_without_key(self, source_dir, tmp_path, timezone_file, capsys):
        args = convert_args(source_dir, tmp_path / "ical", timezone_file, "--places-lookup")
        assert main(args) == 2
        assert "Invalid configuration" in capsys.readouterr().err

    def test_missing_timezone_file(self, source_dir, tmp_path, capsys):
        args = convert_args(source_dir, tmp_path / "ical", tmp_path / "missing.geojson")
        assert main(args) == 2
        assert "Cannot load timezone data" in capsys.readouterr().err
