"""Tests for reading and writing the library JSONL file."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from music_manager.domain.models import Album, AlbumModifiers, Artist, Rating, Track
from music_manager.io.library_jsonl import (
    Library,
    append_album,
    load_library,
    save_library,
)


def _write_lines(path: Path, lines: list[str]) -> None:
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")


def test_load_missing_file_returns_empty_library(tmp_path: Path) -> None:
    library = load_library(tmp_path / "missing.jsonl")

    assert library.artists == []
    assert library.albums == []


def test_load_artists_and_albums(tmp_path: Path) -> None:
    path = tmp_path / "library.jsonl"
    _write_lines(
        path,
        [
            json.dumps({"kind": "artist", "id": "a1", "name": "Radiohead"}),
            json.dumps(
                {
                    "kind": "album",
                    "id": "rg1",
                    "title": "Kid A",
                    "artist_ids": ["a1"],
                    "modifiers": {"coverValue": 9, "production": 8},
                    "tracks": [
                        {"durationSec": 251, "ratings": [{"score": 10}]},
                        {"durationMs": 60_400},
                    ],
                }
            ),
        ],
    )

    library = load_library(path)

    assert [a.name for a in library.artists] == ["Radiohead"]
    (album,) = library.albums
    assert album.modifiers == AlbumModifiers(cover=9, production=8)
    assert album.tracks[0].ratings == [Rating(score=10)]
    assert album.tracks[1].duration_sec == 60
    assert album.tracks[1].ratings == []


def test_invalid_and_unknown_lines_are_skipped(
    tmp_path: Path,
    caplog: pytest.LogCaptureFixture,
) -> None:
    path = tmp_path / "library.jsonl"
    _write_lines(
        path,
        [
            "{not json",
            json.dumps({"kind": "playlist", "id": "p1"}),
            json.dumps({"kind": "artist", "id": "a1"}),
            json.dumps({"kind": "artist", "id": "a2", "name": "Kept"}),
        ],
    )

    with caplog.at_level(logging.WARNING):
        library = load_library(path)

    assert [a.id for a in library.artists] == ["a2"]
    assert "invalid JSON line 1" in caplog.text
    assert "unknown kind" in caplog.text


def test_append_album_round_trips(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "library.jsonl"
    album = Album(
        id="rg1",
        title="OK Computer",
        year=1997,
        modifiers=AlbumModifiers(cover=7, production=9, mix=8),
        tracks=[Track(duration_sec=284, ratings=[Rating(score=10)], number=1)],
        artist_ids=["a1"],
    )

    append_album(path, album)
    append_album(path, Album(id="rg2", title="Amnesiac"))

    library = load_library(path)
    assert library.albums[0] == album
    assert library.albums[1].title == "Amnesiac"


def test_malformed_records_are_skipped_and_the_rest_loads(
    tmp_path: Path,
    caplog: pytest.LogCaptureFixture,
) -> None:
    path = tmp_path / "library.jsonl"
    _write_lines(
        path,
        [
            json.dumps(
                {"kind": "album", "id": "bad1", "title": "X", "tracks": ["oops"]}
            ),
            json.dumps(
                {
                    "kind": "album",
                    "id": "bad2",
                    "title": "Y",
                    "tracks": [{"duration_sec": 60, "ratings": [{"score": "abc"}]}],
                }
            ),
            json.dumps({"kind": "album", "id": "bad3", "title": "Z", "tracks": 5}),
            json.dumps(
                {"kind": "album", "id": "bad4", "title": "W", "modifiers": {"mix": 12}}
            ),
            json.dumps({"kind": "album", "id": "good", "title": "Fine"}),
            "[1, 2]",
        ],
    )

    with caplog.at_level(logging.WARNING):
        library = load_library(path)

    assert [a.id for a in library.albums] == ["good"]
    assert caplog.text.count("malformed album record") == 4
    assert "expected an object" in caplog.text


def test_numeric_strings_are_coerced(tmp_path: Path) -> None:
    path = tmp_path / "library.jsonl"
    _write_lines(
        path,
        [
            json.dumps(
                {
                    "kind": "album",
                    "id": "rg1",
                    "title": "Kid A",
                    "year": "2000",
                    "modifiers": {"cover": "9"},
                    "tracks": [
                        {
                            "number": "3",
                            "duration_sec": "180",
                            "ratings": [{"score": "8"}],
                        }
                    ],
                }
            )
        ],
    )

    (album,) = load_library(path).albums

    assert album.year == 2000
    assert album.modifiers == AlbumModifiers(cover=9)
    (track,) = album.tracks
    assert track.number == 3
    assert track.duration_sec == 180
    assert track.ratings == [Rating(score=8)]


def test_save_library_rewrites_the_file(tmp_path: Path) -> None:
    path = tmp_path / "library.jsonl"
    _write_lines(
        path,
        ["{not json", json.dumps({"kind": "artist", "id": "old", "name": "Gone"})],
    )
    library = Library(
        artists=[Artist(id="a1", name="Radiohead", country="GB")],
        albums=[
            Album(
                id="rg1",
                title="Kid A",
                tracks=[Track(duration_sec=251, ratings=[Rating(8, "ok")], number=1)],
                artist_ids=["a1"],
            )
        ],
    )

    save_library(path, library)

    lines = path.read_text(encoding="utf-8").splitlines()
    assert [json.loads(line)["kind"] for line in lines] == ["artist", "album"]
    assert load_library(path) == library
    assert list(tmp_path.iterdir()) == [path]
