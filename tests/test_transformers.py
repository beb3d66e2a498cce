"""Tests for the album and artist transformation layers."""

from __future__ import annotations

import math

import pytest

from music_manager.domain.models import Album, AlbumModifiers, Artist, Rating, Track
from music_manager.transformers.albums import (
    has_album_ratings,
    ms_to_seconds,
    normalize_modifiers,
    normalize_track,
    to_number,
    transform_album_with_rating,
)
from music_manager.transformers.artists import (
    calculate_artist_album_rating,
    group_albums_by_artist,
    transform_artist_with_ratings,
    transform_artists_with_ratings,
)


def _rated_album(album_id: str, score: int, artist_ids: list[str]) -> Album:
    return Album(
        id=album_id,
        title=f"Album {album_id}",
        tracks=[Track(duration_sec=60, ratings=[Rating(score=score)])],
        artist_ids=artist_ids,
    )


def test_normalize_track_defaults_missing_ratings() -> None:
    track = normalize_track({"durationSec": 200, "ratings": None, "title": "Intro"})

    assert track.duration_sec == 200
    assert track.ratings == []
    assert track.title == "Intro"


def test_normalize_track_converts_milliseconds() -> None:
    assert normalize_track({"durationMs": 215_600}).duration_sec == 216
    assert normalize_track({"duration_ms": 215_400}).duration_sec == 215
    assert normalize_track({"duration_sec": 10, "duration_ms": 99_000}).duration_sec == 10
    assert normalize_track({}).duration_sec is None


def test_normalize_track_reads_ratings() -> None:
    track = normalize_track({"duration_sec": 60, "ratings": [{"score": 7}, 3]})

    assert track.ratings == [Rating(score=7), Rating(score=3)]


def test_ms_to_seconds_rounds_half_up() -> None:
    assert ms_to_seconds(1500) == 2
    assert ms_to_seconds(1499) == 1


def test_normalize_modifiers_accepts_both_key_styles() -> None:
    assert normalize_modifiers(None) == AlbumModifiers()
    assert normalize_modifiers({"coverValue": 9, "mixValue": 3}) == AlbumModifiers(
        cover=9, mix=3
    )
    assert normalize_modifiers({"production": 4}) == AlbumModifiers(production=4)


def test_has_album_ratings() -> None:
    assert not has_album_ratings([])
    assert not has_album_ratings([Track(duration_sec=60)])
    assert has_album_ratings([Track(duration_sec=60), Track(None, [Rating(score=1)])])


def test_transform_unrated_album_has_placeholder() -> None:
    album = Album(id="rg1", title="Unheard", tracks=[Track(duration_sec=60)])

    result = transform_album_with_rating(album)

    assert result.has_ratings is False
    assert result.rating is None
    assert result.rank_label == "—"
    assert result.final_album_rating == 0


def test_transform_rated_album() -> None:
    album = _rated_album("rg1", 8, ["a1"])
    album.modifiers = AlbumModifiers(cover=10)

    result = transform_album_with_rating(album)

    assert result.has_ratings is True
    assert result.rating is not None
    assert result.rank_label == "Excellent"
    assert result.final_album_rating == 8 * 1.1


def test_artist_album_rating_for_unrated_album() -> None:
    rank = calculate_artist_album_rating(Album(id="rg1", title="Nothing"))

    assert rank.rank_value == 0
    assert rank.final_album_rating == 0


def test_transform_artist_with_ratings() -> None:
    artist = Artist(id="a1", name="Someone")
    albums = [
        _rated_album("rg1", 10, ["a1"]),
        Album(id="rg2", title="Unrated", artist_ids=["a1"]),
        _rated_album("rg3", 7, ["a1"]),
    ]

    result = transform_artist_with_ratings(artist, albums)

    assert result.album_count == 3
    assert result.rated_album_count == 2
    assert result.rank_value == 10
    assert result.rank_label == "Legendary"
    # (10 + 7) / 2 = 8.5 -> 9 after rounding
    assert result.avg_rating == 9


def test_transform_artists_groups_albums_by_credit() -> None:
    artists = [Artist(id="a1", name="One"), Artist(id="a2", name="Two")]
    albums = [
        _rated_album("rg1", 5, ["a1", "a2"]),
        _rated_album("rg2", 1, ["a2"]),
    ]

    grouped = group_albums_by_artist(albums)
    assert [a.id for a in grouped["a2"]] == ["rg1", "rg2"]

    one, two = transform_artists_with_ratings(artists, albums)

    assert one.album_count == 1
    assert one.rank_value == 5
    assert two.album_count == 2
    # (5 + 1) / 2 = 3
    assert two.rank_value == 3
    assert two.rank_label == "Solid"


def test_artist_without_albums() -> None:
    (result,) = transform_artists_with_ratings([Artist(id="a9", name="Nobody")], [])

    assert result.album_count == 0
    assert result.rank_label == "Forgettable"


def test_to_number_coerces_numeric_strings() -> None:
    assert to_number(None, "score") is None
    assert to_number(8, "score") == 8
    assert to_number("8", "score") == 8
    assert isinstance(to_number("8", "score"), int)
    assert to_number(" 3.5 ", "duration_sec") == 3.5


@pytest.mark.parametrize("value", ["abc", "", True, [1], {"score": 1}, math.nan, "inf"])
def test_to_number_rejects_non_numbers(value: object) -> None:
    with pytest.raises(ValueError, match="score"):
        to_number(value, "score")


def test_normalize_track_rejects_malformed_records() -> None:
    with pytest.raises(TypeError):
        normalize_track("oops")  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        normalize_track({"ratings": {"score": 5}})
    with pytest.raises(ValueError):
        normalize_track({"ratings": [{"score": "high"}]})


def test_normalize_modifiers_validates_values() -> None:
    assert normalize_modifiers({"cover": "7", "mix": 9.0}) == AlbumModifiers(
        cover=7, mix=9
    )
    with pytest.raises(ValueError):
        normalize_modifiers({"cover": 11})
    with pytest.raises(ValueError):
        normalize_modifiers({"production": 7.5})
    with pytest.raises(TypeError):
        normalize_modifiers(["cover"])  # type: ignore[arg-type]
