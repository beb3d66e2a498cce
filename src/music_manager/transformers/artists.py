# music_manager/transformers/artists.py

"""Artist transformation layer: per-album ratings rolled up to the artist."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from music_manager.domain.models import Album, AlbumRank, Artist
from music_manager.rating.album import compute_album_rating
from music_manager.rating.artist import compute_artist_rating
from music_manager.transformers.albums import has_album_ratings


@dataclass(slots=True)
class ArtistWithRatings:
    artist: Artist
    album_count: int
    rated_album_count: int
    avg_rating: int
    rank_value: int
    rank_label: str


def calculate_artist_album_rating(album: Album) -> AlbumRank:
    """Rating of one album as seen by the artist engine (0/0 when unrated)."""
    if not has_album_ratings(album.tracks):
        return AlbumRank(rank_value=0, final_album_rating=0)

    result = compute_album_rating(album.tracks, album.modifiers)
    return AlbumRank(
        rank_value=result.rank_value,
        final_album_rating=result.final_album_rating,
    )


def transform_artist_with_ratings(
    artist: Artist,
    albums: Sequence[Album],
) -> ArtistWithRatings:
    album_ratings = [calculate_artist_album_rating(a) for a in albums]
    artist_rating = compute_artist_rating(album_ratings)

    return ArtistWithRatings(
        artist=artist,
        album_count=len(albums),
        rated_album_count=sum(1 for a in album_ratings if a.rank_value > 0),
        avg_rating=artist_rating.avg_final_rating,
        rank_value=artist_rating.rank_value,
        rank_label=artist_rating.rank_label,
    )


def group_albums_by_artist(albums: Iterable[Album]) -> dict[str, list[Album]]:
    """Map artist id to the albums credited to it (an album may appear twice)."""
    grouped: dict[str, list[Album]] = defaultdict(list)
    for album in albums:
        for artist_id in album.artist_ids:
            grouped[artist_id].append(album)
    return dict(grouped)


def transform_artists_with_ratings(
    artists: Iterable[Artist],
    albums: Iterable[Album],
) -> list[ArtistWithRatings]:
    by_artist = group_albums_by_artist(albums)
    return [
        transform_artist_with_ratings(artist, by_artist.get(artist.id, []))
        for artist in artists
    ]
