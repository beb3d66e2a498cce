# music_manager/io/library_jsonl.py

"""Library snapshot stored as JSONL.

Every line is either an artist or an album record, told apart by ``kind``::

    {"kind": "artist", "id": "a1", "name": "Radiohead", "country": "GB"}
    {"kind": "album", "id": "rg1", "title": "Kid A", "artist_ids": ["a1"],
     "modifiers": {"cover": 9, "production": 8, "mix": 9},
     "tracks": [{"number": 1, "title": "Everything in Its Right Place",
                 "duration_sec": 251, "ratings": [{"score": 10}]}]}
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from music_manager.domain.models import Album, Artist, Rating, Track
from music_manager.io.jsonl import (
    append_jsonl_line,
    iter_jsonl_records,
    write_jsonl,
)
from music_manager.transformers.albums import (
    normalize_modifiers,
    normalize_track,
    to_number,
)

logger = logging.getLogger(__name__)

KIND_ARTIST = "artist"
KIND_ALBUM = "album"


@dataclass(slots=True)
class Library:
    artists: list[Artist] = field(default_factory=list)
    albums: list[Album] = field(default_factory=list)

    def find_album(self, album_id: str) -> Album | None:
        return next((a for a in self.albums if a.id == album_id), None)

    def find_artist(self, *, mbid: str | None, name: str) -> Artist | None:
        """Match by MusicBrainz id first, then by exact name."""
        if mbid:
            for artist in self.artists:
                if artist.mbid == mbid or artist.id == mbid:
                    return artist
        for artist in self.artists:
            if artist.name == name:
                return artist
        return None


def artist_from_raw(raw: dict[str, Any]) -> Artist:
    """Convert a raw JSON dict into an Artist instance."""
    return Artist(
        id=str(raw["id"]),
        name=raw["name"],
        country=raw.get("country"),
        image_url=raw.get("image_url"),
        mbid=raw.get("mbid"),
    )


def _list_field(raw: dict[str, Any], key: str) -> list[Any]:
    value = raw.get(key) or []
    if not isinstance(value, list):
        msg = f"{key} must be a list, got {type(value).__name__}."
        raise TypeError(msg)
    return value


def album_from_raw(raw: dict[str, Any]) -> Album:
    """Convert a raw JSON dict into an Album instance.

    Raises KeyError/TypeError/ValueError for records that cannot be normalized.
    """
    year = to_number(raw.get("year"), "year")
    return Album(
        id=str(raw["id"]),
        title=raw["title"],
        year=int(year) if year is not None else None,
        primary_type=raw.get("primary_type") or "Album",
        modifiers=normalize_modifiers(raw.get("modifiers")),
        tracks=[normalize_track(t) for t in _list_field(raw, "tracks")],
        artist_ids=[str(a) for a in _list_field(raw, "artist_ids")],
        cover_url=raw.get("cover_url"),
        mbid=raw.get("mbid"),
    )


def _rating_to_raw(rating: Rating) -> dict[str, Any]:
    return {"score": rating.score, "review": rating.review}


def _track_to_raw(track: Track) -> dict[str, Any]:
    return {
        "number": track.number,
        "title": track.title,
        "duration_sec": track.duration_sec,
        "mbid": track.mbid,
        "ratings": [_rating_to_raw(r) for r in track.ratings],
    }


def album_to_raw(album: Album) -> dict[str, Any]:
    """Convert an Album instance into a JSON-serialisable dict."""
    return {
        "kind": KIND_ALBUM,
        "id": album.id,
        "title": album.title,
        "year": album.year,
        "primary_type": album.primary_type,
        "modifiers": {
            "cover": album.modifiers.cover,
            "production": album.modifiers.production,
            "mix": album.modifiers.mix,
        },
        "tracks": [_track_to_raw(t) for t in album.tracks],
        "artist_ids": album.artist_ids,
        "cover_url": album.cover_url,
        "mbid": album.mbid,
    }


def artist_to_raw(artist: Artist) -> dict[str, Any]:
    """Convert an Artist instance into a JSON-serialisable dict."""
    return {
        "kind": KIND_ARTIST,
        "id": artist.id,
        "name": artist.name,
        "country": artist.country,
        "image_url": artist.image_url,
        "mbid": artist.mbid,
    }


_MALFORMED = (KeyError, TypeError, ValueError, AttributeError)


def load_library(path: str | Path) -> Library:
    """Load artists and albums from a JSONL file.

    Records of unknown kind and malformed records are logged and skipped; the
    rest of the file still loads.
    """
    path = Path(path)
    library = Library()

    for line_number, raw in iter_jsonl_records(path):
        kind = raw.get("kind")
        try:
            if kind == KIND_ARTIST:
                library.artists.append(artist_from_raw(raw))
            elif kind == KIND_ALBUM:
                library.albums.append(album_from_raw(raw))
            else:
                logger.warning(
                    "Skipping line %d in %s: unknown kind=%r",
                    line_number,
                    path,
                    kind,
                )
        except _MALFORMED as exc:
            logger.warning(
                "Skipping malformed %s record on line %d in %s: %r",
                kind,
                line_number,
                path,
                exc,
            )

    logger.debug(
        "Loaded library from %s: %d artists, %d albums",
        path,
        len(library.artists),
        len(library.albums),
    )
    return library


def append_artist(path: str | Path, artist: Artist) -> None:
    """Append one artist record to the library file."""
    append_jsonl_line(Path(path), artist_to_raw(artist))


def append_album(path: str | Path, album: Album) -> None:
    """Append one album record to the library file."""
    append_jsonl_line(Path(path), album_to_raw(album))


def save_library(path: str | Path, library: Library) -> None:
    """Rewrite the whole library file: artists first, then albums."""
    records = [artist_to_raw(a) for a in library.artists]
    records.extend(album_to_raw(a) for a in library.albums)
    write_jsonl(Path(path), records)
    logger.debug("Wrote %d records to %s", len(records), path)

