# music_manager/domain/models.py

"""Core domain models for the music collection and its ratings."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

DEFAULT_EDIT_MODIFIER = 5


class ScaleValue(IntEnum):
    """The only legal quantized rating values ("rank values")."""

    ZERO = 0
    ONE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SEVEN = 7
    TEN = 10


@dataclass(slots=True, frozen=True)
class Rating:
    """A single score (0-10) given to a track."""

    score: float | None
    review: str | None = None


@dataclass(slots=True)
class Track:
    """A single track on an album release."""

    duration_sec: float | None
    ratings: list[Rating] = field(default_factory=list)
    number: int | None = None
    title: str = ""
    mbid: str | None = None


@dataclass(slots=True, frozen=True)
class AlbumModifiers:
    """Subjective quality sliders for an album. Unset means no boost."""

    cover: int | None = None
    production: int | None = None
    mix: int | None = None

    def for_editing(self) -> AlbumModifiers:
        """Return the values an edit form starts from (unset sliders sit at 5)."""
        return AlbumModifiers(
            cover=DEFAULT_EDIT_MODIFIER if self.cover is None else self.cover,
            production=(
                DEFAULT_EDIT_MODIFIER if self.production is None else self.production
            ),
            mix=DEFAULT_EDIT_MODIFIER if self.mix is None else self.mix,
        )


@dataclass(slots=True, frozen=True)
class AlbumRatingResult:
    rank_value: ScaleValue
    rank_label: str
    final_album_rating: float
    base_rating: float
    quality_boost: float


@dataclass(slots=True, frozen=True)
class AlbumRank:
    """The part of an album rating the artist engine consumes."""

    rank_value: int
    final_album_rating: float


@dataclass(slots=True, frozen=True)
class ArtistRatingResult:
    rank_value: ScaleValue
    rank_label: str
    avg_final_rating: int


@dataclass(slots=True)
class Album:
    """An album (release group) in the collection."""

    id: str
    title: str
    year: int | None = None
    primary_type: str = "Album"
    modifiers: AlbumModifiers = field(default_factory=AlbumModifiers)
    tracks: list[Track] = field(default_factory=list)
    artist_ids: list[str] = field(default_factory=list)
    cover_url: str | None = None
    mbid: str | None = None


@dataclass(slots=True)
class Artist:
    """An artist in the collection."""

    id: str
    name: str
    country: str | None = None
    image_url: str | None = None
    mbid: str | None = None
