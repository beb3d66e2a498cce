# music_manager/transformers/albums.py

"""Album transformation layer.

Normalizes stored album/track records into domain objects and attaches the
computed album rating. The rating engine itself does no input checking, so
everything it receives passes through here first.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from music_manager.domain.models import (
    Album,
    AlbumModifiers,
    AlbumRatingResult,
    Rating,
    Track,
)
from music_manager.rating.album import compute_album_rating, validate_modifier
from music_manager.rating.artist import round_half_up

NO_RATING_LABEL = "—"


@dataclass(slots=True)
class AlbumWithRating:
    album: Album
    has_ratings: bool
    rating: AlbumRatingResult | None
    rank_label: str

    @property
    def final_album_rating(self) -> float:
        return self.rating.final_album_rating if self.rating else 0


def _first_present(raw: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if raw.get(key) is not None:
            return raw[key]
    return None


def to_number(value: Any, field: str) -> float | None:
    """Coerce a stored numeric field; ``None`` passes through.

    Numeric strings such as ``"8"`` or ``"3.5"`` are accepted. Anything else
    raises ``ValueError``.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        msg = f"{field} must be a number, got {value!r}."
        raise ValueError(msg)
    if isinstance(value, (int, float)):
        number = value
    elif isinstance(value, str):
        try:
            number = int(value)
        except ValueError:
            try:
                number = float(value)
            except ValueError:
                msg = f"{field} must be a number, got {value!r}."
                raise ValueError(msg) from None
    else:
        msg = f"{field} must be a number, got {type(value).__name__}."
        raise ValueError(msg)
    if isinstance(number, float) and not math.isfinite(number):
        msg = f"{field} must be finite, got {value!r}."
        raise ValueError(msg)
    return number


def _normalize_rating(raw: Any) -> Rating:
    if isinstance(raw, Rating):
        return Rating(score=to_number(raw.score, "score"), review=raw.review)
    if isinstance(raw, dict):
        return Rating(
            score=to_number(raw.get("score"), "score"),
            review=raw.get("review"),
        )
    # bare numbers are accepted as scores
    return Rating(score=to_number(raw, "score"))


def normalize_track(raw: dict[str, Any]) -> Track:
    """Build a Track from a stored record.

    ``ratings`` missing or None becomes an empty list. Seconds are read from
    ``durationSec``/``duration_sec``; without them ``durationMs``/``duration_ms``
    is converted to whole seconds. Numeric fields may be numeric strings; a
    non-numeric value or a non-object record raises ``ValueError``/``TypeError``.
    """
    if not isinstance(raw, dict):
        msg = f"track record must be an object, got {type(raw).__name__}."
        raise TypeError(msg)

    duration = to_number(
        _first_present(raw, "duration_sec", "durationSec"), "duration_sec"
    )
    if duration is None:
        duration_ms = to_number(
            _first_present(raw, "duration_ms", "durationMs"), "duration_ms"
        )
        if duration_ms is not None:
            duration = ms_to_seconds(duration_ms)

    ratings = raw.get("ratings") or []
    if not isinstance(ratings, list):
        msg = f"ratings must be a list, got {type(ratings).__name__}."
        raise TypeError(msg)

    number = to_number(raw.get("number"), "number")

    return Track(
        duration_sec=duration,
        ratings=[_normalize_rating(r) for r in ratings],
        number=int(number) if number is not None else None,
        title=raw.get("title") or "",
        mbid=raw.get("mbid"),
    )


def ms_to_seconds(duration_ms: float) -> int:
    """Milliseconds to whole seconds, halves rounding up."""
    return round_half_up(duration_ms / 1000)


def _normalize_modifier(raw: dict[str, Any], *keys: str) -> int | None:
    value = to_number(_first_present(raw, *keys), keys[0])
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return validate_modifier(value)


def normalize_modifiers(raw: dict[str, Any] | None) -> AlbumModifiers:
    """Read modifiers from either ``cover``/... or ``coverValue``/... keys.

    Values must be whole numbers in 0-10 (numeric strings are coerced).
    """
    if not raw:
        return AlbumModifiers()
    if not isinstance(raw, dict):
        msg = f"modifiers must be an object, got {type(raw).__name__}."
        raise TypeError(msg)
    return AlbumModifiers(
        cover=_normalize_modifier(raw, "cover", "coverValue", "cover_value"),
        production=_normalize_modifier(
            raw, "production", "productionValue", "production_value"
        ),
        mix=_normalize_modifier(raw, "mix", "mixValue", "mix_value"),
    )


def has_album_ratings(tracks: Iterable[Track]) -> bool:
    """True if any track carries at least one rating."""
    return any(t.ratings for t in tracks)


def transform_album_with_rating(album: Album) -> AlbumWithRating:
    """Attach the album rating, or a placeholder when nothing is rated yet."""
    has_ratings = has_album_ratings(album.tracks)
    if not has_ratings:
        return AlbumWithRating(
            album=album,
            has_ratings=False,
            rating=None,
            rank_label=NO_RATING_LABEL,
        )

    rating = compute_album_rating(album.tracks, album.modifiers)
    return AlbumWithRating(
        album=album,
        has_ratings=True,
        rating=rating,
        rank_label=rating.rank_label,
    )


def transform_albums_with_rating(albums: Sequence[Album]) -> list[AlbumWithRating]:
    return [transform_album_with_rating(a) for a in albums]
