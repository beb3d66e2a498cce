# music_manager/rating/album.py

"""Track averages and the album rating engine.

Two different aggregations live here on purpose:

- ``calculate_track_average`` / ``calculate_album_average`` are plain means
  over *all* ratings of a track, used where no quality modifiers apply.
- ``compute_album_rating`` reads only the *first* rating of every track and
  weights it by the track length in minutes.

They give different numbers for tracks carrying several ratings.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from music_manager.domain.models import AlbumModifiers, AlbumRatingResult, Track
from music_manager.rating.scale import ALBUM_LABEL, quantize_rank

logger = logging.getLogger(__name__)

MIN_SCORE = 0
MAX_SCORE = 10

EXCELLENCE_THRESHOLD = 9
EXCELLENCE_BONUS = 1.05


def calculate_track_average(track: Track) -> float:
    """Mean score over all ratings of a track. A ``None`` score counts as 0."""
    if not track.ratings:
        return 0
    total = sum(r.score or 0 for r in track.ratings)
    return total / len(track.ratings)


def calculate_album_average(tracks: Sequence[Track]) -> float:
    """Unweighted mean of the track averages. Unrated tracks count as 0."""
    if not tracks:
        return 0
    return sum(calculate_track_average(t) for t in tracks) / len(tracks)


def compute_quality_boost(modifiers: AlbumModifiers | None) -> float:
    """Multiplier from the cover/production/mix sliders (unset counts as 0)."""
    if modifiers is None:
        modifiers = AlbumModifiers()

    cover = modifiers.cover if modifiers.cover is not None else 0
    production = modifiers.production if modifiers.production is not None else 0
    mix = modifiers.mix if modifiers.mix is not None else 0

    boost = 1 + (cover + production + mix) / 100

    if (
        cover >= EXCELLENCE_THRESHOLD
        and production >= EXCELLENCE_THRESHOLD
        and mix >= EXCELLENCE_THRESHOLD
    ):
        boost *= EXCELLENCE_BONUS

    return boost


def compute_album_rating(
    tracks: Sequence[Track],
    modifiers: AlbumModifiers | None = None,
) -> AlbumRatingResult:
    """Combine rated tracks and quality modifiers into one album verdict.

    Steps:
        1) Keep tracks that have a duration and a first rating with a score
        2) Base rating: sum of (minutes * score) over kept tracks
        3) Rank: quantized unweighted mean of the kept scores
        4) Final rating: base rating times the quality boost
    """
    total_rating_value = 0.0
    total_rank_value = 0.0
    count_rated = 0

    for track in tracks:
        score = track.ratings[0].score if track.ratings else None
        if score is None or track.duration_sec is None:
            continue
        total_rating_value += (track.duration_sec / 60) * score
        total_rank_value += score
        count_rated += 1

    mean_rank = total_rank_value / count_rated if count_rated > 0 else 0
    rank_value = quantize_rank(mean_rank)
    quality_boost = compute_quality_boost(modifiers)

    logger.debug(
        "Album rating: %d/%d tracks rated, mean rank %.3f -> %d, boost %.4f",
        count_rated,
        len(tracks),
        mean_rank,
        rank_value,
        quality_boost,
    )

    return AlbumRatingResult(
        rank_value=rank_value,
        rank_label=ALBUM_LABEL[rank_value],
        final_album_rating=total_rating_value * quality_boost,
        base_rating=total_rating_value,
        quality_boost=quality_boost,
    )


def _validate_range(value: object, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"{name} must be an integer, got {value!r}."
        raise ValueError(msg)
    if not MIN_SCORE <= value <= MAX_SCORE:
        msg = f"{name} must be between {MIN_SCORE} and {MAX_SCORE}, got {value}."
        raise ValueError(msg)
    return value


def validate_score(value: object) -> int:
    """Check a track score before it is stored."""
    return _validate_range(value, "score")


def validate_modifier(value: object) -> int:
    """Check a cover/production/mix slider value before it is stored."""
    return _validate_range(value, "modifier")
