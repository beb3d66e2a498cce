# music_manager/domain/edits.py

"""Write operations on albums: rating tracks and setting quality modifiers.

The collection has a single owner, so "the user's rating" of a track is its
first rating. Upserting replaces it, deleting removes it; any further ratings
on the track are left alone.
"""

from __future__ import annotations

import logging

from music_manager.domain.models import Album, AlbumModifiers, Rating, Track
from music_manager.rating.album import validate_modifier, validate_score

logger = logging.getLogger(__name__)


def find_track(album: Album, number: int) -> Track:
    """Return the track with the given number or raise LookupError."""
    for track in album.tracks:
        if track.number == number:
            return track
    msg = f"Album {album.id} has no track number {number}."
    raise LookupError(msg)


def set_track_rating(
    album: Album,
    number: int,
    score: int,
    review: str | None = None,
) -> Rating:
    """Create or replace a track's rating; the old review stays if none is given."""
    score = validate_score(score)
    track = find_track(album, number)

    if track.ratings:
        previous = track.ratings[0]
        rating = Rating(
            score=score,
            review=review if review is not None else previous.review,
        )
        track.ratings[0] = rating
    else:
        rating = Rating(score=score, review=review)
        track.ratings.append(rating)

    logger.debug("Rated track %s of album %s: %s", number, album.id, score)
    return rating


def delete_track_rating(album: Album, number: int) -> bool:
    """Remove the rating of a track. Returns False if it had none."""
    track = find_track(album, number)
    if not track.ratings:
        return False
    del track.ratings[0]
    return True


def set_album_modifiers(
    album: Album,
    *,
    cover: int,
    production: int,
    mix: int,
) -> AlbumModifiers:
    modifiers = AlbumModifiers(
        cover=validate_modifier(cover),
        production=validate_modifier(production),
        mix=validate_modifier(mix),
    )
    album.modifiers = modifiers
    return modifiers
