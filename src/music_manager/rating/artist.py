# music_manager/rating/artist.py

"""Artist rating: aggregate per-album ratings into one artist verdict."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from typing import Protocol

from music_manager.domain.models import ArtistRatingResult, ScaleValue
from music_manager.rating.scale import ARTIST_LABEL, quantize_rank

logger = logging.getLogger(__name__)


class RatedAlbum(Protocol):
    rank_value: int
    final_album_rating: float


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (45.5 -> 46, -2.5 -> -2).

    Values just below a half stay down (0.49999999999999994 -> 0).
    """
    whole = math.floor(value)
    return whole + (1 if value - whole >= 0.5 else 0)


def compute_artist_rating(album_ratings: Iterable[RatedAlbum]) -> ArtistRatingResult:
    """Average the rated albums of an artist.

    Albums with ``rank_value == 0`` carry no ratings and are ignored. The mean
    of the raw rank values is quantized once; album ranks are not
    re-quantized individually.
    """
    rated = [a for a in album_ratings if a.rank_value > 0]
    if not rated:
        return ArtistRatingResult(
            rank_value=ScaleValue.ZERO,
            rank_label=ARTIST_LABEL[ScaleValue.ZERO],
            avg_final_rating=0,
        )

    mean_rank = sum(a.rank_value for a in rated) / len(rated)
    rank_value = quantize_rank(mean_rank)
    avg_final = sum(a.final_album_rating for a in rated) / len(rated)

    logger.debug(
        "Artist rating: %d rated albums, mean rank %.3f -> %d",
        len(rated),
        mean_rank,
        rank_value,
    )

    return ArtistRatingResult(
        rank_value=rank_value,
        rank_label=ARTIST_LABEL[rank_value],
        avg_final_rating=round_half_up(avg_final),
    )
