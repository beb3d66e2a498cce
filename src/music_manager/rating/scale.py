# music_manager/rating/scale.py

"""The discrete rating scale, its labels and colours, and quantization onto it."""

from __future__ import annotations

import math
from types import MappingProxyType
from typing import Mapping

from music_manager.domain.models import ScaleValue

SCALE: tuple[ScaleValue, ...] = tuple(ScaleValue)

ALBUM_LABEL: Mapping[ScaleValue, str] = MappingProxyType(
    {
        ScaleValue.ZERO: "Poor",
        ScaleValue.ONE: "Fair",
        ScaleValue.TWO: "Quite good",
        ScaleValue.THREE: "Good",
        ScaleValue.FOUR: "More than good",
        ScaleValue.FIVE: "Very good",
        ScaleValue.SEVEN: "Excellent",
        ScaleValue.TEN: "Masterpiece",
    }
)

ARTIST_LABEL: Mapping[ScaleValue, str] = MappingProxyType(
    {
        ScaleValue.ZERO: "Forgettable",
        ScaleValue.ONE: "Mediocre",
        ScaleValue.TWO: "Decent",
        ScaleValue.THREE: "Solid",
        ScaleValue.FOUR: "Accomplished",
        ScaleValue.FIVE: "Outstanding",
        ScaleValue.SEVEN: "Iconic",
        ScaleValue.TEN: "Legendary",
    }
)

RATING_COLORS: Mapping[ScaleValue, str] = MappingProxyType(
    {
        ScaleValue.ZERO: "text-red-500",
        ScaleValue.ONE: "text-orange-500",
        ScaleValue.TWO: "text-amber-500",
        ScaleValue.THREE: "text-yellow-500",
        ScaleValue.FOUR: "text-lime-500",
        ScaleValue.FIVE: "text-green-500",
        ScaleValue.SEVEN: "text-sky-500",
        ScaleValue.TEN: "text-violet-500",
    }
)

RATING_BG: Mapping[ScaleValue, str] = MappingProxyType(
    {
        ScaleValue.ZERO: "bg-red-100",
        ScaleValue.ONE: "bg-orange-100",
        ScaleValue.TWO: "bg-amber-100",
        ScaleValue.THREE: "bg-yellow-100",
        ScaleValue.FOUR: "bg-lime-100",
        ScaleValue.FIVE: "bg-green-100",
        ScaleValue.SEVEN: "bg-sky-100",
        ScaleValue.TEN: "bg-violet-100",
    }
)


def quantize_rank(mean: float) -> ScaleValue:
    """Snap ``mean`` to the nearest scale value, favouring the larger on a tie.

    Out-of-range values land on the ends of the scale. NaN maps to 0,
    -inf to 0 and +inf to 10.
    """
    if math.isnan(mean):
        return ScaleValue.ZERO
    if math.isinf(mean):
        return ScaleValue.TEN if mean > 0 else ScaleValue.ZERO

    best = SCALE[0]
    best_diff = math.inf
    for value in SCALE:
        diff = abs(mean - value)
        if diff < best_diff or (diff == best_diff and value > best):
            best = value
            best_diff = diff
    return best


def _to_scale_value(value: int) -> ScaleValue:
    try:
        return ScaleValue(value)
    except ValueError:
        msg = f"{value!r} is not a value of the rating scale {[int(v) for v in SCALE]}."
        raise ValueError(msg) from None


def album_label(value: int) -> str:
    """Album/track label for a scale value."""
    return ALBUM_LABEL[_to_scale_value(value)]


def artist_label(value: int) -> str:
    """Artist label for a scale value."""
    return ARTIST_LABEL[_to_scale_value(value)]


def rating_color(value: int) -> str:
    return RATING_COLORS[_to_scale_value(value)]


def rating_background(value: int) -> str:
    return RATING_BG[_to_scale_value(value)]
