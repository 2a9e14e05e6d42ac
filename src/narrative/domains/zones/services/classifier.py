# src/narrative/domains/zones/services/classifier.py
"""
Zone Classifier

Maps raw 1-4 alignment ratings onto ordinal competency zones. Noisy input is
clamped, never rejected.
"""

import math
from typing import Any, Mapping, Sequence, Union

from ....core.models import FIRES_ORDER, AlignmentRatings, Zone, ZoneBreakdown
from ..constants import MAX_RATING, MIN_RATING, ZONE_BY_RATING

RatingsInput = Union[AlignmentRatings, Sequence[Any], Mapping[str, Any]]


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (2.5 -> 3), unlike round()."""
    return int(math.floor(value + 0.5))


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def classify_zone(rating: Any) -> Zone:
    """Clamp to [1, 4], round to nearest, look up the zone. Unreadable ratings are Exploring."""
    try:
        number = float(rating)
    except (TypeError, ValueError):
        return Zone.EXPLORING
    if math.isnan(number):
        return Zone.EXPLORING
    clamped = clamp(number, MIN_RATING, MAX_RATING)
    return ZONE_BY_RATING.get(round_half_up(clamped), Zone.EXPLORING)


def as_ratings(ratings: RatingsInput) -> AlignmentRatings:
    """Accept AlignmentRatings, a canonical-order sequence, or a mapping."""
    if isinstance(ratings, AlignmentRatings):
        return ratings
    if isinstance(ratings, Mapping):
        return AlignmentRatings.from_mapping(ratings)
    return AlignmentRatings.from_sequence(ratings)


def classify_breakdown(ratings: RatingsInput) -> ZoneBreakdown:
    """Classify each dimension in canonical order."""
    normalized = as_ratings(ratings)
    return ZoneBreakdown(**{
        element.value: classify_zone(normalized.get(element))
        for element in FIRES_ORDER
    })
