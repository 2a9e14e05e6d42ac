# src/narrative/domains/zones/services/scoring.py
"""
Predictability Scorer

score = round(((avg - 1) / 3) * 100 + min(connections * 2, 16)), clamped to 0..100.
"""

from typing import Any

from ..constants import (
    CONNECTION_BONUS_CAP,
    CONNECTION_BONUS_PER,
    MAX_RATING,
    MAX_SCORE,
    MIN_RATING,
    MIN_SCORE,
)
from .classifier import RatingsInput, as_ratings, clamp, round_half_up


def connection_bonus(connection_count: Any) -> int:
    """+2 per connection, saturating at +16. Negative or unreadable counts give 0."""
    try:
        count = int(connection_count or 0)
    except (TypeError, ValueError):
        count = 0
    return min(max(count, 0) * CONNECTION_BONUS_PER, CONNECTION_BONUS_CAP)


def base_score(ratings: RatingsInput) -> float:
    """Mean rating rescaled from [1, 4] onto [0, 100]."""
    values = [clamp(v, MIN_RATING, MAX_RATING) for v in as_ratings(ratings).values()]
    average = sum(values) / len(values)
    return ((average - MIN_RATING) / (MAX_RATING - MIN_RATING)) * 100


def predictability_score(ratings: RatingsInput, connection_count: Any = 0) -> int:
    total = round_half_up(base_score(ratings) + connection_bonus(connection_count))
    return int(clamp(total, MIN_SCORE, MAX_SCORE))
