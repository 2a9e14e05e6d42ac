from .classifier import classify_breakdown, classify_zone
from .growth_edge import growth_opportunity_text, highest, lowest, question_for
from .scoring import connection_bonus, predictability_score

__all__ = [
    "classify_zone",
    "classify_breakdown",
    "predictability_score",
    "connection_bonus",
    "lowest",
    "highest",
    "question_for",
    "growth_opportunity_text",
]
