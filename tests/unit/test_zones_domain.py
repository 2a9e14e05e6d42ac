# tests/unit/test_zones_domain.py
"""
Unit tests for the Zones Domain.

- Classifier: rating -> zone, breakdown in canonical order
- Scoring: predictability score and connection bonus
- Growth edge: lowest / highest with first-in-order tie-break
- Questions and growth opportunity text
"""

import math

import pytest

from narrative.core.models import AlignmentRatings, FiresElement, Zone, ZoneBreakdown
from narrative.domains.zones.constants import DEFAULT_48H_QUESTION
from narrative.domains.zones.services import (
    classify_breakdown,
    classify_zone,
    connection_bonus,
    growth_opportunity_text,
    highest,
    lowest,
    predictability_score,
    question_for,
)


def breakdown_of(*zones):
    return ZoneBreakdown(
        feelings=zones[0],
        influence=zones[1],
        resilience=zones[2],
        ethics=zones[3],
        strengths=zones[4],
    )


# =============================================================================
# CLASSIFIER
# =============================================================================

class TestClassifyZone:
    """Rating -> zone lookup."""

    @pytest.mark.parametrize("rating, zone", [
        (1, Zone.EXPLORING),
        (2, Zone.DISCOVERING),
        (3, Zone.PERFORMING),
        (4, Zone.OWNING),
    ])
    def test_fixed_lookup(self, rating, zone):
        assert classify_zone(rating) == zone

    def test_out_of_range_is_clamped(self):
        assert classify_zone(0) == Zone.EXPLORING
        assert classify_zone(-3) == Zone.EXPLORING
        assert classify_zone(9) == Zone.OWNING

    def test_rounds_to_nearest(self):
        assert classify_zone(1.49) == Zone.EXPLORING
        assert classify_zone(2.5) == Zone.PERFORMING
        assert classify_zone(3.6) == Zone.OWNING

    def test_unreadable_rating_is_exploring(self):
        assert classify_zone(None) == Zone.EXPLORING
        assert classify_zone("not a number") == Zone.EXPLORING
        assert classify_zone(math.nan) == Zone.EXPLORING

    def test_monotonic_over_range(self):
        ratings = [1 + i * 0.1 for i in range(31)]
        zones = [classify_zone(r) for r in ratings]
        assert zones == sorted(zones)


class TestClassifyBreakdown:
    """Per-dimension classification."""

    def test_canonical_order_sequence(self):
        breakdown = classify_breakdown([4, 3, 2, 4, 1])

        assert breakdown.feelings == Zone.OWNING
        assert breakdown.influence == Zone.PERFORMING
        assert breakdown.resilience == Zone.DISCOVERING
        assert breakdown.ethics == Zone.OWNING
        assert breakdown.strengths == Zone.EXPLORING

    def test_legacy_questionnaire_keys(self):
        breakdown = classify_breakdown({"q1": 4, "q2": 3, "q3": 2, "q4": 4, "q5": 1})
        assert breakdown == classify_breakdown([4, 3, 2, 4, 1])

    def test_dimension_keys(self):
        breakdown = classify_breakdown({"strengths": 4, "feelings": 1})
        assert breakdown.strengths == Zone.OWNING
        assert breakdown.feelings == Zone.EXPLORING
        assert breakdown.ethics == Zone.EXPLORING

    def test_short_sequence_pads_with_lowest(self):
        breakdown = classify_breakdown([3, 3])
        assert breakdown.resilience == Zone.EXPLORING
        assert breakdown.strengths == Zone.EXPLORING

    def test_to_dict_uses_labels(self):
        breakdown = classify_breakdown(AlignmentRatings(4, 3, 2, 4, 1))
        assert breakdown.to_dict() == {
            "feelings": "Owning",
            "influence": "Performing",
            "resilience": "Discovering",
            "ethics": "Owning",
            "strengths": "Exploring",
        }

    def test_from_dict_round_trip_and_incomplete(self):
        breakdown = classify_breakdown([1, 2, 3, 4, 1])
        assert ZoneBreakdown.from_dict(breakdown.to_dict()) == breakdown

        with pytest.raises(KeyError):
            ZoneBreakdown.from_dict({"feelings": "Owning"})


# =============================================================================
# SCORING
# =============================================================================

class TestPredictabilityScore:
    """Average rating rescaled to 0..100 plus connection bonus."""

    def test_all_lowest_is_zero(self):
        assert predictability_score([1, 1, 1, 1, 1], 0) == 0

    def test_all_highest_is_hundred(self):
        assert predictability_score([4, 4, 4, 4, 4], 0) == 100

    def test_worked_example(self):
        # avg 2.2 -> base 40, 3 connections -> +6
        assert predictability_score([3, 2, 2, 3, 1], 3) == 46

    def test_mixed_ratings_with_connections(self):
        # avg 2.8 -> base 60, +6
        assert predictability_score([4, 3, 2, 4, 1], 3) == 66

    def test_rounds_half_up(self):
        # avg 1.5 -> base 16.67, +4 -> 20.67
        assert predictability_score([1, 2, 1, 2, 1.5], 2) == 21
        # avg 2.5 -> base 50, no bonus
        assert predictability_score([2.5] * 5, 0) == 50

    def test_bonus_saturates_after_eight_connections(self):
        ratings = [2, 2, 2, 2, 2]
        assert predictability_score(ratings, 8) == predictability_score(ratings, 9)
        assert predictability_score(ratings, 8) == predictability_score(ratings, 500)

    def test_clamped_at_hundred(self):
        assert predictability_score([4, 4, 4, 4, 4], 8) == 100

    def test_monotonic_in_average_rating(self):
        # Raise one dimension at a time from all 1s to all 4s
        ratings = [1, 1, 1, 1, 1]
        steps = [list(ratings)]
        for index in range(5):
            for value in (2, 3, 4):
                ratings[index] = value
                steps.append(list(ratings))

        for connections in (0, 3, 8):
            scores = [predictability_score(step, connections) for step in steps]
            assert scores == sorted(scores)
            assert scores[-1] == 100

    def test_monotonic_in_connections(self):
        ratings = [2, 3, 2, 3, 2]
        scores = [predictability_score(ratings, c) for c in range(12)]
        assert scores == sorted(scores)

    def test_out_of_range_ratings_are_clamped(self):
        assert predictability_score([9, 9, 9, 9, 9], 0) == 100
        assert predictability_score([-2, 0, 0, 0, 0], 0) == 0


class TestConnectionBonus:
    """+2 per connection, capped at 16."""

    def test_linear_then_capped(self):
        assert connection_bonus(0) == 0
        assert connection_bonus(3) == 6
        assert connection_bonus(8) == 16
        assert connection_bonus(20) == 16

    def test_negative_or_missing_counts(self):
        assert connection_bonus(-4) == 0
        assert connection_bonus(None) == 0
        assert connection_bonus("many") == 0


# =============================================================================
# GROWTH EDGE
# =============================================================================

class TestGrowthEdge:
    """Lowest / highest dimension with stable tie-break."""

    def test_end_to_end_example(self):
        breakdown = classify_breakdown([4, 3, 2, 4, 1])

        assert lowest(breakdown) == (FiresElement.STRENGTHS, Zone.EXPLORING)
        assert highest(breakdown) == (FiresElement.FEELINGS, Zone.OWNING)

    def test_tie_goes_to_first_in_canonical_order(self):
        breakdown = breakdown_of(
            Zone.OWNING, Zone.DISCOVERING, Zone.PERFORMING, Zone.DISCOVERING, Zone.OWNING
        )
        assert lowest(breakdown) == (FiresElement.INFLUENCE, Zone.DISCOVERING)
        assert highest(breakdown) == (FiresElement.FEELINGS, Zone.OWNING)

    def test_uniform_breakdown_picks_feelings(self):
        breakdown = breakdown_of(*[Zone.PERFORMING] * 5)
        assert lowest(breakdown)[0] == FiresElement.FEELINGS
        assert highest(breakdown)[0] == FiresElement.FEELINGS

    def test_independent_of_mapping_order(self):
        forward = ZoneBreakdown.from_dict({
            "feelings": "Owning", "influence": "Exploring", "resilience": "Owning",
            "ethics": "Exploring", "strengths": "Performing",
        })
        backward = ZoneBreakdown.from_dict({
            "strengths": "Performing", "ethics": "Exploring", "resilience": "Owning",
            "influence": "Exploring", "feelings": "Owning",
        })
        assert lowest(forward) == lowest(backward) == (FiresElement.INFLUENCE, Zone.EXPLORING)


class TestQuestionsAndText:
    """48-hour question bank and growth opportunity sentence."""

    def test_question_for_known_combination(self):
        question = question_for(FiresElement.STRENGTHS, Zone.EXPLORING)
        assert question == "What's one skill you already have that could help with this goal?"

    def test_every_combination_has_a_question(self):
        for element in FiresElement:
            for zone in Zone:
                assert question_for(element, zone) != DEFAULT_48H_QUESTION

    def test_unknown_combination_falls_back(self):
        assert question_for("unknown", Zone.OWNING) == DEFAULT_48H_QUESTION

    def test_growth_opportunity_text(self):
        text = growth_opportunity_text(FiresElement.RESILIENCE, Zone.DISCOVERING)
        assert text == (
            "Focus on discovering more about resilience and persistence "
            "to increase your chances of success."
        )
