# src/narrative/domains/zones/constants.py
"""
Zones Domain Constants
"""

from ...core.models import FiresElement, Zone

# Rating -> zone lookup (ratings are clamped to 1..4 first)
ZONE_BY_RATING = {
    1: Zone.EXPLORING,
    2: Zone.DISCOVERING,
    3: Zone.PERFORMING,
    4: Zone.OWNING,
}

MIN_RATING = 1
MAX_RATING = 4

# Predictability bonus: +2 per connection, capped at +16 (8 connections)
CONNECTION_BONUS_PER = 2
CONNECTION_BONUS_CAP = 16

MIN_SCORE = 0
MAX_SCORE = 100

FIRES_LABELS = {
    FiresElement.FEELINGS: "Feelings",
    FiresElement.INFLUENCE: "Influence",
    FiresElement.RESILIENCE: "Resilience",
    FiresElement.ETHICS: "Ethics",
    FiresElement.STRENGTHS: "Strengths",
}

# Used in growth opportunity sentences
FIRES_FOCUS_PHRASES = {
    FiresElement.FEELINGS: "emotional awareness",
    FiresElement.INFLUENCE: "connection and influence",
    FiresElement.RESILIENCE: "resilience and persistence",
    FiresElement.ETHICS: "values alignment",
    FiresElement.STRENGTHS: "leveraging your strengths",
}

ZONE_ACTIONS = {
    Zone.EXPLORING: "Start by exploring",
    Zone.DISCOVERING: "Focus on discovering more about",
    Zone.PERFORMING: "Continue building",
    Zone.OWNING: "Deepen your mastery of",
}

DEFAULT_48H_QUESTION = "What's one small step you could take in the next 48 hours?"

QUESTION_BANK = {
    FiresElement.FEELINGS: {
        Zone.EXPLORING: "What's one small emotion you've been avoiding about this goal?",
        Zone.DISCOVERING: "How did you feel the last time you made progress on something similar?",
        Zone.PERFORMING: "What emotional pattern do you notice when you hit obstacles?",
        Zone.OWNING: "How can you share your emotional journey with someone who might benefit?",
    },
    FiresElement.INFLUENCE: {
        Zone.EXPLORING: "Who is one person you could tell about this goal today?",
        Zone.DISCOVERING: "What's one way you could help someone else while working on this?",
        Zone.PERFORMING: "How could you involve a mentor or advisor in your next step?",
        Zone.OWNING: "Who could you coach or guide based on what you've learned?",
    },
    FiresElement.RESILIENCE: {
        Zone.EXPLORING: "What's the smallest possible step you could take in the next 48 hours?",
        Zone.DISCOVERING: "When things got hard before, what kept you going?",
        Zone.PERFORMING: "What backup plan could you create for your biggest obstacle?",
        Zone.OWNING: "How can you build systems that make progress automatic?",
    },
    FiresElement.ETHICS: {
        Zone.EXPLORING: "Does this goal align with what matters most to you? Why or why not?",
        Zone.DISCOVERING: "What value does achieving this goal serve in your life?",
        Zone.PERFORMING: "Where might you be tempted to compromise your values?",
        Zone.OWNING: "How does this goal serve something bigger than yourself?",
    },
    FiresElement.STRENGTHS: {
        Zone.EXPLORING: "What's one skill you already have that could help with this goal?",
        Zone.DISCOVERING: "What strength helped you succeed in a similar situation before?",
        Zone.PERFORMING: "How could you leverage your top strength more intentionally?",
        Zone.OWNING: "What unique combination of strengths makes you ideal for this goal?",
    },
}
