# src/narrative/domains/engagements/constants.py
"""
Engagements Domain Constants
"""

from ...core.models import TOTAL_WEEKS, EngagementStatus, Phase

FIRST_WEEK = 1
LAST_WEEK = TOTAL_WEEKS

# Phase configuration
PHASES = [
    {"key": Phase.NAME, "label": "NAME", "builds": "CLARITY", "week_range": (1, 4)},
    {"key": Phase.VALIDATE, "label": "VALIDATE", "builds": "CONFIDENCE", "week_range": (5, 8)},
    {"key": Phase.COMMUNICATE, "label": "COMMUNICATE", "builds": "INFLUENCE", "week_range": (9, 12)},
]

# Lifecycle operations and the statuses they are valid from.
# Completed is terminal: it appears in no list.
STATUS_TRANSITIONS = {
    "advance": [EngagementStatus.ACTIVE],
    "toggle_pause": [EngagementStatus.ACTIVE, EngagementStatus.PAUSED],
    "complete": [EngagementStatus.ACTIVE, EngagementStatus.PAUSED],
}
