# src/narrative/domains/markers/constants.py
"""
Markers Domain Constants
"""

from ...core.models import UpdateSource

# Marker scores (baseline, target, current, updates) live on a 1-10 scale
MIN_MARKER_SCORE = 1
MAX_MARKER_SCORE = 10

BASELINE_NOTE = "Initial baseline score"

# Sources a coach or client can pick when recording an update
SOURCE_OPTIONS = {
    UpdateSource.SESSION: "Session",
    UpdateSource.WEEKLY_CHECK: "Weekly Check",
    UpdateSource.SELF_REPORT: "Self-Report",
    UpdateSource.COACH_OBSERVATION: "Coach Observation",
}
