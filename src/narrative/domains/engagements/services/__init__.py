from .lifecycle import (
    EngagementLifecycle,
    advance_week,
    available_transitions,
    can_transition,
    complete,
    phase_details,
    phase_for_week,
    start_engagement,
    toggle_pause,
    week_progress,
)

__all__ = [
    "EngagementLifecycle",
    "advance_week",
    "available_transitions",
    "can_transition",
    "complete",
    "phase_details",
    "phase_for_week",
    "start_engagement",
    "toggle_pause",
    "week_progress",
]
