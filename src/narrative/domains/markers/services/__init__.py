from .tracker import (
    MarkerProgressTracker,
    apply_update,
    clamp_score,
    new_marker,
    percent_complete,
    recent_updates,
    split_by_direction,
)

__all__ = [
    "MarkerProgressTracker",
    "apply_update",
    "clamp_score",
    "new_marker",
    "percent_complete",
    "recent_updates",
    "split_by_direction",
]
