"""
Core - Domain values and typed results shared across all domains.
"""

from .models import (
    FIRES_ORDER,
    TOTAL_WEEKS,
    AlignmentRatings,
    ConnectionSummary,
    ConnectionType,
    ContentKind,
    Engagement,
    EngagementStatus,
    FeedItem,
    FiresElement,
    Marker,
    MarkerDirection,
    MarkerUpdate,
    Phase,
    ShareableContent,
    UpdateSource,
    VisibilityEdge,
    Zone,
    ZoneBreakdown,
    phase_for_week,
)
from .results import EngineErrorCode, OperationResult

__all__ = [
    "FIRES_ORDER",
    "TOTAL_WEEKS",
    "AlignmentRatings",
    "ConnectionSummary",
    "ConnectionType",
    "ContentKind",
    "Engagement",
    "EngagementStatus",
    "FeedItem",
    "FiresElement",
    "Marker",
    "MarkerDirection",
    "MarkerUpdate",
    "Phase",
    "ShareableContent",
    "UpdateSource",
    "VisibilityEdge",
    "Zone",
    "ZoneBreakdown",
    "phase_for_week",
    "EngineErrorCode",
    "OperationResult",
]
