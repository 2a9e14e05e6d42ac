# src/narrative/api/models.py
"""
Pydantic models for API request validation.

Provides:
- Request validation with automatic 422 errors
- Clear API contracts
- OpenAPI schema generation

Numeric ranges are deliberately not validated here: the engine clamps
noisy scores and ratings instead of rejecting them.
"""

from datetime import date
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, field_validator

from ..core.models import FiresElement, MarkerDirection, UpdateSource


# -------------------------
# Zones
# -------------------------

class RatingsRequest(BaseModel):
    """Alignment ratings in canonical order, or keyed by dimension / q1..q5."""
    ratings: Union[List[Optional[float]], Dict[str, Optional[float]]]
    connection_count: int = 0

    @field_validator("ratings")
    @classmethod
    def validate_ratings(cls, v: Any) -> Any:
        if isinstance(v, list) and len(v) > 5:
            raise ValueError("at most 5 ratings (feelings, influence, resilience, ethics, strengths)")
        return v


# -------------------------
# Markers
# -------------------------

class MarkerCreate(BaseModel):
    """Request model for creating a more/less marker."""
    client_email: str = Field(..., min_length=1)
    marker_text: str = Field(..., min_length=1, max_length=500)
    direction: MarkerDirection
    baseline: float
    target: float
    engagement_id: Optional[str] = None
    fires_connection: Optional[FiresElement] = None

    @field_validator("marker_text")
    @classmethod
    def validate_marker_text(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("marker_text must not be blank")
        return v


class MarkerUpdateCreate(BaseModel):
    """Request model for recording a marker score."""
    score: float
    source: UpdateSource = UpdateSource.SESSION
    note: Optional[str] = Field(None, max_length=2000)


# -------------------------
# Engagements
# -------------------------

class EngagementCreate(BaseModel):
    """Request model for starting an engagement."""
    client_email: str = Field(..., min_length=1)
    start_date: Optional[date] = None
    coach_id: Optional[str] = None
