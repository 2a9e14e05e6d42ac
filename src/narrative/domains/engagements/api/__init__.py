"""
Engagements Domain API Routes

Start an engagement and drive its lifecycle.
"""

from fastapi import APIRouter, Query
from typing import Any, Dict
import logging

from ....api.models import EngagementCreate
from ....api.responses import result_response
from ....core.models import Engagement
from ....repositories import get_engagement_repository
from ..services import (
    EngagementLifecycle,
    available_transitions,
    phase_details,
    week_progress,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/engagements", tags=["engagements"])


def engagement_view(engagement: Engagement) -> Dict[str, Any]:
    data = engagement.to_dict()
    data["phase_details"] = phase_details(engagement)
    data["progress"] = week_progress(engagement)
    data["available_transitions"] = available_transitions(engagement)
    return data


def _lifecycle() -> EngagementLifecycle:
    return EngagementLifecycle(get_engagement_repository())


@router.post("")
async def start_engagement(body: EngagementCreate):
    """Start a new engagement at week 1."""
    result = await _lifecycle().start(body.client_email, body.start_date, body.coach_id)
    return result_response(result, engagement_view, status_code=201)


@router.get("")
async def get_client_engagement(client_email: str = Query(...)):
    """The client's open engagement."""
    result = await _lifecycle().current_for_client(client_email)
    return result_response(result, engagement_view)


@router.get("/{engagement_id}")
async def get_engagement(engagement_id: str):
    result = await _lifecycle().get(engagement_id)
    return result_response(result, engagement_view)


@router.post("/{engagement_id}/advance")
async def advance_week(engagement_id: str):
    """Advance one week. Rejected when paused, completed, or at week 12."""
    result = await _lifecycle().advance_week(engagement_id)
    return result_response(result, engagement_view)


@router.post("/{engagement_id}/pause")
async def toggle_pause(engagement_id: str):
    """Pause an active engagement or resume a paused one."""
    result = await _lifecycle().toggle_pause(engagement_id)
    return result_response(result, engagement_view)


@router.post("/{engagement_id}/complete")
async def complete_engagement(engagement_id: str):
    result = await _lifecycle().complete(engagement_id)
    return result_response(result, engagement_view)


__all__ = ["router"]
