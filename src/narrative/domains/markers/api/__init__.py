"""
Markers Domain API Routes

More/less markers: list, create, record updates, retire.
"""

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse
from typing import Any, Dict
import logging

from ....api.models import MarkerCreate, MarkerUpdateCreate
from ....api.responses import raise_validation_error, result_response, success_response
from ....config import get_config
from ....core.models import Marker
from ....repositories import get_marker_repository
from ..constants import SOURCE_OPTIONS
from ..services import MarkerProgressTracker, percent_complete, recent_updates

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/markers", tags=["markers"])


def marker_view(marker: Marker) -> Dict[str, Any]:
    data = marker.to_dict()
    data["percent_complete"] = round(percent_complete(marker), 1)
    data["recent_updates"] = [
        u.to_dict() for u in recent_updates(marker, get_config().history_display_limit)
    ]
    return data


@router.get("")
async def list_markers(
    client_email: str = Query(None),
    engagement_id: str = Query(None),
    include_inactive: bool = Query(False),
):
    """List markers for a client and/or engagement."""
    if not client_email and not engagement_id:
        raise_validation_error("client_email or engagement_id is required")
    tracker = MarkerProgressTracker(get_marker_repository())
    markers = await tracker.list_markers(
        client_email=client_email,
        engagement_id=engagement_id,
        include_inactive=include_inactive,
    )
    return JSONResponse(success_response([marker_view(m) for m in markers]))


@router.get("/sources")
async def list_sources():
    """Update sources a user can pick from."""
    return JSONResponse(success_response(
        [{"value": source.value, "label": label} for source, label in SOURCE_OPTIONS.items()]
    ))


@router.post("")
async def create_marker(body: MarkerCreate):
    """Create a marker together with its baseline history entry."""
    tracker = MarkerProgressTracker(get_marker_repository())
    result = await tracker.create_marker(
        client_email=body.client_email,
        marker_text=body.marker_text,
        direction=body.direction,
        baseline=body.baseline,
        target=body.target,
        engagement_id=body.engagement_id,
        fires_connection=body.fires_connection,
    )
    return result_response(result, marker_view, status_code=201)


@router.post("/{marker_id}/updates")
async def record_update(marker_id: str, body: MarkerUpdateCreate):
    """Append a score update."""
    tracker = MarkerProgressTracker(get_marker_repository())
    result = await tracker.record_update(marker_id, body.score, body.source, body.note)
    return result_response(result, marker_view, status_code=201)


@router.post("/{marker_id}/retire")
async def retire_marker(marker_id: str):
    """Soft-retire a marker. History is kept."""
    tracker = MarkerProgressTracker(get_marker_repository())
    result = await tracker.retire_marker(marker_id)
    return result_response(result, marker_view)


__all__ = ["router"]
