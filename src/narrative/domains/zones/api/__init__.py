"""
Zones Domain API Routes

Progress overview, stateless classification and snapshots.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
import logging

from ....api.models import RatingsRequest
from ....api.responses import ErrorCode, error_response, success_response
from ....repositories import get_alignment_repository
from ....services.narrative_engine import NarrativeEngine, evaluate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/zones", tags=["zones"])


@router.post("/classify")
async def classify(body: RatingsRequest):
    """Breakdown, score, growth edge and question for the given ratings. Nothing is stored."""
    overview = evaluate("", body.ratings, body.connection_count)
    data = overview.to_dict()
    data.pop("client_email")
    return JSONResponse(success_response(data))


@router.get("/{user}")
async def get_overview(user: str):
    """Latest progress overview for a user."""
    engine = NarrativeEngine(get_alignment_repository())
    overview = await engine.overview(user)
    return JSONResponse(success_response(overview.to_dict()))


@router.post("/{user}/snapshots")
async def create_snapshot(user: str, body: RatingsRequest):
    """Compute and store a zone snapshot from fresh ratings."""
    engine = NarrativeEngine(get_alignment_repository())
    overview = await engine.take_snapshot(user, body.ratings, body.connection_count)
    if overview is None:
        return JSONResponse(
            error_response(ErrorCode.WRITE_FAILED, "Failed to save snapshot"),
            status_code=500,
        )
    return JSONResponse(success_response(overview.to_dict()), status_code=201)


__all__ = ["router"]
