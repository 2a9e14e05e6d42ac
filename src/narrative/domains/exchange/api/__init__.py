"""
Exchange Domain API Routes

Circle, connection summaries and the shared feed.
"""

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse
import logging

from ....api.responses import success_response
from ....core.models import ContentKind
from ....repositories import (
    DataUnavailableError,
    get_content_repository,
    get_visibility_repository,
)
from ..services import (
    CircleResolver,
    FeedAggregator,
    describe_connections,
    resolve_circle,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/exchange", tags=["exchange"])


@router.get("/{user}/circle")
async def get_circle(user: str):
    """Users whose content can reach this user's feed."""
    resolver = CircleResolver(get_visibility_repository())
    circle = await resolver.resolve(user, for_feed=True)
    return JSONResponse(success_response(sorted(circle)))


@router.get("/{user}/connections")
async def get_connections(user: str):
    """Connections with direction, share count and last activity."""
    edges = await CircleResolver(get_visibility_repository()).fetch_edges(user)
    members = resolve_circle(user, edges, for_feed=False)
    shares = []
    if members:
        try:
            shares = await get_content_repository().fetch_shareable_content(
                ContentKind.SHARE, members | {user}
            )
        except DataUnavailableError as e:
            logger.warning(f"⚠️ Share counts unavailable for {user}: {e}")
    summaries = describe_connections(user, edges, shares)
    return JSONResponse(success_response([s.to_dict() for s in summaries]))


@router.get("/{user}/feed")
async def get_feed(
    user: str,
    filter_by_circle: bool = Query(True),
    include_own: bool = Query(False),
):
    """The user's feed, newest first."""
    aggregator = FeedAggregator(
        get_content_repository(),
        CircleResolver(get_visibility_repository()),
    )
    items = await aggregator.build_feed(
        user,
        filter_by_circle=filter_by_circle,
        include_own=include_own,
    )
    return JSONResponse(success_response([item.to_dict() for item in items]))


__all__ = ["router"]
