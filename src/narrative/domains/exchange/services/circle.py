# src/narrative/domains/exchange/services/circle.py
"""
Circle Resolution

A user's circle is everyone joined to them by a visibility edge in either
direction. One-directional edges still count for visibility; direction is
kept only for display (mutual / you invited / invited you).
"""

import logging
from typing import Dict, Iterable, List, Optional, Set

from ....core.models import (
    ConnectionSummary,
    ConnectionType,
    ShareableContent,
    VisibilityEdge,
)
from ....repositories import VisibilityRepository

logger = logging.getLogger(__name__)


def resolve_circle(user: str, edges: Iterable[VisibilityEdge], for_feed: bool = True) -> Set[str]:
    """
    Users visible to ``user`` through ``edges``.

    With ``for_feed`` muted edges are skipped. Self-edges never put the user
    in their own circle.
    """
    circle: Set[str] = set()
    for edge in edges:
        if for_feed and edge.is_muted:
            continue
        if edge.from_user == user:
            circle.add(edge.to_user)
        if edge.to_user == user:
            circle.add(edge.from_user)
    circle.discard(user)
    return circle


def describe_connections(
    user: str,
    edges: Iterable[VisibilityEdge],
    share_records: Iterable[ShareableContent] = (),
) -> List[ConnectionSummary]:
    """
    One summary per other user, newest activity first.

    Share count covers records sent between the pair in either direction.
    Last activity is the newest such share, else the newest edge creation.
    """
    outgoing: Dict[str, VisibilityEdge] = {}
    incoming: Dict[str, VisibilityEdge] = {}
    for edge in edges:
        if edge.from_user == user and edge.to_user != user:
            outgoing[edge.to_user] = edge
        elif edge.to_user == user and edge.from_user != user:
            incoming[edge.from_user] = edge

    shares = list(share_records)
    summaries = []
    for other in sorted(set(outgoing) | set(incoming)):
        if other in outgoing and other in incoming:
            connection_type = ConnectionType.MUTUAL
        elif other in outgoing:
            connection_type = ConnectionType.YOU_INVITED
        else:
            connection_type = ConnectionType.INVITED_YOU

        pair_shares = [
            s for s in shares
            if (s.author == user and s.recipient == other)
            or (s.author == other and s.recipient == user)
        ]
        pair_edges = [e for e in (outgoing.get(other), incoming.get(other)) if e is not None]
        edge_times = [e.created_at for e in pair_edges if e.created_at]
        share_times = [s.created_at for s in pair_shares if s.created_at]

        summaries.append(
            ConnectionSummary(
                email=other,
                connection_type=connection_type,
                share_count=len(pair_shares),
                last_activity=max(share_times) if share_times else (max(edge_times) if edge_times else None),
                created_at=min(edge_times) if edge_times else None,
                edge_id=pair_edges[0].id,
            )
        )

    summaries.sort(key=lambda s: s.last_activity.timestamp() if s.last_activity else 0, reverse=True)
    return summaries


class CircleResolver:
    """Resolves circles and connection summaries from the visibility edges."""

    def __init__(self, repository: VisibilityRepository):
        self.repository = repository

    async def fetch_edges(self, user: str) -> List[VisibilityEdge]:
        return await self.repository.fetch_visibility_edges(user)

    async def resolve(self, user: str, for_feed: bool = True) -> Set[str]:
        return resolve_circle(user, await self.fetch_edges(user), for_feed=for_feed)

    async def connections(
        self,
        user: str,
        share_records: Optional[Iterable[ShareableContent]] = None,
    ) -> List[ConnectionSummary]:
        return describe_connections(user, await self.fetch_edges(user), share_records or ())
