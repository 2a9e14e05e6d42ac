# src/narrative/domains/exchange/services/feed.py
"""
Feed Aggregation

Builds a viewer's feed:
1. resolve the author set (circle and/or self)
2. fetch every content kind concurrently, restricted to those authors
3. merge in fixed kind order, skipping ids already seen
4. newest first, truncated to the feed limit

A kind whose fetch fails is logged and left out; the rest still make the feed.
"""

import asyncio
import logging
from typing import List, Optional, Set

from ....config import get_config
from ....core.models import FeedItem, ShareableContent, parse_datetime
from ....repositories import ContentRepository
from ..constants import FEED_KINDS
from .circle import CircleResolver

logger = logging.getLogger(__name__)


def display_name(email: str) -> str:
    return (email or "").split("@")[0]


def to_feed_item(record: ShareableContent, viewer: str) -> FeedItem:
    return FeedItem(
        id=record.id,
        kind=record.kind,
        text=record.text,
        author=record.author,
        author_name=display_name(record.author),
        created_at=record.created_at,
        is_own=record.author == viewer,
        fires_extracted=list(record.fires_tags),
        prediction_id=record.prediction_id,
        recipient=record.recipient,
    )


def rank_feed(items: List[FeedItem], limit: int) -> List[FeedItem]:
    """Newest first; undated items sink to the end in arrival order. Naive times count as UTC."""
    dated = sorted(
        (item for item in items if item.created_at is not None),
        key=lambda item: parse_datetime(item.created_at),
        reverse=True,
    )
    undated = [item for item in items if item.created_at is None]
    return (dated + undated)[:limit]


class FeedAggregator:
    """Merges shareable content from a viewer's circle into one ranked feed."""

    def __init__(
        self,
        content_repository: ContentRepository,
        circle_resolver: CircleResolver,
        limit: Optional[int] = None,
    ):
        self.content_repository = content_repository
        self.circle_resolver = circle_resolver
        self.limit = limit if limit is not None else get_config().feed_limit

    async def author_set(self, viewer: str, filter_by_circle: bool, include_own: bool) -> Set[str]:
        authors: Set[str] = set()
        if filter_by_circle:
            authors |= await self.circle_resolver.resolve(viewer, for_feed=True)
        if include_own:
            authors.add(viewer)
        return authors

    async def build_feed(
        self,
        viewer: str,
        filter_by_circle: bool = True,
        include_own: bool = False,
    ) -> List[FeedItem]:
        authors = await self.author_set(viewer, filter_by_circle, include_own)
        if not authors:
            return []

        results = await asyncio.gather(
            *[
                self.content_repository.fetch_shareable_content(kind, authors, limit=self.limit)
                for kind in FEED_KINDS
            ],
            return_exceptions=True,
        )

        seen_ids: Set[str] = set()
        items: List[FeedItem] = []
        for kind, result in zip(FEED_KINDS, results):
            if isinstance(result, Exception):
                logger.warning(f"⚠️ Skipping {kind.value} content for {viewer}'s feed: {result}")
                continue
            for record in result:
                if record.id in seen_ids:
                    continue
                seen_ids.add(record.id)
                items.append(to_feed_item(record, viewer))

        feed = rank_feed(items, self.limit)
        logger.debug(f"Feed for {viewer}: {len(feed)} of {len(items)} items from {len(authors)} authors")
        return feed
