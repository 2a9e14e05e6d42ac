# src/narrative/domains/exchange/services/feed_session.py
"""
Feed Session

Holds the feed for whoever is currently viewing. Switching viewer cancels
any load still in flight, and a load that finishes after a switch is
discarded instead of being applied to the new viewer.
"""

import asyncio
import logging
from typing import List, Optional

from ....core.models import FeedItem
from .feed import FeedAggregator

logger = logging.getLogger(__name__)


class FeedSession:
    def __init__(self, aggregator: FeedAggregator, viewer: Optional[str] = None):
        self.aggregator = aggregator
        self.viewer = viewer
        self.items: List[FeedItem] = []
        self._generation = 0
        self._task: Optional[asyncio.Task] = None

    @property
    def loading(self) -> bool:
        return self._task is not None and not self._task.done()

    def switch_viewer(self, viewer: Optional[str]) -> None:
        if self._task is not None and not self._task.done():
            logger.info(f"Cancelling feed load for {self.viewer}: viewer switched")
            self._task.cancel()
        self._task = None
        self._generation += 1
        self.viewer = viewer
        self.items = []

    async def load(self, filter_by_circle: bool = True, include_own: bool = False) -> Optional[List[FeedItem]]:
        """
        Build and apply the feed for the current viewer.

        Returns the applied items, or None when the viewer changed before the
        load finished.
        """
        if self.viewer is None:
            self.items = []
            return self.items

        generation = self._generation
        viewer = self.viewer
        task = asyncio.create_task(
            self.aggregator.build_feed(viewer, filter_by_circle=filter_by_circle, include_own=include_own)
        )
        self._task = task
        try:
            items = await task
        except asyncio.CancelledError:
            if generation != self._generation:
                logger.debug(f"Discarded cancelled feed load for {viewer}")
                return None
            raise
        finally:
            if self._task is task:
                self._task = None

        if generation != self._generation:
            logger.debug(f"Discarded stale feed for {viewer}")
            return None
        self.items = items
        return items
