# tests/unit/test_exchange_domain.py
"""
Unit tests for the Exchange Domain.

- Circle resolution and connection summaries
- Feed aggregation: author set, dedupe, ranking, limit, partial failure
- Feed session: stale loads are discarded after a viewer switch
"""

import asyncio
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from narrative.core import ConnectionType, ContentKind
from narrative.domains.exchange.services import (
    CircleResolver,
    FeedAggregator,
    FeedSession,
    describe_connections,
    resolve_circle,
)
from narrative.repositories import DataUnavailableError, InMemoryContentRepository

ALICE = "alice@example.com"
BOB = "bob@example.com"
CARA = "cara@example.com"
DEV = "dev@example.com"


# =============================================================================
# CIRCLE
# =============================================================================

class TestResolveCircle:
    def test_mutual_edges(self, edge_factory):
        edges = [edge_factory(ALICE, BOB), edge_factory(BOB, ALICE)]

        assert resolve_circle(ALICE, edges) == {BOB}
        assert resolve_circle(BOB, edges) == {ALICE}

    def test_one_directional_edge_counts_both_ways(self, edge_factory):
        edges = [edge_factory(ALICE, BOB)]

        assert resolve_circle(ALICE, edges) == {BOB}
        assert resolve_circle(BOB, edges) == {ALICE}

    def test_self_edge_is_ignored(self, edge_factory):
        assert resolve_circle(ALICE, [edge_factory(ALICE, ALICE)]) == set()

    def test_muted_edge_excluded_from_feed_circle_only(self, edge_factory):
        edges = [edge_factory(ALICE, BOB, muted=True), edge_factory(CARA, ALICE)]

        assert resolve_circle(ALICE, edges, for_feed=True) == {CARA}
        assert resolve_circle(ALICE, edges, for_feed=False) == {BOB, CARA}

    def test_unrelated_edges_ignored(self, edge_factory):
        assert resolve_circle(ALICE, [edge_factory(BOB, CARA)]) == set()


class TestDescribeConnections:
    def test_direction_labels(self, edge_factory):
        edges = [
            edge_factory(ALICE, BOB),
            edge_factory(BOB, ALICE),
            edge_factory(ALICE, CARA),
            edge_factory(DEV, ALICE),
        ]

        summaries = {s.email: s for s in describe_connections(ALICE, edges)}

        assert summaries[BOB].connection_type == ConnectionType.MUTUAL
        assert summaries[CARA].connection_type == ConnectionType.YOU_INVITED
        assert summaries[DEV].connection_type == ConnectionType.INVITED_YOU

    def test_share_count_and_last_activity(self, edge_factory, content_factory):
        edges = [edge_factory(ALICE, BOB, day=1), edge_factory(ALICE, CARA, day=2)]
        shares = [
            content_factory(ALICE, recipient=BOB, day=5),
            content_factory(BOB, recipient=ALICE, day=9),
            content_factory(BOB, recipient=CARA, day=20),
        ]

        summaries = describe_connections(ALICE, edges, shares)

        assert [s.email for s in summaries] == [BOB, CARA]
        assert summaries[0].share_count == 2
        assert summaries[0].last_activity == datetime(2024, 1, 9, 12, tzinfo=timezone.utc)
        assert summaries[1].share_count == 0
        assert summaries[1].last_activity == datetime(2024, 1, 2, 12, tzinfo=timezone.utc)


class TestCircleResolver:
    @pytest.mark.asyncio
    async def test_queries_both_directions(self, visibility_repo, edge_factory):
        visibility_repo.add_edge(edge_factory(ALICE, BOB))
        visibility_repo.add_edge(edge_factory(CARA, ALICE))

        circle = await CircleResolver(visibility_repo).resolve(ALICE)

        assert circle == {BOB, CARA}

    @pytest.mark.asyncio
    async def test_failed_direction_degrades(self, visibility_repo, edge_factory):
        visibility_repo.add_edge(edge_factory(ALICE, BOB))
        visibility_repo.add_edge(edge_factory(CARA, ALICE))
        visibility_repo.fetch_edges_to = AsyncMock(side_effect=DataUnavailableError("down"))

        circle = await CircleResolver(visibility_repo).resolve(ALICE)

        assert circle == {BOB}

    @pytest.mark.asyncio
    async def test_connections(self, visibility_repo, edge_factory):
        visibility_repo.add_edge(edge_factory(ALICE, BOB))

        summaries = await CircleResolver(visibility_repo).connections(ALICE)

        assert [s.email for s in summaries] == [BOB]
        assert summaries[0].connection_type == ConnectionType.YOU_INVITED


# =============================================================================
# FEED
# =============================================================================

class TestFeedAggregator:
    @pytest.fixture
    def aggregator(self, content_repo, visibility_repo, edge_factory):
        visibility_repo.add_edge(edge_factory(ALICE, BOB))
        visibility_repo.add_edge(edge_factory(CARA, ALICE))
        return FeedAggregator(content_repo, CircleResolver(visibility_repo), limit=50)

    @pytest.mark.asyncio
    async def test_circle_content_newest_first(self, aggregator, content_repo, content_factory):
        content_repo.add(content_factory(BOB, ContentKind.PRIORITY, day=3, item_id="p1"))
        content_repo.add(content_factory(CARA, ContentKind.PROOF, day=5, item_id="v1"))
        content_repo.add(content_factory(BOB, ContentKind.SHARE, day=4, item_id="s1"))
        content_repo.add(content_factory(ALICE, ContentKind.SHARE, day=6, item_id="own"))

        feed = await aggregator.build_feed(ALICE)

        assert [item.id for item in feed] == ["v1", "s1", "p1"]
        assert all(not item.is_own for item in feed)
        assert feed[0].author_name == "cara"

    @pytest.mark.asyncio
    async def test_include_own(self, aggregator, content_repo, content_factory):
        content_repo.add(content_factory(BOB, day=3, item_id="theirs"))
        content_repo.add(content_factory(ALICE, day=4, item_id="mine"))

        feed = await aggregator.build_feed(ALICE, include_own=True)

        assert [(item.id, item.is_own) for item in feed] == [("mine", True), ("theirs", False)]

    @pytest.mark.asyncio
    async def test_own_only_without_circle(self, aggregator, content_repo, content_factory):
        content_repo.add(content_factory(BOB, day=3))
        content_repo.add(content_factory(ALICE, ContentKind.PREDICTION, day=4, item_id="mine"))

        feed = await aggregator.build_feed(ALICE, filter_by_circle=False, include_own=True)

        assert [item.id for item in feed] == ["mine"]

    @pytest.mark.asyncio
    async def test_empty_author_set_returns_nothing(self, content_repo, visibility_repo):
        content_repo.fetch_shareable_content = AsyncMock(return_value=[])
        aggregator = FeedAggregator(content_repo, CircleResolver(visibility_repo), limit=50)

        feed = await aggregator.build_feed(DEV, filter_by_circle=False, include_own=False)

        assert feed == []
        content_repo.fetch_shareable_content.assert_not_called()

    @pytest.mark.asyncio
    async def test_naive_and_aware_timestamps_rank_together(self, aggregator, content_repo, content_factory):
        naive = content_factory(BOB, ContentKind.PRIORITY, item_id="naive")
        naive.created_at = datetime(2024, 1, 5, 12, 0)
        content_repo.add(naive)
        content_repo.add(content_factory(CARA, ContentKind.PROOF, day=4, item_id="aware-old"))
        content_repo.add(content_factory(BOB, ContentKind.SHARE, day=6, item_id="aware-new"))

        feed = await aggregator.build_feed(ALICE)

        assert [item.id for item in feed] == ["aware-new", "naive", "aware-old"]

    @pytest.mark.asyncio
    async def test_duplicate_ids_across_kinds_appear_once(self, aggregator, content_repo, content_factory):
        content_repo.add(content_factory(BOB, ContentKind.PRIORITY, day=3, item_id="dup", text="priority"))
        content_repo.add(content_factory(BOB, ContentKind.SHARE, day=4, item_id="dup", text="share"))

        feed = await aggregator.build_feed(ALICE)

        assert len(feed) == 1
        assert feed[0].kind == ContentKind.PRIORITY

    @pytest.mark.asyncio
    async def test_opt_in_kinds_need_shareable_flag(self, aggregator, content_repo, content_factory):
        content_repo.add(content_factory(BOB, ContentKind.PROOF, shareable=False, item_id="private"))
        content_repo.add(content_factory(BOB, ContentKind.SHARE, shareable=False, item_id="share"))

        feed = await aggregator.build_feed(ALICE)

        assert [item.id for item in feed] == ["share"]

    @pytest.mark.asyncio
    async def test_truncated_to_limit(self, aggregator, content_repo, content_factory):
        for kind in ContentKind:
            for day in range(1, 21):
                content_repo.add(content_factory(BOB, kind, day=day))

        feed = await aggregator.build_feed(ALICE)

        assert len(feed) == 50
        stamps = [item.created_at for item in feed]
        assert stamps == sorted(stamps, reverse=True)

    @pytest.mark.asyncio
    async def test_failed_kind_does_not_abort(self, visibility_repo, edge_factory, content_factory):
        visibility_repo.add_edge(edge_factory(ALICE, BOB))
        source = InMemoryContentRepository([
            content_factory(BOB, ContentKind.PRIORITY, day=2, item_id="p"),
            content_factory(BOB, ContentKind.SHARE, day=3, item_id="s"),
        ])
        real_fetch = source.fetch_shareable_content

        async def flaky(kind, authors, limit=None):
            if kind == ContentKind.SHARE:
                raise DataUnavailableError("inspiration_shares fetch: timeout")
            return await real_fetch(kind, authors, limit=limit)

        source.fetch_shareable_content = flaky
        aggregator = FeedAggregator(source, CircleResolver(visibility_repo), limit=50)

        feed = await aggregator.build_feed(ALICE)

        assert [item.id for item in feed] == ["p"]


# =============================================================================
# FEED SESSION
# =============================================================================

class SlowAggregator:
    """Aggregator stand-in whose loads block until released."""

    def __init__(self):
        self.release = asyncio.Event()
        self.started = asyncio.Event()

    async def build_feed(self, viewer, filter_by_circle=True, include_own=False):
        self.started.set()
        await self.release.wait()
        return [viewer]


class TestFeedSession:
    @pytest.mark.asyncio
    async def test_load_applies_items(self, content_repo, visibility_repo, edge_factory, content_factory):
        visibility_repo.add_edge(edge_factory(ALICE, BOB))
        content_repo.add(content_factory(BOB, item_id="b1"))
        session = FeedSession(FeedAggregator(content_repo, CircleResolver(visibility_repo), limit=50), ALICE)

        items = await session.load()

        assert [item.id for item in items] == ["b1"]
        assert session.items == items

    @pytest.mark.asyncio
    async def test_switch_viewer_discards_in_flight_load(self):
        aggregator = SlowAggregator()
        session = FeedSession(aggregator, ALICE)

        pending = asyncio.ensure_future(session.load())
        await aggregator.started.wait()
        session.switch_viewer(BOB)

        assert await pending is None
        assert session.items == []
        assert session.viewer == BOB

    @pytest.mark.asyncio
    async def test_load_after_switch_uses_new_viewer(self):
        aggregator = SlowAggregator()
        aggregator.release.set()
        session = FeedSession(aggregator, ALICE)
        session.switch_viewer(BOB)

        items = await session.load()

        assert items == [BOB]
        assert session.loading is False

    @pytest.mark.asyncio
    async def test_no_viewer_loads_nothing(self):
        session = FeedSession(SlowAggregator())
        assert await session.load() == []
