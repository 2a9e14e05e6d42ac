from .circle import CircleResolver, describe_connections, resolve_circle
from .feed import FeedAggregator, display_name, rank_feed, to_feed_item
from .feed_session import FeedSession

__all__ = [
    "CircleResolver",
    "FeedAggregator",
    "FeedSession",
    "describe_connections",
    "display_name",
    "rank_feed",
    "resolve_circle",
    "to_feed_item",
]
