# src/narrative/repositories/content_repository.py
"""
Content Repository - Data Access for Shareable Content

One query per content kind, filtered to an author set. Kinds that need
opt-in are filtered to rows flagged ``share_to_feed``; inspiration shares are
always visible unless hidden.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

from ..core.models import ContentKind, ShareableContent, parse_datetime
from .base import SupabaseRepository

# Content source configuration
CONTENT_SOURCES: Dict[ContentKind, Dict[str, Any]] = {
    ContentKind.PRIORITY: {
        "table": "priorities",
        "text_field": "integrity_line",
        "requires_opt_in": True,
        "hidden_field": None,
    },
    ContentKind.PROOF: {
        "table": "validations",
        "text_field": "proof_line",
        "requires_opt_in": True,
        "hidden_field": None,
    },
    ContentKind.SHARE: {
        "table": "inspiration_shares",
        "text_field": "share_text",
        "requires_opt_in": False,
        "hidden_field": "hidden_at",
    },
    ContentKind.PREDICTION: {
        "table": "predictions",
        "text_field": "title",
        "requires_opt_in": True,
        "hidden_field": None,
    },
}


def requires_opt_in(kind: ContentKind) -> bool:
    return CONTENT_SOURCES[kind]["requires_opt_in"]


def content_from_row(kind: ContentKind, row: Dict[str, Any]) -> ShareableContent:
    source = CONTENT_SOURCES[kind]
    return ShareableContent(
        id=str(row["id"]),
        kind=kind,
        author=row.get("client_email") or "",
        created_at=parse_datetime(row.get("created_at")),
        text=row.get(source["text_field"]) or "",
        shareable=bool(row.get("share_to_feed")) or not source["requires_opt_in"],
        recipient=row.get("recipient_email"),
        fires_tags=list(row.get("fires_extracted") or []),
        prediction_id=row.get("prediction_id"),
    )


class ContentRepository(ABC):
    """
    Abstract interface (Port) for shareable content.
    """

    @abstractmethod
    async def fetch_shareable_content(
        self,
        kind: ContentKind,
        authors: Iterable[str],
        limit: Optional[int] = None,
    ) -> List[ShareableContent]:
        """Feed-visible content of one kind authored by any of ``authors``, newest first."""
        pass


class SupabaseContentRepository(SupabaseRepository, ContentRepository):
    """
    Supabase implementation (Adapter) over the per-kind content tables.
    """

    async def fetch_shareable_content(
        self,
        kind: ContentKind,
        authors: Iterable[str],
        limit: Optional[int] = None,
    ) -> List[ShareableContent]:
        author_list = sorted(set(authors))
        if not author_list:
            return []
        source = CONTENT_SOURCES[kind]

        def build(c):
            query = c.table(source["table"]).select("*").in_("client_email", author_list)
            if source["requires_opt_in"]:
                query = query.eq("share_to_feed", True)
            if source["hidden_field"]:
                query = query.is_(source["hidden_field"], "null")
            query = query.order("created_at", desc=True)
            if limit:
                query = query.limit(limit)
            return query

        rows = await self._select(build, f"{source['table']} fetch")
        return [content_from_row(kind, row) for row in rows]


class InMemoryContentRepository(ContentRepository):
    """In-process adapter for local development and tests."""

    def __init__(self, items: List[ShareableContent] = None):
        self.items: List[ShareableContent] = list(items or [])

    def add(self, item: ShareableContent) -> None:
        self.items.append(item)

    async def fetch_shareable_content(
        self,
        kind: ContentKind,
        authors: Iterable[str],
        limit: Optional[int] = None,
    ) -> List[ShareableContent]:
        author_set = set(authors)
        found = [
            item for item in self.items
            if item.kind == kind
            and item.author in author_set
            and (item.shareable or not requires_opt_in(kind))
        ]
        found.sort(key=lambda item: parse_datetime(item.created_at).timestamp() if item.created_at else 0, reverse=True)
        return found[:limit] if limit else found
