# src/narrative/repositories/visibility_repository.py
"""
Visibility Repository - Data Access for Circle Edges

Edges are directed: ``from_user`` made their content visible to ``to_user``.
The port exposes one adjacency query per direction so that an indexed
adjacency store can replace the table scan without touching the resolver.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List
import logging
import asyncio

from ..core.models import VisibilityEdge, parse_datetime
from .base import SupabaseRepository

logger = logging.getLogger(__name__)

VISIBILITY_TABLE = "share_visibility"


def edge_from_row(row: Dict[str, Any]) -> VisibilityEdge:
    return VisibilityEdge(
        id=row.get("id"),
        from_user=row["user_a_email"],
        to_user=row["user_b_email"],
        muted_at=parse_datetime(row.get("muted_at")),
        created_at=parse_datetime(row.get("created_at")),
    )


class VisibilityRepository(ABC):
    """
    Abstract interface (Port) for visibility edges.
    """

    @abstractmethod
    async def fetch_edges_from(self, user: str) -> List[VisibilityEdge]:
        """Edges where ``from_user == user``."""
        pass

    @abstractmethod
    async def fetch_edges_to(self, user: str) -> List[VisibilityEdge]:
        """Edges where ``to_user == user``."""
        pass

    async def fetch_visibility_edges(self, user: str) -> List[VisibilityEdge]:
        """
        Both directions, queried concurrently. A failed direction is logged
        and treated as empty so the other still counts.
        """
        results = await asyncio.gather(
            self.fetch_edges_from(user),
            self.fetch_edges_to(user),
            return_exceptions=True,
        )
        edges: List[VisibilityEdge] = []
        for direction, result in zip(("outgoing", "incoming"), results):
            if isinstance(result, Exception):
                logger.warning(f"⚠️ {direction} edges unavailable for {user}: {result}")
                continue
            edges.extend(result)
        return edges


class SupabaseVisibilityRepository(SupabaseRepository, VisibilityRepository):
    """
    Supabase implementation (Adapter) over ``share_visibility``
    (``user_a_email`` -> ``user_b_email``).
    """

    async def fetch_edges_from(self, user: str) -> List[VisibilityEdge]:
        rows = await self._select(
            lambda c: c.table(VISIBILITY_TABLE).select("*").eq("user_a_email", user),
            "outgoing visibility fetch",
        )
        return [edge_from_row(row) for row in rows]

    async def fetch_edges_to(self, user: str) -> List[VisibilityEdge]:
        rows = await self._select(
            lambda c: c.table(VISIBILITY_TABLE).select("*").eq("user_b_email", user),
            "incoming visibility fetch",
        )
        return [edge_from_row(row) for row in rows]


class InMemoryVisibilityRepository(VisibilityRepository):
    """In-process adapter for local development and tests."""

    def __init__(self, edges: List[VisibilityEdge] = None):
        self.edges: List[VisibilityEdge] = list(edges or [])

    def add_edge(self, edge: VisibilityEdge) -> None:
        self.edges.append(edge)

    async def fetch_edges_from(self, user: str) -> List[VisibilityEdge]:
        return [e for e in self.edges if e.from_user == user]

    async def fetch_edges_to(self, user: str) -> List[VisibilityEdge]:
        return [e for e in self.edges if e.to_user == user]
