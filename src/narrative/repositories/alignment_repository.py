# src/narrative/repositories/alignment_repository.py
"""
Alignment Repository - Data Access for Alignment Ratings and Zone Snapshots

Handles:
- Latest self-reported alignment ratings for a user
- Latest recorded zone snapshot
- Connection count used by the predictability bonus
- Persisting newly computed snapshots
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional
import logging
import uuid

from ..core.models import AlignmentRatings, ZoneBreakdown, utcnow
from .base import SupabaseRepository

logger = logging.getLogger(__name__)


@dataclass
class SnapshotRecord:
    """A computed zone snapshot as stored."""
    client_email: str
    ratings: AlignmentRatings
    breakdown: ZoneBreakdown
    predictability_score: int
    growth_opportunity: str
    question_48hr: str
    created_at: datetime = field(default_factory=utcnow)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def to_row(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "client_email": self.client_email,
            "alignment_scores": {
                f"q{index}": value for index, value in enumerate(self.ratings.values(), start=1)
            },
            "zone_scores": self.breakdown.to_dict(),
            "predictability_score": self.predictability_score,
            "growth_opportunity": self.growth_opportunity,
            "question_48hr": self.question_48hr,
            "created_at": self.created_at.isoformat(),
        }


class AlignmentRepository(ABC):
    """
    Abstract interface (Port) for alignment data access.
    """

    @abstractmethod
    async def fetch_alignment_ratings(self, user: str) -> Optional[AlignmentRatings]:
        """Latest ratings for a user, or None if they never answered."""
        pass

    @abstractmethod
    async def fetch_zone_snapshot(self, user: str) -> Optional[ZoneBreakdown]:
        """Latest recorded zone breakdown, or None."""
        pass

    @abstractmethod
    async def fetch_connection_count(self, user: str) -> int:
        pass

    @abstractmethod
    async def persist_snapshot(self, snapshot: SnapshotRecord) -> bool:
        pass


class SupabaseAlignmentRepository(SupabaseRepository, AlignmentRepository):
    """
    Supabase implementation (Adapter). Ratings and zones come from the newest
    row of ``snapshots``; the connection count from the newest ``predictions`` row.
    """

    async def _latest_snapshot_row(self, user: str, columns: str) -> Optional[Dict[str, Any]]:
        rows = await self._select(
            lambda c: c.table("snapshots").select(columns)
            .eq("client_email", user)
            .order("created_at", desc=True)
            .limit(1),
            "snapshots fetch",
        )
        return rows[0] if rows else None

    async def fetch_alignment_ratings(self, user: str) -> Optional[AlignmentRatings]:
        row = await self._latest_snapshot_row(user, "alignment_scores, created_at")
        if not row or not row.get("alignment_scores"):
            return None
        return AlignmentRatings.from_mapping(row["alignment_scores"])

    async def fetch_zone_snapshot(self, user: str) -> Optional[ZoneBreakdown]:
        row = await self._latest_snapshot_row(user, "zone_scores, created_at")
        if not row or not row.get("zone_scores"):
            return None
        try:
            return ZoneBreakdown.from_dict(row["zone_scores"])
        except (KeyError, ValueError) as e:
            logger.warning(f"Ignoring malformed zone snapshot for {user}: {e}")
            return None

    async def fetch_connection_count(self, user: str) -> int:
        rows = await self._select(
            lambda c: c.table("predictions").select("connection_count, created_at")
            .eq("client_email", user)
            .order("created_at", desc=True)
            .limit(1),
            "predictions fetch",
        )
        if not rows:
            return 0
        try:
            return int(rows[0].get("connection_count") or 0)
        except (TypeError, ValueError):
            return 0

    async def persist_snapshot(self, snapshot: SnapshotRecord) -> bool:
        row = snapshot.to_row()
        result = await self._write(
            lambda c: c.table("snapshots").insert(row),
            "snapshot insert",
        )
        return result is not None


class InMemoryAlignmentRepository(AlignmentRepository):
    """In-process adapter for local development and tests."""

    def __init__(self):
        self.snapshots: Dict[str, List[SnapshotRecord]] = {}
        self.ratings: Dict[str, AlignmentRatings] = {}
        self.connection_counts: Dict[str, int] = {}

    def set_ratings(self, user: str, ratings: AlignmentRatings) -> None:
        self.ratings[user] = ratings

    def set_connection_count(self, user: str, count: int) -> None:
        self.connection_counts[user] = count

    async def fetch_alignment_ratings(self, user: str) -> Optional[AlignmentRatings]:
        if user in self.ratings:
            return self.ratings[user]
        history = self.snapshots.get(user)
        return history[-1].ratings if history else None

    async def fetch_zone_snapshot(self, user: str) -> Optional[ZoneBreakdown]:
        history = self.snapshots.get(user)
        return history[-1].breakdown if history else None

    async def fetch_connection_count(self, user: str) -> int:
        return self.connection_counts.get(user, 0)

    async def persist_snapshot(self, snapshot: SnapshotRecord) -> bool:
        self.snapshots.setdefault(snapshot.client_email, []).append(snapshot)
        self.ratings[snapshot.client_email] = snapshot.ratings
        return True
