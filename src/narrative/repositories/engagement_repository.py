# src/narrative/repositories/engagement_repository.py
"""
Engagement Repository - Data Access for Coaching Engagements

Phase is never written: it is derived from ``current_week`` on every read.
"""

from abc import ABC, abstractmethod
from copy import deepcopy
from datetime import date
from typing import Any, Dict, Optional
import logging

from ..core.models import (
    TOTAL_WEEKS,
    Engagement,
    EngagementStatus,
    parse_date,
)
from .base import SupabaseRepository

logger = logging.getLogger(__name__)

ENGAGEMENTS_TABLE = "coaching_engagements"


def engagement_to_row(engagement: Engagement) -> Dict[str, Any]:
    return {
        "id": engagement.id,
        "client_email": engagement.client_email,
        "coach_id": engagement.coach_id,
        "current_week": engagement.week,
        "status": engagement.status.value,
        "start_date": engagement.start_date.isoformat(),
        "end_date": engagement.end_date.isoformat() if engagement.end_date else None,
    }


def engagement_from_row(row: Dict[str, Any]) -> Engagement:
    week = int(row.get("current_week") or 1)
    return Engagement(
        id=row["id"],
        client_email=row.get("client_email") or "",
        coach_id=row.get("coach_id"),
        week=max(1, min(TOTAL_WEEKS, week)),
        status=EngagementStatus(row.get("status") or EngagementStatus.ACTIVE.value),
        start_date=parse_date(row.get("start_date")) or parse_date(row.get("created_at")) or date.today(),
        end_date=parse_date(row.get("end_date")),
    )


class EngagementRepository(ABC):
    """
    Abstract interface (Port) for engagement data access.
    """

    @abstractmethod
    async def fetch_engagement(self, engagement_id: str) -> Optional[Engagement]:
        pass

    @abstractmethod
    async def fetch_engagement_for_client(self, client_email: str) -> Optional[Engagement]:
        """The client's most recent non-completed engagement, if any."""
        pass

    @abstractmethod
    async def persist_engagement(self, engagement: Engagement) -> bool:
        """Insert or update the full engagement record."""
        pass


class SupabaseEngagementRepository(SupabaseRepository, EngagementRepository):
    """
    Supabase implementation (Adapter) over ``coaching_engagements``.
    """

    async def fetch_engagement(self, engagement_id: str) -> Optional[Engagement]:
        rows = await self._select(
            lambda c: c.table(ENGAGEMENTS_TABLE).select("*").eq("id", engagement_id).limit(1),
            "engagement fetch",
        )
        return engagement_from_row(rows[0]) if rows else None

    async def fetch_engagement_for_client(self, client_email: str) -> Optional[Engagement]:
        rows = await self._select(
            lambda c: c.table(ENGAGEMENTS_TABLE).select("*")
            .eq("client_email", client_email)
            .neq("status", EngagementStatus.COMPLETED.value)
            .order("start_date", desc=True)
            .limit(1),
            "client engagement fetch",
        )
        return engagement_from_row(rows[0]) if rows else None

    async def persist_engagement(self, engagement: Engagement) -> bool:
        row = engagement_to_row(engagement)
        result = await self._write(
            lambda c: c.table(ENGAGEMENTS_TABLE).upsert(row, on_conflict="id"),
            "engagement upsert",
        )
        return result is not None


class InMemoryEngagementRepository(EngagementRepository):
    """In-process adapter for local development and tests. Returns copies."""

    def __init__(self):
        self.engagements: Dict[str, Engagement] = {}

    async def fetch_engagement(self, engagement_id: str) -> Optional[Engagement]:
        engagement = self.engagements.get(engagement_id)
        return deepcopy(engagement) if engagement else None

    async def fetch_engagement_for_client(self, client_email: str) -> Optional[Engagement]:
        candidates = [
            e for e in self.engagements.values()
            if e.client_email == client_email and not e.is_terminal
        ]
        if not candidates:
            return None
        return deepcopy(max(candidates, key=lambda e: e.start_date))

    async def persist_engagement(self, engagement: Engagement) -> bool:
        self.engagements[engagement.id] = deepcopy(engagement)
        return True
