# src/narrative/services/narrative_engine.py
"""
Narrative Engine - progress overview for dashboards

Combines the zones domain with alignment data access:
- overview(): ratings, latest snapshot and connection count fetched
  concurrently, then breakdown, score, growth edge, strength and the
  48-hour question
- take_snapshot(): compute the same from fresh ratings and persist it

Any one source failing degrades the overview instead of failing it.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from ..core.models import AlignmentRatings, FiresElement, Zone, ZoneBreakdown
from ..domains.zones.constants import FIRES_LABELS
from ..domains.zones.services import (
    classify_breakdown,
    growth_opportunity_text,
    highest,
    lowest,
    predictability_score,
    question_for,
)
from ..domains.zones.services.classifier import RatingsInput, as_ratings
from ..repositories import AlignmentRepository, SnapshotRecord

logger = logging.getLogger(__name__)


@dataclass
class ProgressOverview:
    client_email: str
    breakdown: Optional[ZoneBreakdown] = None
    predictability_score: Optional[int] = None
    growth_edge: Optional[Tuple[FiresElement, Zone]] = None
    strength: Optional[Tuple[FiresElement, Zone]] = None
    question_48hr: Optional[str] = None
    growth_opportunity: Optional[str] = None
    connection_count: int = 0
    ratings: Optional[AlignmentRatings] = None

    @property
    def has_data(self) -> bool:
        return self.breakdown is not None

    def to_dict(self) -> Dict[str, Any]:
        def pair(value):
            if value is None:
                return None
            element, zone = value
            return {"dimension": element.value, "label": FIRES_LABELS[element], "zone": zone.label}

        return {
            "client_email": self.client_email,
            "zones": self.breakdown.to_dict() if self.breakdown else None,
            "predictability_score": self.predictability_score,
            "growth_edge": pair(self.growth_edge),
            "strength": pair(self.strength),
            "question_48hr": self.question_48hr,
            "growth_opportunity": self.growth_opportunity,
            "connection_count": self.connection_count,
            "ratings": self.ratings.to_dict() if self.ratings else None,
        }


def build_overview(
    client_email: str,
    breakdown: Optional[ZoneBreakdown],
    score: Optional[int] = None,
    connection_count: int = 0,
    ratings: Optional[AlignmentRatings] = None,
) -> ProgressOverview:
    overview = ProgressOverview(
        client_email=client_email,
        breakdown=breakdown,
        predictability_score=score,
        connection_count=connection_count,
        ratings=ratings,
    )
    if breakdown is not None:
        overview.growth_edge = lowest(breakdown)
        overview.strength = highest(breakdown)
        overview.question_48hr = question_for(*overview.growth_edge)
        overview.growth_opportunity = growth_opportunity_text(*overview.growth_edge)
    return overview


def evaluate(client_email: str, ratings: RatingsInput, connection_count: Any = 0) -> ProgressOverview:
    """Pure computation from ratings; nothing is fetched or stored."""
    normalized = as_ratings(ratings)
    return build_overview(
        client_email,
        classify_breakdown(normalized),
        predictability_score(normalized, connection_count),
        connection_count=connection_count or 0,
        ratings=normalized,
    )


class NarrativeEngine:
    """Facade over alignment data used by the coach dashboard and client portal."""

    def __init__(self, repository: AlignmentRepository):
        self.repository = repository

    async def overview(self, client_email: str) -> ProgressOverview:
        ratings, snapshot, connection_count = await asyncio.gather(
            self.repository.fetch_alignment_ratings(client_email),
            self.repository.fetch_zone_snapshot(client_email),
            self.repository.fetch_connection_count(client_email),
            return_exceptions=True,
        )
        for name, value in (("ratings", ratings), ("snapshot", snapshot), ("connection count", connection_count)):
            if isinstance(value, Exception):
                logger.warning(f"⚠️ {name} unavailable for {client_email}: {value}")
        if isinstance(ratings, Exception):
            ratings = None
        if isinstance(snapshot, Exception):
            snapshot = None
        if isinstance(connection_count, Exception):
            connection_count = 0

        if ratings is not None:
            return evaluate(client_email, ratings, connection_count)
        # Stored breakdown without the ratings behind it: zones only, no score
        return build_overview(client_email, snapshot, None, connection_count=connection_count)

    async def take_snapshot(
        self,
        client_email: str,
        ratings: RatingsInput,
        connection_count: Any = 0,
    ) -> Optional[ProgressOverview]:
        """Compute and persist a snapshot. Returns None if the write failed."""
        overview = evaluate(client_email, ratings, connection_count)
        record = SnapshotRecord(
            client_email=client_email,
            ratings=overview.ratings,
            breakdown=overview.breakdown,
            predictability_score=overview.predictability_score,
            growth_opportunity=overview.growth_opportunity,
            question_48hr=overview.question_48hr,
        )
        if not await self.repository.persist_snapshot(record):
            logger.error(f"❌ Failed to save snapshot for {client_email}")
            return None
        logger.info(f"📸 Snapshot saved for {client_email}: score {overview.predictability_score}")
        return overview
