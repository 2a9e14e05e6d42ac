# src/narrative/domains/markers/services/tracker.py
"""
Marker Progress Tracker

Business logic for more/less markers:
- creation with an initial baseline update (written as one unit)
- appending score updates (history is never reordered or truncated)
- percent complete against the baseline -> target band
- soft retirement
"""

import logging
import math
from dataclasses import replace
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from ....core.models import (
    FiresElement,
    Marker,
    MarkerDirection,
    MarkerUpdate,
    UpdateSource,
    utcnow,
)
from ....core.results import EngineErrorCode, OperationResult
from ....repositories import DataUnavailableError, MarkerRepository
from ..constants import BASELINE_NOTE, MAX_MARKER_SCORE, MIN_MARKER_SCORE

logger = logging.getLogger(__name__)


def clamp_score(value) -> int:
    """Clamp a marker score to 1..10. Unreadable values become the minimum."""
    try:
        score = int(math.floor(float(value) + 0.5))
    except (TypeError, ValueError):
        return MIN_MARKER_SCORE
    return max(MIN_MARKER_SCORE, min(MAX_MARKER_SCORE, score))


def new_marker(
    client_email: str,
    marker_text: str,
    direction: MarkerDirection,
    baseline,
    target,
    engagement_id: Optional[str] = None,
    fires_connection: Optional[FiresElement] = None,
    at: Optional[datetime] = None,
) -> Tuple[Marker, MarkerUpdate]:
    """Build a marker (current = baseline) and its baseline history entry."""
    at = at or utcnow()
    baseline_score = clamp_score(baseline)
    marker = Marker(
        client_email=client_email,
        marker_text=marker_text.strip(),
        direction=MarkerDirection(direction),
        baseline=baseline_score,
        target=clamp_score(target),
        current=baseline_score,
        engagement_id=engagement_id,
        fires_connection=fires_connection,
        created_at=at,
    )
    initial = MarkerUpdate(
        marker_id=marker.id,
        score=baseline_score,
        source=UpdateSource.BASELINE,
        recorded_at=at,
        note=BASELINE_NOTE,
    )
    marker.updates = [initial]
    return marker, initial


def apply_update(
    marker: Marker,
    score,
    source: UpdateSource = UpdateSource.SESSION,
    note: Optional[str] = None,
    at: Optional[datetime] = None,
) -> Tuple[Marker, MarkerUpdate]:
    """
    Return a copy of ``marker`` with the update appended and ``current`` set to it.

    Updates with identical timestamps are all kept; the last one appended wins.
    """
    update = MarkerUpdate(
        marker_id=marker.id,
        score=clamp_score(score),
        source=UpdateSource(source),
        recorded_at=at or utcnow(),
        note=(note or "").strip() or None,
    )
    return replace(marker, current=update.score, updates=[*marker.updates, update]), update


def percent_complete(marker: Marker) -> float:
    """
    Progress through the baseline -> target band, clamped to 0..100.

    A zero-width band counts as already at target. Descending bands
    (target below baseline) work through the sign of the range.
    """
    span = marker.target - marker.baseline
    if span == 0:
        return 100.0
    progress = ((marker.current - marker.baseline) / span) * 100
    return max(0.0, min(100.0, progress))


def recent_updates(marker: Marker, limit: int = 5) -> List[MarkerUpdate]:
    """Newest-first display slice. Storage is untouched."""
    return list(reversed(marker.updates))[:limit]


def split_by_direction(markers: List[Marker]) -> Dict[MarkerDirection, List[Marker]]:
    grouped: Dict[MarkerDirection, List[Marker]] = {d: [] for d in MarkerDirection}
    for marker in markers:
        grouped[marker.direction].append(marker)
    return grouped


class MarkerProgressTracker:
    """Service for creating and updating markers through a MarkerRepository."""

    def __init__(self, repository: MarkerRepository):
        self.repository = repository

    async def list_markers(
        self,
        client_email: Optional[str] = None,
        engagement_id: Optional[str] = None,
        include_inactive: bool = False,
    ) -> List[Marker]:
        try:
            return await self.repository.fetch_markers(
                client_email=client_email,
                engagement_id=engagement_id,
                include_inactive=include_inactive,
            )
        except DataUnavailableError as e:
            logger.warning(f"Markers unavailable: {e}")
            return []

    async def _load(self, marker_id: str) -> OperationResult[Marker]:
        try:
            marker = await self.repository.get_marker(marker_id)
        except DataUnavailableError as e:
            logger.warning(f"Marker {marker_id} unavailable: {e}")
            marker = None
        if marker is None:
            return OperationResult.failure(EngineErrorCode.NOT_FOUND, f"Marker {marker_id} not found")
        return OperationResult.success(marker)

    async def create_marker(
        self,
        client_email: str,
        marker_text: str,
        direction: MarkerDirection,
        baseline,
        target,
        engagement_id: Optional[str] = None,
        fires_connection: Optional[FiresElement] = None,
    ) -> OperationResult[Marker]:
        marker, initial = new_marker(
            client_email,
            marker_text,
            direction,
            baseline,
            target,
            engagement_id=engagement_id,
            fires_connection=fires_connection,
        )
        if not await self.repository.create_marker(marker, initial):
            logger.error(f"Failed to create marker for {client_email}")
            return OperationResult.failure(EngineErrorCode.WRITE_FAILED, "Failed to add marker")
        logger.info(f"Created {marker.direction.value} marker {marker.id} for {client_email}")
        return OperationResult.success(marker)

    async def record_update(
        self,
        marker_id: str,
        score,
        source: UpdateSource = UpdateSource.SESSION,
        note: Optional[str] = None,
    ) -> OperationResult[Marker]:
        loaded = await self._load(marker_id)
        if not loaded.ok:
            return loaded
        marker = loaded.value
        if not marker.active:
            return OperationResult.failure(
                EngineErrorCode.MARKER_INACTIVE, f"Marker {marker_id} has been retired"
            )

        updated, update = apply_update(marker, score, source, note)
        if not await self.repository.append_marker_update(marker_id, update):
            logger.error(f"Failed to record update for marker {marker_id}")
            return OperationResult.failure(EngineErrorCode.WRITE_FAILED, "Failed to update score")
        return OperationResult.success(updated)

    async def retire_marker(self, marker_id: str) -> OperationResult[Marker]:
        loaded = await self._load(marker_id)
        if not loaded.ok:
            return loaded
        if not await self.repository.set_marker_active(marker_id, False):
            return OperationResult.failure(EngineErrorCode.WRITE_FAILED, "Failed to retire marker")
        return OperationResult.success(replace(loaded.value, active=False))
