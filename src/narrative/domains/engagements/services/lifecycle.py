# src/narrative/domains/engagements/services/lifecycle.py
"""
Engagement Lifecycle

State machine for a 12-week coaching engagement:

    active <-> paused
    active | paused -> completed   (terminal)

Week advances only while active and never past 12; the phase is derived from
the week on read. Rejected operations leave the engagement untouched.
"""

import logging
from dataclasses import replace
from datetime import date
from typing import Any, Dict, List, Optional

from ....core.models import (
    Engagement,
    EngagementStatus,
    phase_for_week,
    utcnow,
)
from ....core.results import EngineErrorCode, OperationResult
from ....repositories import DataUnavailableError, EngagementRepository
from ..constants import FIRST_WEEK, LAST_WEEK, PHASES, STATUS_TRANSITIONS

logger = logging.getLogger(__name__)

__all__ = [
    "EngagementLifecycle",
    "advance_week",
    "available_transitions",
    "can_transition",
    "complete",
    "phase_details",
    "phase_for_week",
    "start_engagement",
    "toggle_pause",
    "week_progress",
]


def start_engagement(
    client_email: str,
    start_date: Optional[date] = None,
    coach_id: Optional[str] = None,
) -> Engagement:
    return Engagement(
        client_email=client_email,
        coach_id=coach_id,
        start_date=start_date or utcnow().date(),
        week=FIRST_WEEK,
        status=EngagementStatus.ACTIVE,
    )


def can_transition(engagement: Engagement, operation: str) -> bool:
    return engagement.status in STATUS_TRANSITIONS.get(operation, [])


def available_transitions(engagement: Engagement) -> List[str]:
    """Operations that would be accepted right now."""
    operations = [op for op in STATUS_TRANSITIONS if can_transition(engagement, op)]
    if "advance" in operations and engagement.week >= LAST_WEEK:
        operations.remove("advance")
    return operations


def _rejected(engagement: Engagement, operation: str, reason: str) -> OperationResult[Engagement]:
    logger.info(f"Rejected {operation} on engagement {engagement.id}: {reason}")
    return OperationResult.failure(EngineErrorCode.INVALID_TRANSITION, reason)


def advance_week(engagement: Engagement) -> OperationResult[Engagement]:
    """Move to the next week. Past week 12 the caller must complete instead."""
    if not can_transition(engagement, "advance"):
        return _rejected(
            engagement, "advance", f"Cannot advance a {engagement.status.value} engagement"
        )
    next_week = engagement.week + 1
    if next_week > LAST_WEEK:
        return _rejected(
            engagement, "advance", f"Week {LAST_WEEK} is the last week; complete the engagement instead"
        )
    return OperationResult.success(replace(engagement, week=next_week))


def toggle_pause(engagement: Engagement) -> OperationResult[Engagement]:
    if not can_transition(engagement, "toggle_pause"):
        return _rejected(
            engagement, "toggle_pause", f"Cannot pause or resume a {engagement.status.value} engagement"
        )
    new_status = (
        EngagementStatus.ACTIVE
        if engagement.status == EngagementStatus.PAUSED
        else EngagementStatus.PAUSED
    )
    return OperationResult.success(replace(engagement, status=new_status))


def complete(engagement: Engagement, on: Optional[date] = None) -> OperationResult[Engagement]:
    if not can_transition(engagement, "complete"):
        return _rejected(engagement, "complete", "Engagement is already completed")
    return OperationResult.success(
        replace(engagement, status=EngagementStatus.COMPLETED, end_date=on or utcnow().date())
    )


def week_progress(engagement: Engagement) -> float:
    """Share of the 12 weeks reached, 0..100. Completed engagements are 100."""
    if engagement.is_terminal:
        return 100.0
    return round(engagement.week / LAST_WEEK * 100, 1)


def phase_details(engagement: Engagement) -> Dict[str, Any]:
    phase = engagement.phase
    for config in PHASES:
        if config["key"] == phase:
            return {
                "key": phase.value,
                "label": config["label"],
                "builds": config["builds"],
                "weeks": f"{config['week_range'][0]}-{config['week_range'][1]}",
            }
    return {"key": phase.value}


class EngagementLifecycle:
    """Service applying lifecycle transitions and persisting the result."""

    def __init__(self, repository: EngagementRepository):
        self.repository = repository

    async def get(self, engagement_id: str) -> OperationResult[Engagement]:
        try:
            engagement = await self.repository.fetch_engagement(engagement_id)
        except DataUnavailableError as e:
            logger.warning(f"Engagement {engagement_id} unavailable: {e}")
            engagement = None
        if engagement is None:
            return OperationResult.failure(
                EngineErrorCode.NOT_FOUND, f"Engagement {engagement_id} not found"
            )
        return OperationResult.success(engagement)

    async def current_for_client(self, client_email: str) -> OperationResult[Engagement]:
        """The client's open (active or paused) engagement."""
        try:
            engagement = await self.repository.fetch_engagement_for_client(client_email)
        except DataUnavailableError as e:
            logger.warning(f"Engagement for {client_email} unavailable: {e}")
            engagement = None
        if engagement is None:
            return OperationResult.failure(
                EngineErrorCode.NOT_FOUND, f"No open engagement for {client_email}"
            )
        return OperationResult.success(engagement)

    async def start(
        self,
        client_email: str,
        start_date: Optional[date] = None,
        coach_id: Optional[str] = None,
    ) -> OperationResult[Engagement]:
        engagement = start_engagement(client_email, start_date, coach_id)
        if not await self.repository.persist_engagement(engagement):
            logger.error(f"Failed to start engagement for {client_email}")
            return OperationResult.failure(EngineErrorCode.WRITE_FAILED, "Failed to start engagement")
        return OperationResult.success(engagement)

    async def _apply(self, engagement_id: str, transition) -> OperationResult[Engagement]:
        loaded = await self.get(engagement_id)
        if not loaded.ok:
            return loaded
        result = transition(loaded.value)
        if not result.ok:
            return result
        if not await self.repository.persist_engagement(result.value):
            logger.error(f"Failed to persist engagement {engagement_id}")
            return OperationResult.failure(EngineErrorCode.WRITE_FAILED, "Failed to update engagement")
        return result

    async def advance_week(self, engagement_id: str) -> OperationResult[Engagement]:
        return await self._apply(engagement_id, advance_week)

    async def toggle_pause(self, engagement_id: str) -> OperationResult[Engagement]:
        return await self._apply(engagement_id, toggle_pause)

    async def complete(self, engagement_id: str) -> OperationResult[Engagement]:
        return await self._apply(engagement_id, complete)
