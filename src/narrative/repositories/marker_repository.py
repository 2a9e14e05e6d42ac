# src/narrative/repositories/marker_repository.py
"""
Marker Repository - Data Access for More/Less Markers

Handles:
- Loading markers (with their update history) per client or engagement
- Creating a marker together with its initial baseline update
- Appending updates (history is append-only)
- Soft-retiring markers via the active flag
"""

from abc import ABC, abstractmethod
from copy import deepcopy
from typing import Any, Dict, List, Optional
import logging

from ..core.models import (
    FiresElement,
    Marker,
    MarkerDirection,
    MarkerUpdate,
    UpdateSource,
    parse_datetime,
    utcnow,
)
from .base import SupabaseRepository

logger = logging.getLogger(__name__)

MARKERS_TABLE = "more_less_markers"
UPDATES_TABLE = "more_less_updates"


def marker_to_row(marker: Marker) -> Dict[str, Any]:
    return {
        "id": marker.id,
        "client_email": marker.client_email,
        "engagement_id": marker.engagement_id,
        "marker_text": marker.marker_text,
        "marker_type": marker.direction.value,
        "baseline_score": marker.baseline,
        "target_score": marker.target,
        "current_score": marker.current,
        "fires_connection": marker.fires_connection.value if marker.fires_connection else None,
        "is_active": marker.active,
        "created_at": marker.created_at.isoformat(),
    }


def update_to_row(update: MarkerUpdate) -> Dict[str, Any]:
    return {
        "id": update.id,
        "marker_id": update.marker_id,
        "update_date": update.recorded_at.isoformat(),
        "score": update.score,
        "source": update.source.value,
        "note": update.note,
    }


def update_from_row(row: Dict[str, Any]) -> MarkerUpdate:
    try:
        source = UpdateSource(row.get("source") or UpdateSource.SESSION.value)
    except ValueError:
        source = UpdateSource.SESSION
    return MarkerUpdate(
        id=row["id"],
        marker_id=row.get("marker_id"),
        score=int(row.get("score") or 0),
        source=source,
        recorded_at=parse_datetime(row.get("update_date")) or parse_datetime(row.get("created_at")) or utcnow(),
        note=row.get("note"),
    )


def marker_from_row(row: Dict[str, Any], updates: Optional[List[MarkerUpdate]] = None) -> Marker:
    baseline = int(row.get("baseline_score") or 1)
    fires = row.get("fires_connection")
    try:
        fires_connection = FiresElement(fires) if fires else None
    except ValueError:
        fires_connection = None
    return Marker(
        id=row["id"],
        client_email=row.get("client_email") or "",
        engagement_id=row.get("engagement_id"),
        marker_text=row.get("marker_text") or "",
        direction=MarkerDirection(row.get("marker_type") or MarkerDirection.MORE.value),
        baseline=baseline,
        target=int(row.get("target_score") or baseline),
        current=int(row.get("current_score") or baseline),
        active=bool(row.get("is_active", True)),
        fires_connection=fires_connection,
        created_at=parse_datetime(row.get("created_at")) or utcnow(),
        updates=updates or [],
    )


class MarkerRepository(ABC):
    """
    Abstract interface (Port) for marker data access.
    """

    @abstractmethod
    async def fetch_markers(
        self,
        client_email: Optional[str] = None,
        engagement_id: Optional[str] = None,
        include_inactive: bool = False,
    ) -> List[Marker]:
        """Markers with their full update history, oldest update first."""
        pass

    @abstractmethod
    async def get_marker(self, marker_id: str) -> Optional[Marker]:
        pass

    @abstractmethod
    async def create_marker(self, marker: Marker, initial_update: MarkerUpdate) -> bool:
        """Persist a marker and its first update as one unit. False if either part failed."""
        pass

    @abstractmethod
    async def append_marker_update(self, marker_id: str, update: MarkerUpdate) -> bool:
        """Append ``update`` and set the current score to it as one unit. False if either part failed."""
        pass

    @abstractmethod
    async def set_marker_active(self, marker_id: str, active: bool) -> bool:
        pass


class SupabaseMarkerRepository(SupabaseRepository, MarkerRepository):
    """
    Supabase implementation (Adapter) over ``more_less_markers`` and ``more_less_updates``.
    """

    async def _updates_for(self, marker_ids: List[str]) -> Dict[str, List[MarkerUpdate]]:
        if not marker_ids:
            return {}
        rows = await self._select(
            lambda c: c.table(UPDATES_TABLE).select("*")
            .in_("marker_id", marker_ids)
            .order("update_date"),
            "marker updates fetch",
        )
        grouped: Dict[str, List[MarkerUpdate]] = {}
        for row in rows:
            update = update_from_row(row)
            grouped.setdefault(update.marker_id, []).append(update)
        # Stable sort keeps insertion order for identical timestamps
        for updates in grouped.values():
            updates.sort(key=lambda u: u.recorded_at)
        return grouped

    async def fetch_markers(
        self,
        client_email: Optional[str] = None,
        engagement_id: Optional[str] = None,
        include_inactive: bool = False,
    ) -> List[Marker]:
        def build(c):
            query = c.table(MARKERS_TABLE).select("*")
            if client_email:
                query = query.eq("client_email", client_email)
            if engagement_id:
                query = query.eq("engagement_id", engagement_id)
            if not include_inactive:
                query = query.eq("is_active", True)
            return query.order("created_at")

        rows = await self._select(build, "markers fetch")
        updates = await self._updates_for([row["id"] for row in rows])
        return [marker_from_row(row, updates.get(row["id"], [])) for row in rows]

    async def get_marker(self, marker_id: str) -> Optional[Marker]:
        rows = await self._select(
            lambda c: c.table(MARKERS_TABLE).select("*").eq("id", marker_id).limit(1),
            "marker fetch",
        )
        if not rows:
            return None
        updates = await self._updates_for([marker_id])
        return marker_from_row(rows[0], updates.get(marker_id, []))

    async def create_marker(self, marker: Marker, initial_update: MarkerUpdate) -> bool:
        marker_row = marker_to_row(marker)
        inserted = await self._write(
            lambda c: c.table(MARKERS_TABLE).insert(marker_row),
            "marker insert",
        )
        if inserted is None:
            return False

        update_row = update_to_row(initial_update)
        appended = await self._write(
            lambda c: c.table(UPDATES_TABLE).insert(update_row),
            "baseline update insert",
        )
        if appended is not None:
            return True

        # Roll back so no marker is left without history
        removed = await self._write(
            lambda c: c.table(MARKERS_TABLE).delete().eq("id", marker.id),
            "marker rollback",
        )
        if removed is None:
            logger.critical(f"Marker {marker.id} left without baseline update; manual cleanup needed")
        return False

    async def append_marker_update(self, marker_id: str, update: MarkerUpdate) -> bool:
        update_row = update_to_row(update)
        appended = await self._write(
            lambda c: c.table(UPDATES_TABLE).insert(update_row),
            "marker update insert",
        )
        if appended is None:
            return False
        updated = await self._write(
            lambda c: c.table(MARKERS_TABLE).update({"current_score": update.score}).eq("id", marker_id),
            "marker current score update",
        )
        if updated is not None:
            return True

        # Roll back so history never runs ahead of current_score
        removed = await self._write(
            lambda c: c.table(UPDATES_TABLE).delete().eq("id", update.id),
            "marker update rollback",
        )
        if removed is None:
            logger.critical(
                f"Update {update.id} kept for marker {marker_id} without current_score; manual cleanup needed"
            )
        return False

    async def set_marker_active(self, marker_id: str, active: bool) -> bool:
        updated = await self._write(
            lambda c: c.table(MARKERS_TABLE).update({"is_active": active}).eq("id", marker_id),
            "marker active flag update",
        )
        return updated is not None


class InMemoryMarkerRepository(MarkerRepository):
    """In-process adapter for local development and tests. Returns copies."""

    def __init__(self):
        self.markers: Dict[str, Marker] = {}

    async def fetch_markers(
        self,
        client_email: Optional[str] = None,
        engagement_id: Optional[str] = None,
        include_inactive: bool = False,
    ) -> List[Marker]:
        found = []
        for marker in self.markers.values():
            if client_email and marker.client_email != client_email:
                continue
            if engagement_id and marker.engagement_id != engagement_id:
                continue
            if not include_inactive and not marker.active:
                continue
            found.append(deepcopy(marker))
        return found

    async def get_marker(self, marker_id: str) -> Optional[Marker]:
        marker = self.markers.get(marker_id)
        return deepcopy(marker) if marker else None

    async def create_marker(self, marker: Marker, initial_update: MarkerUpdate) -> bool:
        stored = deepcopy(marker)
        stored.updates = [deepcopy(initial_update)]
        self.markers[stored.id] = stored
        return True

    async def append_marker_update(self, marker_id: str, update: MarkerUpdate) -> bool:
        marker = self.markers.get(marker_id)
        if marker is None:
            return False
        marker.updates.append(deepcopy(update))
        marker.current = update.score
        return True

    async def set_marker_active(self, marker_id: str, active: bool) -> bool:
        marker = self.markers.get(marker_id)
        if marker is None:
            return False
        marker.active = active
        return True
