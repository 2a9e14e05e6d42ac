# src/narrative/core/models.py
"""
Domain Values for the Narrative Progress Engine

Plain dataclasses and enums shared by every domain:
- FIRES dimensions and competency zones
- Alignment ratings and zone breakdowns
- Markers (more/less trackers) and their update history
- Coaching engagements and their derived phase
- Visibility edges, shareable content and feed items

Nothing in here talks to a data store. Repositories build these values from rows,
services compute over them, and API routers serialise them with ``to_dict()``.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum, IntEnum
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple
import uuid


# -------------------------
# Enums
# -------------------------

class FiresElement(str, Enum):
    """The five FIRES competency dimensions."""
    FEELINGS = "feelings"
    INFLUENCE = "influence"
    RESILIENCE = "resilience"
    ETHICS = "ethics"
    STRENGTHS = "strengths"


# Canonical dimension order. Every walk over dimensions uses this tuple.
FIRES_ORDER: Tuple[FiresElement, ...] = (
    FiresElement.FEELINGS,
    FiresElement.INFLUENCE,
    FiresElement.RESILIENCE,
    FiresElement.ETHICS,
    FiresElement.STRENGTHS,
)


class Zone(IntEnum):
    """Ordinal competency zone."""
    EXPLORING = 1
    DISCOVERING = 2
    PERFORMING = 3
    OWNING = 4

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @classmethod
    def from_label(cls, label: str) -> "Zone":
        """Parse 'Exploring' / 'exploring' / 'EXPLORING'."""
        return cls[str(label).strip().upper()]


class Phase(str, Enum):
    """Engagement phase, a pure function of the engagement week."""
    NAME = "name"
    VALIDATE = "validate"
    COMMUNICATE = "communicate"


class EngagementStatus(str, Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"


class MarkerDirection(str, Enum):
    MORE = "more"
    LESS = "less"


class UpdateSource(str, Enum):
    """Where a marker score came from."""
    BASELINE = "baseline"
    SESSION = "session"
    WEEKLY_CHECK = "weekly_check"
    SELF_REPORT = "self_report"
    COACH_OBSERVATION = "coach_observation"


class ContentKind(str, Enum):
    """Kinds of shareable content that can reach a feed."""
    PRIORITY = "priority"
    PROOF = "proof"
    SHARE = "share"
    PREDICTION = "prediction"


class ConnectionType(str, Enum):
    MUTUAL = "mutual"
    YOU_INVITED = "you_invited"
    INVITED_YOU = "invited_you"


# -------------------------
# Helpers
# -------------------------

TOTAL_WEEKS = 12


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse an ISO timestamp (or date) from a database row. Naive values are read as UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        try:
            parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_date(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    parsed = parse_datetime(value)
    return parsed.date() if parsed else None


def phase_for_week(week: int) -> Phase:
    """Weeks 1-4 name, 5-8 validate, 9-12 communicate. Anything past 8 is communicate."""
    if week <= 4:
        return Phase.NAME
    if week <= 8:
        return Phase.VALIDATE
    return Phase.COMMUNICATE


def _new_id() -> str:
    return str(uuid.uuid4())


# -------------------------
# Alignment and zones
# -------------------------

@dataclass
class AlignmentRatings:
    """Self-reported alignment, one 1-4 rating per FIRES dimension."""
    feelings: float = 1
    influence: float = 1
    resilience: float = 1
    ethics: float = 1
    strengths: float = 1

    def values(self) -> List[float]:
        return [getattr(self, element.value) for element in FIRES_ORDER]

    def get(self, element: FiresElement) -> float:
        return getattr(self, FiresElement(element).value)

    def __iter__(self) -> Iterator[float]:
        return iter(self.values())

    @classmethod
    def from_sequence(cls, ratings: Sequence[Any]) -> "AlignmentRatings":
        """Build from values in canonical order. Missing trailing values count as 1."""
        values = list(ratings)[: len(FIRES_ORDER)]
        values += [1] * (len(FIRES_ORDER) - len(values))
        return cls(*[_as_number(v) for v in values])

    @classmethod
    def from_mapping(cls, ratings: Mapping[str, Any]) -> "AlignmentRatings":
        """
        Build from a mapping keyed by dimension name, or by the legacy
        questionnaire keys q1..q5 (q1 = feelings ... q5 = strengths).
        """
        values = []
        for index, element in enumerate(FIRES_ORDER, start=1):
            raw = ratings.get(element.value)
            if raw is None:
                raw = ratings.get(f"q{index}")
            values.append(_as_number(raw))
        return cls(*values)

    def to_dict(self) -> Dict[str, float]:
        return {element.value: self.get(element) for element in FIRES_ORDER}


def _as_number(value: Any) -> float:
    if value is None:
        return 1
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 1
    if number != number:  # NaN
        return 1
    return number


@dataclass(frozen=True)
class ZoneBreakdown:
    """Exactly one zone per FIRES dimension."""
    feelings: Zone
    influence: Zone
    resilience: Zone
    ethics: Zone
    strengths: Zone

    def get(self, element: FiresElement) -> Zone:
        return getattr(self, FiresElement(element).value)

    def items(self) -> List[Tuple[FiresElement, Zone]]:
        """(dimension, zone) pairs in canonical order."""
        return [(element, self.get(element)) for element in FIRES_ORDER]

    def to_dict(self) -> Dict[str, str]:
        return {element.value: zone.label for element, zone in self.items()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ZoneBreakdown":
        """Parse a stored breakdown of zone labels. Raises KeyError/ValueError when incomplete."""
        zones = {}
        for element in FIRES_ORDER:
            raw = data[element.value]
            zones[element.value] = Zone(raw) if isinstance(raw, int) else Zone.from_label(raw)
        return cls(**zones)


# -------------------------
# Markers
# -------------------------

@dataclass
class MarkerUpdate:
    """One entry of a marker's append-only history."""
    score: int
    source: UpdateSource = UpdateSource.SESSION
    recorded_at: datetime = field(default_factory=utcnow)
    note: Optional[str] = None
    marker_id: Optional[str] = None
    id: str = field(default_factory=_new_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "marker_id": self.marker_id,
            "score": self.score,
            "source": self.source.value,
            "recorded_at": self.recorded_at.isoformat(),
            "note": self.note,
        }


@dataclass
class Marker:
    """A more/less behavioural tracker with baseline, target and current scores."""
    client_email: str
    marker_text: str
    direction: MarkerDirection
    baseline: int
    target: int
    current: int
    active: bool = True
    engagement_id: Optional[str] = None
    fires_connection: Optional[FiresElement] = None
    updates: List[MarkerUpdate] = field(default_factory=list)
    created_at: datetime = field(default_factory=utcnow)
    id: str = field(default_factory=_new_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "client_email": self.client_email,
            "engagement_id": self.engagement_id,
            "marker_text": self.marker_text,
            "direction": self.direction.value,
            "baseline": self.baseline,
            "target": self.target,
            "current": self.current,
            "active": self.active,
            "fires_connection": self.fires_connection.value if self.fires_connection else None,
            "created_at": self.created_at.isoformat(),
            "updates": [u.to_dict() for u in self.updates],
        }


# -------------------------
# Engagements
# -------------------------

@dataclass
class Engagement:
    """A 12-week coaching engagement. Phase is always derived from week."""
    client_email: str
    start_date: date
    week: int = 1
    status: EngagementStatus = EngagementStatus.ACTIVE
    end_date: Optional[date] = None
    coach_id: Optional[str] = None
    id: str = field(default_factory=_new_id)

    @property
    def phase(self) -> Phase:
        return phase_for_week(self.week)

    @property
    def is_terminal(self) -> bool:
        return self.status == EngagementStatus.COMPLETED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "client_email": self.client_email,
            "coach_id": self.coach_id,
            "week": self.week,
            "phase": self.phase.value,
            "status": self.status.value,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat() if self.end_date else None,
        }


# -------------------------
# Exchange
# -------------------------

@dataclass(frozen=True)
class VisibilityEdge:
    """Directed visibility relation: ``from_user`` shares with ``to_user``."""
    from_user: str
    to_user: str
    muted_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    id: Optional[str] = None

    @property
    def is_muted(self) -> bool:
        return self.muted_at is not None


@dataclass
class ShareableContent:
    """A raw content record of any kind, as fetched for a feed."""
    id: str
    kind: ContentKind
    author: str
    created_at: Optional[datetime] = None
    text: str = ""
    shareable: bool = False
    recipient: Optional[str] = None
    fires_tags: List[str] = field(default_factory=list)
    prediction_id: Optional[str] = None


@dataclass
class FeedItem:
    """Normalised, presentation-ready projection of a ShareableContent record."""
    id: str
    kind: ContentKind
    text: str
    author: str
    author_name: str
    created_at: Optional[datetime]
    is_own: bool
    fires_extracted: List[str] = field(default_factory=list)
    prediction_id: Optional[str] = None
    recipient: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.kind.value,
            "text": self.text,
            "client_email": self.author,
            "client_name": self.author_name,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "isOwn": self.is_own,
            "fires_extracted": list(self.fires_extracted),
            "prediction_id": self.prediction_id,
            "recipient": self.recipient,
        }


@dataclass
class ConnectionSummary:
    """One other user in a circle, as shown on a connections list."""
    email: str
    connection_type: ConnectionType
    share_count: int = 0
    last_activity: Optional[datetime] = None
    created_at: Optional[datetime] = None
    edge_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.edge_id,
            "email": self.email,
            "type": self.connection_type.value,
            "shareCount": self.share_count,
            "lastActivity": self.last_activity.isoformat() if self.last_activity else None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
