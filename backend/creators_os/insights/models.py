"""
Insight engine data models.

Provides:
- Enums for the closed insight vocabulary (InsightKey, InsightSeverity, InsightScope)
- Snapshot dataclasses consumed by detectors (Task, CalendarEvent, CompanyRef,
  InsightSnapshot, CreatorSnapshot)
- InsightCandidate produced by detectors and InsightDisplay returned to callers
- INSIGHT_SEVERITY_CONFIG, the static severity-to-style table

Snapshots are read-only inputs. Nothing in this module touches a database.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional, Union


# =============================================================================
# Enums
# =============================================================================

class InsightScope(str, Enum):
    """Whose data an insight is computed for."""
    CREATOR = "creator"
    AGENCY = "agency"


class InsightSeverity(str, Enum):
    """Severity levels, ordered by urgency for display ranking."""
    INFO = "info"
    WARNING = "warning"
    RISK = "risk"

    @property
    def rank(self) -> int:
        """Higher rank sorts first."""
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    InsightSeverity.INFO: 0,
    InsightSeverity.WARNING: 1,
    InsightSeverity.RISK: 2,
}


class InsightKey(str, Enum):
    """
    Closed set of insight kinds.

    Values are a wire contract used for deduplication and dismissal
    persistence. Add a new member for a new kind; never repurpose one.
    """
    OVERDUE_TASKS = "overdue_tasks"
    HEAVY_DAYS_STREAK = "heavy_days_streak"
    COMPANY_CONCENTRATION = "company_concentration"
    OVERLOAD_INCREASE = "overload_increase"
    COMPLETION_RATE_LOW = "completion_rate_low"
    EARNINGS_MILESTONE = "earnings_milestone"
    NO_EVENTS_WEEK = "no_events_week"
    GOAL_STREAK = "goal_streak"
    CREATOR_AT_RISK = "creator_at_risk"
    AGENCY_PERFORMANCE_UP = "agency_performance_up"


class TaskStatus(str, Enum):
    """Task workflow states. DONE is terminal."""
    TODO = "TODO"
    DOING = "DOING"
    DONE = "DONE"


# =============================================================================
# Snapshot dataclasses
# =============================================================================

DateLike = Union[date, datetime]


@dataclass(frozen=True)
class Task:
    """A task as seen by the insight engine."""
    id: str
    title: str
    status: TaskStatus = TaskStatus.TODO
    due_date: Optional[DateLike] = None
    archived: bool = False
    company_id: Optional[str] = None
    created_at: Optional[datetime] = None
    priority: Optional[str] = None

    @property
    def is_done(self) -> bool:
        return self.status == TaskStatus.DONE

    @property
    def is_active(self) -> bool:
        """Not archived and not in the terminal state."""
        return not self.archived and not self.is_done


@dataclass(frozen=True)
class CalendarEvent:
    """A calendar event as seen by the insight engine."""
    id: str
    start: Optional[DateLike] = None
    end: Optional[datetime] = None
    created_at: Optional[datetime] = None
    category: Optional[str] = None
    company_id: Optional[str] = None
    title: Optional[str] = None


@dataclass(frozen=True)
class CompanyRef:
    """Minimal company projection: identity and display name."""
    id: str
    name: str


@dataclass(frozen=True)
class InsightSnapshot:
    """
    In-memory collections passed to the engine for one computation.

    creator_name/creator_id are set when the snapshot belongs to a
    managed creator inside an agency computation.
    """
    tasks: tuple[Task, ...] = ()
    events: tuple[CalendarEvent, ...] = ()
    companies: tuple[CompanyRef, ...] = ()
    scope: InsightScope = InsightScope.CREATOR
    creator_name: Optional[str] = None
    creator_id: Optional[str] = None

    def __post_init__(self):
        # Accept lists from callers but store tuples so snapshots stay hashable.
        object.__setattr__(self, "tasks", tuple(self.tasks))
        object.__setattr__(self, "events", tuple(self.events))
        object.__setattr__(self, "companies", tuple(self.companies))
        object.__setattr__(self, "scope", InsightScope(self.scope))


@dataclass(frozen=True)
class CreatorSnapshot:
    """One managed creator's data inside an agency computation."""
    id: str
    name: str
    tasks: tuple[Task, ...] = ()
    events: tuple[CalendarEvent, ...] = ()
    companies: tuple[CompanyRef, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "tasks", tuple(self.tasks))
        object.__setattr__(self, "events", tuple(self.events))
        object.__setattr__(self, "companies", tuple(self.companies))

    def to_snapshot(self) -> InsightSnapshot:
        return InsightSnapshot(
            tasks=self.tasks,
            events=self.events,
            companies=self.companies,
            scope=InsightScope.AGENCY,
            creator_name=self.name,
            creator_id=self.id,
        )


# =============================================================================
# Detector output
# =============================================================================

@dataclass
class InsightCandidate:
    """
    A detected insight before rendering.

    Produced by detectors; the template layer turns it into an
    InsightDisplay. `params` feeds the message template.
    """
    insight_key: InsightKey
    severity: InsightSeverity
    params: dict = field(default_factory=dict)
    subject_id: Optional[str] = None
    creator_name: Optional[str] = None
    creator_id: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.severity, InsightSeverity):
            self.severity = InsightSeverity(self.severity)
        if not isinstance(self.insight_key, InsightKey):
            self.insight_key = InsightKey(self.insight_key)

    @property
    def insight_id(self) -> str:
        """Stable id: the key alone, or key plus subject."""
        if self.subject_id:
            return f"{self.insight_key.value}:{self.subject_id}"
        return self.insight_key.value


@dataclass(frozen=True)
class InsightDisplay:
    """A rendered insight, ready for the dashboard or notification surfaces."""
    id: str
    insight_key: InsightKey
    severity: InsightSeverity
    title: str
    message: str
    icon: str
    creator_name: Optional[str] = None
    creator_id: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        data = {
            "id": self.id,
            "insight_key": self.insight_key.value,
            "severity": self.severity.value,
            "title": self.title,
            "message": self.message,
            "icon": self.icon,
        }
        if self.creator_name is not None:
            data["creator_name"] = self.creator_name
        if self.creator_id is not None:
            data["creator_id"] = self.creator_id
        return data


# =============================================================================
# Severity style table
# =============================================================================

INSIGHT_SEVERITY_CONFIG: dict[InsightSeverity, dict[str, str]] = {
    InsightSeverity.INFO: {
        "label": "מידע",
        "icon": "💡",
        "color": "text-blue-600",
        "bg_color": "bg-blue-50",
        "border_color": "border-blue-200",
    },
    InsightSeverity.WARNING: {
        "label": "אזהרה",
        "icon": "⚠️",
        "color": "text-amber-600",
        "bg_color": "bg-amber-50",
        "border_color": "border-amber-200",
    },
    InsightSeverity.RISK: {
        "label": "סיכון",
        "icon": "🚨",
        "color": "text-red-600",
        "bg_color": "bg-red-50",
        "border_color": "border-red-200",
    },
}
