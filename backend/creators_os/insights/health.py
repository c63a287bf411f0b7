"""
Creator health score.

Deterministic score 0-100 based on:
- Open tasks count (non-archived, not done)
- Overdue tasks count
- Events today and over the next 7 days
- Backlog pressure (tasks due within 3 days)
- Streak pressure (consecutive heavy days ahead)

Status bands:
- 0-35: calm
- 36-70: busy
- 71-100: overloaded
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, tzinfo
from enum import Enum
from typing import Iterable, Optional

from creators_os.insights.dates import to_local_date
from creators_os.insights.models import CalendarEvent, Task


class HealthStatus(str, Enum):
    CALM = "calm"
    BUSY = "busy"
    OVERLOADED = "overloaded"


# Points added per unit of each input
WEIGHTS = {
    "open_tasks": 0.8,
    "overdue_tasks": 5,
    "events_today": 3,
    "events_week": 0.5,
    "backlog_pressure": 3,
    "streak_pressure": 8,
}

STATUS_THRESHOLDS = {
    HealthStatus.CALM: 35,
    HealthStatus.BUSY: 70,
}

HEAVY_DAY_THRESHOLD = 5
MAX_STREAK_PRESSURE = 5
BACKLOG_DAYS = 3
LOOKAHEAD_DAYS = 7

STATUS_STYLES = {
    HealthStatus.CALM: {
        "label": "רגוע",
        "color": "text-emerald-600",
        "bg_color": "bg-emerald-50",
        "gradient": "from-emerald-400 to-emerald-500",
        "ring": "stroke-emerald-500",
    },
    HealthStatus.BUSY: {
        "label": "עמוס",
        "color": "text-amber-600",
        "bg_color": "bg-amber-50",
        "gradient": "from-amber-400 to-amber-500",
        "ring": "stroke-amber-500",
    },
    HealthStatus.OVERLOADED: {
        "label": "עומס יתר",
        "color": "text-red-600",
        "bg_color": "bg-red-50",
        "gradient": "from-red-400 to-red-500",
        "ring": "stroke-red-500",
    },
}


@dataclass
class HealthInputs:
    open_tasks_count: int = 0
    overdue_tasks_count: int = 0
    events_today_count: int = 0
    events_week_count: int = 0
    backlog_pressure: int = 0
    streak_pressure: int = 0
    daily_loads: list[int] = field(default_factory=list)

    def clamped(self) -> "HealthInputs":
        """Copy with negative counts treated as zero."""
        return HealthInputs(
            open_tasks_count=max(0, self.open_tasks_count),
            overdue_tasks_count=max(0, self.overdue_tasks_count),
            events_today_count=max(0, self.events_today_count),
            events_week_count=max(0, self.events_week_count),
            backlog_pressure=max(0, self.backlog_pressure),
            streak_pressure=max(0, self.streak_pressure),
            daily_loads=[max(0, load) for load in self.daily_loads],
        )


@dataclass
class HealthResult:
    score: int
    status: HealthStatus
    inputs: HealthInputs
    details: list[str]

    @property
    def status_label(self) -> str:
        return STATUS_STYLES[self.status]["label"]

    @property
    def status_color(self) -> str:
        return STATUS_STYLES[self.status]["color"]

    @property
    def status_bg_color(self) -> str:
        return STATUS_STYLES[self.status]["bg_color"]

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "status": self.status.value,
            "status_label": self.status_label,
            "status_color": self.status_color,
            "status_bg_color": self.status_bg_color,
            "details": list(self.details),
        }


def status_for_score(score: int) -> HealthStatus:
    if score <= STATUS_THRESHOLDS[HealthStatus.CALM]:
        return HealthStatus.CALM
    if score <= STATUS_THRESHOLDS[HealthStatus.BUSY]:
        return HealthStatus.BUSY
    return HealthStatus.OVERLOADED


def compute_health_score(inputs: HealthInputs) -> HealthResult:
    """Compute the health score from raw inputs."""
    inputs = inputs.clamped()

    raw = (
        inputs.open_tasks_count * WEIGHTS["open_tasks"]
        + inputs.overdue_tasks_count * WEIGHTS["overdue_tasks"]
        + inputs.events_today_count * WEIGHTS["events_today"]
        + inputs.events_week_count * WEIGHTS["events_week"]
        + inputs.backlog_pressure * WEIGHTS["backlog_pressure"]
        + inputs.streak_pressure * WEIGHTS["streak_pressure"]
    )
    score = min(100, max(0, int(round(raw))))

    return HealthResult(
        score=score,
        status=status_for_score(score),
        inputs=inputs,
        details=_describe(inputs),
    )


def _describe(inputs: HealthInputs) -> list[str]:
    """Up to two short Hebrew lines explaining the score."""
    lines = []

    if inputs.overdue_tasks_count > 0:
        lines.append(f"{inputs.overdue_tasks_count} משימות באיחור")
    if inputs.backlog_pressure > 3:
        lines.append(f"{inputs.backlog_pressure} משימות ב-3 ימים הקרובים")
    if inputs.events_today_count > 4:
        lines.append(f"יום עמוס: {inputs.events_today_count} אירועים היום")
    if inputs.streak_pressure >= 3:
        lines.append(f"{inputs.streak_pressure} ימים עמוסים ברצף")
    if inputs.open_tasks_count > 15:
        lines.append(f"{inputs.open_tasks_count} משימות פתוחות")

    if not lines:
        if inputs.open_tasks_count < 5 and inputs.overdue_tasks_count == 0:
            lines.append("הכל תחת שליטה!")
        elif inputs.events_today_count == 0:
            lines.append("יום פתוח לעבודה עמוקה")

    return lines[:2]


def is_heavy_day(load: int) -> bool:
    return load >= HEAVY_DAY_THRESHOLD


def calculate_streak_pressure(daily_loads: Iterable[int]) -> int:
    """Leading run of heavy days, capped at MAX_STREAK_PRESSURE."""
    streak = 0
    for load in daily_loads:
        if not is_heavy_day(load):
            break
        streak += 1
    return min(MAX_STREAK_PRESSURE, streak)


def health_inputs_from_snapshot(
    tasks: Iterable[Task],
    events: Iterable[CalendarEvent],
    now: datetime,
    tz: Optional[tzinfo] = None,
) -> HealthInputs:
    """
    Derive health inputs from raw tasks and events.

    Works on calendar days: "today" is now's date in `tz` (or now's own
    timezone when `tz` is omitted).
    """
    tz = tz or now.tzinfo
    today = to_local_date(now, tz) if tz else now.date()

    open_tasks = [t for t in tasks if t.is_active]
    task_days = [to_local_date(t.due_date, tz) for t in open_tasks]
    event_days = [to_local_date(e.start, tz) for e in events]

    loads_by_day: dict = {}
    for day in event_days + task_days:
        if day is not None:
            loads_by_day[day] = loads_by_day.get(day, 0) + 1

    week_end = today + timedelta(days=LOOKAHEAD_DAYS)
    backlog_end = today + timedelta(days=BACKLOG_DAYS)
    daily_loads = [
        loads_by_day.get(today + timedelta(days=offset), 0)
        for offset in range(LOOKAHEAD_DAYS)
    ]

    return HealthInputs(
        open_tasks_count=len(open_tasks),
        overdue_tasks_count=sum(1 for d in task_days if d is not None and d < today),
        events_today_count=sum(1 for d in event_days if d == today),
        events_week_count=sum(1 for d in event_days if d is not None and today <= d <= week_end),
        backlog_pressure=sum(1 for d in task_days if d is not None and today <= d <= backlog_end),
        streak_pressure=calculate_streak_pressure(daily_loads),
        daily_loads=daily_loads,
    )
