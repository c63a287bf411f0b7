"""
Freemium limit evaluation.

Determines whether a user on a given plan can add one more item of a
limited kind, and produces the Hebrew upgrade prompts shown in the UI.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from creators_os.config.freemium_limits import (
    LimitType,
    approaching_limit_ratio,
    Plan,
    get_plan_limit,
    resolve_limit_type,
    resolve_plan,
)
from creators_os.entitlements.errors import LimitExceededError
from creators_os.insights.dates import to_local_date
from creators_os.insights.models import CalendarEvent, Task

logger = logging.getLogger(__name__)


@dataclass
class LimitStatus:
    """Result of a limit check. limit/remaining are None when unlimited."""
    current: int
    limit: Optional[int]
    is_at_limit: bool
    can_add: bool
    remaining: Optional[int]

    @property
    def is_unlimited(self) -> bool:
        return self.limit is None

    def to_dict(self) -> dict:
        return {
            "current": self.current,
            "limit": self.limit,
            "is_at_limit": self.is_at_limit,
            "can_add": self.can_add,
            "remaining": self.remaining,
        }


_UPGRADE_MESSAGES = {
    LimitType.COMPANIES: "הגעת למגבלה של {limit} חברות בתוכנית החינמית. שדרג לפרימיום לחברות ללא הגבלה.",
    LimitType.EVENTS_PER_MONTH: "הגעת למגבלה של {limit} אירועים בחודש. שדרג לפרימיום לאירועים ללא הגבלה.",
    LimitType.ACTIVE_TASKS: "הגעת למגבלה של {limit} משימות פעילות. שדרג לפרימיום למשימות ללא הגבלה.",
    LimitType.AI_GENERATIONS_PER_MONTH: "הגעת למגבלה של {limit} יצירות AI בחודש. שדרג לפרימיום ליצירה ללא הגבלה.",
}

_APPROACHING_MESSAGES = {
    LimitType.COMPANIES: "נותרו {remaining} חברות מתוך {limit}",
    LimitType.EVENTS_PER_MONTH: "נותרו {remaining} אירועים החודש",
    LimitType.ACTIVE_TASKS: "נותרו {remaining} משימות",
    LimitType.AI_GENERATIONS_PER_MONTH: "נותרו {remaining} יצירות AI החודש",
}


def check_limit(plan, limit_type, current_count: int) -> LimitStatus:
    """
    Check usage against the plan limit.

    Args:
        plan: Plan id; unknown plans are treated as free
        limit_type: LimitType or its value
        current_count: Items the user already has (negative clamps to 0)

    Returns:
        LimitStatus

    Raises:
        ValueError: If the limit type is unknown
    """
    limit_type = resolve_limit_type(limit_type)
    current = max(0, current_count)
    limit = get_plan_limit(plan, limit_type)

    if limit is None:
        return LimitStatus(
            current=current,
            limit=None,
            is_at_limit=False,
            can_add=True,
            remaining=None,
        )

    return LimitStatus(
        current=current,
        limit=limit,
        is_at_limit=current >= limit,
        can_add=current < limit,
        remaining=max(0, limit - current),
    )


def is_approaching_limit(status: LimitStatus) -> bool:
    """True when usage passed the warning ratio but the limit is not reached."""
    if status.limit is None or status.is_at_limit:
        return False
    return status.current >= status.limit * approaching_limit_ratio()


def get_upgrade_message(limit_type) -> str:
    limit_type = resolve_limit_type(limit_type)
    return _UPGRADE_MESSAGES[limit_type].format(limit=get_plan_limit(Plan.FREE, limit_type))


def get_approaching_limit_message(limit_type, remaining: int) -> str:
    limit_type = resolve_limit_type(limit_type)
    return _APPROACHING_MESSAGES[limit_type].format(
        remaining=max(0, remaining),
        limit=get_plan_limit(Plan.FREE, limit_type),
    )


def count_events_this_month(events: Iterable[CalendarEvent], now: datetime) -> int:
    """
    Count events created in now's calendar month.

    Events without created_at are counted by their start.
    """
    tz = now.tzinfo
    today = to_local_date(now, tz) if tz else now.date()
    month_start = today.replace(day=1)

    count = 0
    for event in events:
        created = event.created_at if event.created_at is not None else event.start
        day = to_local_date(created, tz)
        if day is not None and month_start <= day <= today:
            count += 1
    return count


def count_active_tasks(tasks: Iterable[Task]) -> int:
    return sum(1 for task in tasks if task.is_active)


def enforce_limit(plan, limit_type, current_count: int) -> LimitStatus:
    """
    Check the limit and raise when nothing more can be added.

    Raises:
        LimitExceededError: If the plan limit has been reached
    """
    status = check_limit(plan, limit_type, current_count)
    if not status.can_add:
        limit_type = resolve_limit_type(limit_type)
        logger.info(
            "freemium.limit_reached",
            extra={
                "plan": resolve_plan(plan).value,
                "limit_type": limit_type.value,
                "current": status.current,
                "limit": status.limit,
            },
        )
        raise LimitExceededError(
            limit_type=limit_type.value,
            limit=status.limit,
            current=status.current,
            message=get_upgrade_message(limit_type),
        )
    return status
