"""
Freemium plan limits.

Free-plan limits are configurable through environment variables so they
can be tuned per deployment without a code change. Premium has no limits.
"""

import logging
import os
from enum import Enum
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class Plan(str, Enum):
    FREE = "free"
    PREMIUM = "premium"


class LimitType(str, Enum):
    COMPANIES = "companies"
    EVENTS_PER_MONTH = "events_per_month"
    ACTIVE_TASKS = "active_tasks"
    AI_GENERATIONS_PER_MONTH = "ai_generations_per_month"


# Default free-plan limits
FREE_PLAN_DEFAULTS: Dict[LimitType, int] = {
    LimitType.COMPANIES: 3,
    LimitType.EVENTS_PER_MONTH: 30,
    LimitType.ACTIVE_TASKS: 50,
    LimitType.AI_GENERATIONS_PER_MONTH: 10,
}

# Fallback for unknown plans
DEFAULT_PLAN = Plan.FREE

# Share of a limit after which the "approaching" warning is shown
DEFAULT_APPROACHING_RATIO = 0.8


def _env_number(env_name: str, default, cast):
    """Read a numeric override. Malformed values fall back to the default."""
    raw = os.getenv(env_name)
    if raw is None:
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning(
            "freemium.invalid_env_value",
            extra={"env_name": env_name, "value": raw, "default": default},
        )
        return default


def _env_limit(limit_type: LimitType) -> int:
    env_name = f"FREEMIUM_{limit_type.value.upper()}_LIMIT"
    return _env_number(env_name, FREE_PLAN_DEFAULTS[limit_type], int)


def approaching_limit_ratio() -> float:
    return _env_number("FREEMIUM_APPROACHING_RATIO", DEFAULT_APPROACHING_RATIO, float)


def resolve_plan(plan) -> Plan:
    """Map a plan id to a Plan, falling back to free for unknown ids."""
    try:
        return Plan(plan)
    except ValueError:
        return DEFAULT_PLAN


def resolve_limit_type(limit_type) -> LimitType:
    """
    Map a limit id to a LimitType.

    Raises:
        ValueError: If the limit type is unknown
    """
    try:
        return LimitType(limit_type)
    except ValueError:
        raise ValueError(
            f"Unknown limit type: {limit_type}. "
            f"Available: {[t.value for t in LimitType]}"
        )


def get_plan_limit(plan, limit_type) -> Optional[int]:
    """
    Get the limit for a plan.

    Returns:
        The limit, or None when the plan is unlimited
    """
    limit_type = resolve_limit_type(limit_type)
    if resolve_plan(plan) == Plan.PREMIUM:
        return None
    return max(0, _env_limit(limit_type))
