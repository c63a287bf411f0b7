"""Configuration module for backend services."""

from creators_os.config.freemium_limits import (
    FREE_PLAN_DEFAULTS,
    LimitType,
    Plan,
    get_plan_limit,
    resolve_limit_type,
    resolve_plan,
)

__all__ = [
    "FREE_PLAN_DEFAULTS",
    "LimitType",
    "Plan",
    "get_plan_limit",
    "resolve_limit_type",
    "resolve_plan",
]
