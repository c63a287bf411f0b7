"""
Freemium entitlement checks.

This module provides:
- check_limit / enforce_limit: plan limit evaluation
- Upgrade and approaching-limit prompts (Hebrew)
- Usage counters for events and active tasks
"""

from creators_os.entitlements.errors import EntitlementError, LimitExceededError
from creators_os.entitlements.freemium import (
    LimitStatus,
    check_limit,
    count_active_tasks,
    count_events_this_month,
    enforce_limit,
    get_approaching_limit_message,
    get_upgrade_message,
    is_approaching_limit,
)

__all__ = [
    "EntitlementError",
    "LimitExceededError",
    "LimitStatus",
    "check_limit",
    "count_active_tasks",
    "count_events_this_month",
    "enforce_limit",
    "get_approaching_limit_message",
    "get_upgrade_message",
    "is_approaching_limit",
]
