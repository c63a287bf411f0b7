"""
Deterministic insight engine for Creators OS.

This module provides:
- Rule-based insight detection over tasks, events and companies
- Hebrew, template-based rendering (no LLM)
- Creator health score

CONSTRAINTS:
- Pure: no I/O, no clock reads beyond an optional default `now`
- Deterministic: identical input gives identical output
- Closed vocabulary: insight keys are a stable wire contract
"""

from creators_os.insights.config import (
    InsightConfig,
    InsightThresholds,
    load_insight_config,
)
from creators_os.insights.engine import compute_agency_insights, compute_insights
from creators_os.insights.health import (
    HealthInputs,
    HealthResult,
    HealthStatus,
    compute_health_score,
)
from creators_os.insights.models import (
    INSIGHT_SEVERITY_CONFIG,
    CalendarEvent,
    CompanyRef,
    CreatorSnapshot,
    InsightCandidate,
    InsightDisplay,
    InsightKey,
    InsightScope,
    InsightSeverity,
    InsightSnapshot,
    Task,
    TaskStatus,
)

__all__ = [
    "INSIGHT_SEVERITY_CONFIG",
    "CalendarEvent",
    "CompanyRef",
    "CreatorSnapshot",
    "HealthInputs",
    "HealthResult",
    "HealthStatus",
    "InsightCandidate",
    "InsightConfig",
    "InsightDisplay",
    "InsightKey",
    "InsightScope",
    "InsightSeverity",
    "InsightSnapshot",
    "InsightThresholds",
    "Task",
    "TaskStatus",
    "compute_agency_insights",
    "compute_health_score",
    "compute_insights",
    "load_insight_config",
]
