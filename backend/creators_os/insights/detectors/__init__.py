"""
Insight detectors module.

Contains:
- Base detector interface
- Detector registry
- Concrete detector implementations

Importing this package registers every concrete detector. Registration
order is evaluation order, which keeps engine output deterministic.
"""

from creators_os.insights.detectors.base import InsightDetector
from creators_os.insights.detectors.registry import DetectorRegistry
from creators_os.insights.detectors.overdue_tasks import OverdueTasksDetector
from creators_os.insights.detectors.heavy_days import HeavyDaysStreakDetector
from creators_os.insights.detectors.company_concentration import CompanyConcentrationDetector
from creators_os.insights.detectors.completion_rate import CompletionRateLowDetector
from creators_os.insights.detectors.no_events_week import NoEventsThisWeekDetector
from creators_os.insights.detectors.creator_at_risk import CreatorAtRiskDetector
from creators_os.insights.detectors.agency_performance import AgencyPerformanceUpDetector

__all__ = [
    "InsightDetector",
    "DetectorRegistry",
    "OverdueTasksDetector",
    "HeavyDaysStreakDetector",
    "CompanyConcentrationDetector",
    "CompletionRateLowDetector",
    "NoEventsThisWeekDetector",
    "CreatorAtRiskDetector",
    "AgencyPerformanceUpDetector",
]
