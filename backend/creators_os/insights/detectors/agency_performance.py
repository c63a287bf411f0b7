"""
Agency performance detector (agency scope, agency-wide).

Compares the completion rate of tasks created in the current trailing
window with the window before it. Evaluated once over every managed
creator's tasks.
"""

from datetime import datetime, timedelta

from creators_os.insights.dates import in_trailing_window
from creators_os.insights.detectors.base import AGENCY_ONLY, InsightDetector
from creators_os.insights.detectors.registry import DetectorRegistry
from creators_os.insights.models import (
    InsightCandidate,
    InsightKey,
    InsightSeverity,
    InsightSnapshot,
)


@DetectorRegistry.register(InsightKey.AGENCY_PERFORMANCE_UP)
class AgencyPerformanceUpDetector(InsightDetector):

    scopes = AGENCY_ONLY
    agency_wide = True

    @property
    def insight_key(self) -> InsightKey:
        return InsightKey.AGENCY_PERFORMANCE_UP

    def detect(self, snapshot: InsightSnapshot, now: datetime) -> list[InsightCandidate]:
        today = self._today(now)
        window_days = self.thresholds.completion_window_days
        previous_end = today - timedelta(days=window_days)

        current_tasks = []
        previous_tasks = []
        for task in snapshot.tasks:
            created = self._local_date(task.created_at)
            if in_trailing_window(created, today, window_days):
                current_tasks.append(task)
            elif in_trailing_window(created, previous_end, window_days):
                previous_tasks.append(task)

        current_done, current_active = self._completion_counts(current_tasks)
        previous_done, previous_active = self._completion_counts(previous_tasks)

        min_tasks = self.thresholds.completion_min_tasks
        if current_done + current_active < min_tasks:
            return []
        if previous_done + previous_active < min_tasks:
            return []

        current_rate = self._completion_rate(current_done, current_active)
        previous_rate = self._completion_rate(previous_done, previous_active)
        if current_rate is None or previous_rate is None:
            return []

        improvement = current_rate - previous_rate
        if improvement < self.thresholds.performance_improvement_pp:
            return []

        return [self._candidate(
            snapshot,
            InsightSeverity.INFO,
            params={
                "current_rate": current_rate,
                "previous_rate": previous_rate,
                "improvement": improvement,
                "window_days": window_days,
            },
        )]
