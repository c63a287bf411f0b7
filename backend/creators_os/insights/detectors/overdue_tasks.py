"""
Overdue tasks detector.

Fires when active tasks are due before today. Escalates to risk when a
task is long overdue or when the backlog of overdue tasks is large.
"""

from datetime import datetime

from creators_os.insights.detectors.base import InsightDetector
from creators_os.insights.detectors.registry import DetectorRegistry
from creators_os.insights.models import (
    InsightCandidate,
    InsightKey,
    InsightSeverity,
    InsightSnapshot,
)


@DetectorRegistry.register(InsightKey.OVERDUE_TASKS)
class OverdueTasksDetector(InsightDetector):

    @property
    def insight_key(self) -> InsightKey:
        return InsightKey.OVERDUE_TASKS

    def detect(self, snapshot: InsightSnapshot, now: datetime) -> list[InsightCandidate]:
        today = self._today(now)
        overdue = self._overdue_tasks(snapshot.tasks, today)
        if not overdue:
            return []

        long_overdue_days = self.thresholds.long_overdue_days
        long_overdue_count = sum(
            1 for task in overdue
            if (today - self._local_date(task.due_date)).days >= long_overdue_days
        )

        severity = InsightSeverity.WARNING
        variant = "default"
        if long_overdue_count > 0:
            severity = InsightSeverity.RISK
            variant = "long_overdue"
        elif len(overdue) >= self.thresholds.overdue_risk_count:
            severity = InsightSeverity.RISK

        return [self._candidate(
            snapshot,
            severity,
            params={
                "variant": variant,
                "count": len(overdue),
                "long_overdue_count": long_overdue_count,
                "long_overdue_days": long_overdue_days,
            },
        )]
