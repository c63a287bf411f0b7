"""
Completion rate detector.

Rate = done / (done + active) over tasks created in the trailing window.
Only fires once the sample is large enough to mean something.
"""

from datetime import datetime

from creators_os.insights.dates import in_trailing_window
from creators_os.insights.detectors.base import InsightDetector
from creators_os.insights.detectors.registry import DetectorRegistry
from creators_os.insights.models import (
    InsightCandidate,
    InsightKey,
    InsightSeverity,
    InsightSnapshot,
)


@DetectorRegistry.register(InsightKey.COMPLETION_RATE_LOW)
class CompletionRateLowDetector(InsightDetector):

    @property
    def insight_key(self) -> InsightKey:
        return InsightKey.COMPLETION_RATE_LOW

    def detect(self, snapshot: InsightSnapshot, now: datetime) -> list[InsightCandidate]:
        today = self._today(now)
        window_days = self.thresholds.completion_window_days

        recent = [
            task for task in snapshot.tasks
            if in_trailing_window(self._local_date(task.created_at), today, window_days)
        ]
        done, active = self._completion_counts(recent)
        if done + active < self.thresholds.completion_min_tasks:
            return []

        rate = self._completion_rate(done, active)
        if rate is None or rate >= self.thresholds.completion_rate_pct:
            return []

        return [self._candidate(
            snapshot,
            InsightSeverity.WARNING,
            params={
                "rate": rate,
                "done": done,
                "total": done + active,
                "window_days": window_days,
            },
        )]
