"""
Heavy-days streak detector.

Looks at the trailing window of calendar days ending today and finds the
longest run of consecutive days with many events.
"""

from datetime import datetime, timedelta

from creators_os.insights.detectors.base import InsightDetector
from creators_os.insights.detectors.registry import DetectorRegistry
from creators_os.insights.models import (
    InsightCandidate,
    InsightKey,
    InsightSeverity,
    InsightSnapshot,
)


@DetectorRegistry.register(InsightKey.HEAVY_DAYS_STREAK)
class HeavyDaysStreakDetector(InsightDetector):

    @property
    def insight_key(self) -> InsightKey:
        return InsightKey.HEAVY_DAYS_STREAK

    def detect(self, snapshot: InsightSnapshot, now: datetime) -> list[InsightCandidate]:
        today = self._today(now)
        window_days = max(0, self.thresholds.heavy_days_window_days)
        window_start = today - timedelta(days=window_days - 1)

        events_per_day: dict = {}
        for event in snapshot.events:
            day = self._local_date(event.start)
            if day is None or day > today or day < window_start:
                continue
            events_per_day[day] = events_per_day.get(day, 0) + 1

        # No activity in the window: nothing to evaluate
        if not events_per_day:
            return []

        longest = 0
        current = 0
        for offset in range(window_days):
            day = window_start + timedelta(days=offset)
            if events_per_day.get(day, 0) >= self.thresholds.heavy_day_min_events:
                current += 1
                longest = max(longest, current)
            else:
                current = 0

        if longest < self.thresholds.heavy_days_min_streak:
            return []

        return [self._candidate(
            snapshot,
            InsightSeverity.WARNING,
            params={
                "streak": longest,
                "min_events": self.thresholds.heavy_day_min_events,
            },
        )]
