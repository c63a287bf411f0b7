"""
No events this week detector.

Fires when nothing is scheduled in the current week for an account that
has had events before. Brand-new accounts stay quiet.
"""

from datetime import datetime, timedelta

from creators_os.insights.dates import start_of_week
from creators_os.insights.detectors.base import InsightDetector
from creators_os.insights.detectors.registry import DetectorRegistry
from creators_os.insights.models import (
    InsightCandidate,
    InsightKey,
    InsightSeverity,
    InsightSnapshot,
)


@DetectorRegistry.register(InsightKey.NO_EVENTS_WEEK)
class NoEventsThisWeekDetector(InsightDetector):

    @property
    def insight_key(self) -> InsightKey:
        return InsightKey.NO_EVENTS_WEEK

    def detect(self, snapshot: InsightSnapshot, now: datetime) -> list[InsightCandidate]:
        week_start = start_of_week(self._today(now), self.config.week_start_day)
        week_end = week_start + timedelta(days=7)

        has_history = False
        for event in snapshot.events:
            day = self._local_date(event.start)
            if day is None:
                continue
            if week_start <= day < week_end:
                return []
            if day < week_start:
                has_history = True

        if not has_history:
            return []

        return [self._candidate(
            snapshot,
            InsightSeverity.INFO,
            params={"week_start": week_start.isoformat()},
        )]
