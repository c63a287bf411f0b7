"""
Creator at risk detector (agency scope).

Combines several independent warning signs for a single managed creator.
One signal alone is normal noise; several at once put the creator at risk.
"""

from datetime import datetime, timedelta

from creators_os.insights.detectors.base import AGENCY_ONLY, InsightDetector
from creators_os.insights.detectors.registry import DetectorRegistry
from creators_os.insights.health import (
    HealthStatus,
    compute_health_score,
    health_inputs_from_snapshot,
)
from creators_os.insights.models import (
    InsightCandidate,
    InsightKey,
    InsightSeverity,
    InsightSnapshot,
)


@DetectorRegistry.register(InsightKey.CREATOR_AT_RISK)
class CreatorAtRiskDetector(InsightDetector):

    scopes = AGENCY_ONLY
    requires_creator = True

    @property
    def insight_key(self) -> InsightKey:
        return InsightKey.CREATOR_AT_RISK

    def detect(self, snapshot: InsightSnapshot, now: datetime) -> list[InsightCandidate]:
        today = self._today(now)
        signals = []
        params = {"creator_name": snapshot.creator_name}

        overdue = self._overdue_tasks(snapshot.tasks, today)
        if overdue:
            signals.append("overdue")
            params["overdue_count"] = len(overdue)

        done, active = self._completion_counts(snapshot.tasks)
        rate = self._completion_rate(done, active)
        # Same minimum sample as the completion-rate rule
        enough_tasks = done + active >= self.thresholds.completion_min_tasks
        if enough_tasks and rate is not None and rate < self.thresholds.completion_rate_pct:
            signals.append("low_completion")
            params["completion_rate"] = rate

        idle_days = self.thresholds.creator_idle_days
        if self._is_idle(snapshot, today, idle_days):
            signals.append("idle")
            params["idle_days"] = idle_days

        health = compute_health_score(
            health_inputs_from_snapshot(snapshot.tasks, snapshot.events, now, self.tz)
        )
        if health.status == HealthStatus.OVERLOADED:
            signals.append("overloaded")
            params["health_score"] = health.score

        if len(signals) < self.thresholds.creator_risk_min_signals:
            return []

        params["signals"] = signals
        return [self._candidate(snapshot, InsightSeverity.RISK, params=params)]

    def _is_idle(self, snapshot: InsightSnapshot, today, idle_days: int) -> bool:
        """No events in the trailing window while earlier events exist."""
        window_start = today - timedelta(days=idle_days)
        has_earlier = False
        for event in snapshot.events:
            day = self._local_date(event.start)
            if day is None:
                continue
            if window_start < day <= today:
                return False
            if day <= window_start:
                has_earlier = True
        return has_earlier
