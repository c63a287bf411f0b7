"""
Company concentration detector.

Measures how much of the attributed activity (non-archived tasks and
events) belongs to the single most represented company.
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


@DetectorRegistry.register(InsightKey.COMPANY_CONCENTRATION)
class CompanyConcentrationDetector(InsightDetector):

    @property
    def insight_key(self) -> InsightKey:
        return InsightKey.COMPANY_CONCENTRATION

    def detect(self, snapshot: InsightSnapshot, now: datetime) -> list[InsightCandidate]:
        if not snapshot.companies:
            return []

        counts: dict[str, int] = {}
        for task in snapshot.tasks:
            if task.company_id and not task.archived:
                counts[task.company_id] = counts.get(task.company_id, 0) + 1
        for event in snapshot.events:
            if event.company_id:
                counts[event.company_id] = counts.get(event.company_id, 0) + 1

        total = sum(counts.values())
        if total < self.thresholds.concentration_min_activities:
            return []

        # First company in input order wins ties
        top = None
        top_count = 0
        for company in snapshot.companies:
            count = counts.get(company.id, 0)
            if count > top_count:
                top, top_count = company, count

        if top is None:
            return []

        share = self._safe_ratio(top_count, total) * 100
        if share <= self.thresholds.concentration_pct:
            return []

        return [self._candidate(
            snapshot,
            InsightSeverity.WARNING,
            params={
                "company_name": top.name,
                "company_id": top.id,
                "percentage": int(round(share)),
                "count": top_count,
                "total": total,
            },
            subject_id=top.id,
        )]
