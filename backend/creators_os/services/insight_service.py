"""
Insight service.

Computes insights with the engine, hides the ones the user dismissed
today and records the ones actually shown in the insight store.
"""

import logging
from datetime import date, datetime
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from creators_os.insights.config import InsightConfig
from creators_os.insights.dates import get_timezone, resolve_now, to_local_date
from creators_os.insights.engine import compute_agency_insights, compute_insights
from creators_os.insights.models import (
    CreatorSnapshot,
    InsightDisplay,
    InsightScope,
    InsightSnapshot,
)
from creators_os.services.insight_store import InsightStore


logger = logging.getLogger(__name__)


class InsightService:

    def __init__(self, db_session: Session, user_id: str, config: Optional[InsightConfig] = None):
        self.config = config or InsightConfig()
        self.store = InsightStore(db_session, user_id)
        self.user_id = user_id
        self.tz = get_timezone(self.config.timezone)

    def today(self, now: Optional[datetime] = None) -> date:
        """Calendar day in the configured timezone."""
        return to_local_date(resolve_now(now, self.tz), self.tz)

    def creator_insights(
        self,
        snapshot: InsightSnapshot,
        now: Optional[datetime] = None,
        persist: bool = True,
        limit: Optional[int] = None,
    ) -> list[InsightDisplay]:
        """
        Compute insights for one snapshot.

        Returns every visible insight; only the first `limit` of them
        (all when None) are recorded as shown.
        """
        now = resolve_now(now, self.tz)
        insights = compute_insights(snapshot, self.config, now)
        return self._finalize(insights, snapshot.scope, now, persist, limit)

    def agency_insights(
        self,
        creators: Iterable[CreatorSnapshot],
        now: Optional[datetime] = None,
        persist: bool = True,
        limit: Optional[int] = None,
    ) -> list[InsightDisplay]:
        now = resolve_now(now, self.tz)
        insights = compute_agency_insights(creators, self.config, now)
        return self._finalize(insights, InsightScope.AGENCY, now, persist, limit)

    def dismiss(self, insight_id: str, now: Optional[datetime] = None):
        return self.store.dismiss(insight_id, self.today(now))

    def _finalize(
        self,
        insights: list[InsightDisplay],
        scope: InsightScope,
        now: datetime,
        persist: bool,
        limit: Optional[int],
    ) -> list[InsightDisplay]:
        if not persist:
            return insights

        for_date = to_local_date(now, self.tz)
        dismissed = self.store.dismissed_ids(for_date)
        visible = [i for i in insights if i.id not in dismissed]
        shown = visible if limit is None else visible[:max(0, limit)]
        self.store.record(shown, scope, for_date)

        if len(visible) != len(insights):
            logger.debug(
                "insight_service.dismissed_hidden",
                extra={
                    "user_id": self.user_id,
                    "hidden": len(insights) - len(visible),
                },
            )
        return visible
