"""
Insight store.

Remembers which insights a user was shown on a given day and which of
them they dismissed.

SECURITY:
- user_id comes from the authenticated request only
- Every query is scoped to user_id
"""

import logging
from datetime import date, datetime, timezone
from typing import Iterable

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from creators_os.insights.models import InsightDisplay, InsightScope
from creators_os.models.insight_record import InsightRecord
from creators_os.platform.errors import NotFoundError


logger = logging.getLogger(__name__)


class InsightStore:
    """
    Per-user daily record of emitted insights.

    Handles:
    - Idempotent recording (one row per insight id per day)
    - Dismissal for the current day
    - History listing
    """

    def __init__(self, db_session: Session, user_id: str):
        """
        Initialize insight store.

        Args:
            db_session: Database session
            user_id: User identifier (from the authenticated request)
        """
        if not user_id:
            raise ValueError("user_id is required")

        self.db = db_session
        self.user_id = user_id

    def _records_for_day(self, for_date: date):
        return self.db.query(InsightRecord).filter(
            InsightRecord.user_id == self.user_id,
            InsightRecord.created_for_date == for_date,
        )

    def _recorded_ids(self, for_date: date) -> set[str]:
        return {
            r[0] for r in self._records_for_day(for_date)
            .with_entities(InsightRecord.insight_id)
            .all()
        }

    def record(
        self,
        insights: Iterable[InsightDisplay],
        scope: InsightScope,
        for_date: date,
    ) -> list[InsightRecord]:
        """
        Record insights for a day. Already-recorded insight ids are skipped.

        Each insert runs in its own savepoint, so a row written by a
        concurrent request for the same day is skipped instead of failing
        the whole batch.

        Args:
            insights: Rendered insights
            scope: Scope they were computed for
            for_date: Day they belong to

        Returns:
            Newly created records
        """
        existing = self._recorded_ids(for_date)

        created = []
        for insight in insights:
            if insight.id in existing:
                continue
            existing.add(insight.id)
            record = InsightRecord(
                user_id=self.user_id,
                scope=InsightScope(scope).value,
                related_creator_user_id=insight.creator_id,
                insight_id=insight.id,
                insight_key=insight.insight_key.value,
                severity=insight.severity.value,
                title=insight.title,
                message=insight.message,
                creator_name=insight.creator_name,
                created_for_date=for_date,
            )
            try:
                with self.db.begin_nested():
                    self.db.add(record)
            except IntegrityError:
                logger.info(
                    "insight_store.duplicate_skipped",
                    extra={
                        "user_id": self.user_id,
                        "insight_id": insight.id,
                        "for_date": for_date.isoformat(),
                    },
                )
                continue
            created.append(record)

        if created:
            logger.info(
                "insight_store.recorded",
                extra={
                    "user_id": self.user_id,
                    "for_date": for_date.isoformat(),
                    "count": len(created),
                },
            )

        return created

    def dismiss(self, insight_id: str, for_date: date) -> InsightRecord:
        """
        Dismiss an insight for the given day.

        Dismissing twice keeps the first dismissal time.

        Raises:
            NotFoundError: If the insight was not recorded that day
        """
        record = (
            self._records_for_day(for_date)
            .filter(InsightRecord.insight_id == insight_id)
            .first()
        )

        if record is None:
            raise NotFoundError("Insight", insight_id)

        if record.dismissed_at is None:
            record.dismissed_at = datetime.now(timezone.utc)
            self.db.flush()

            logger.info(
                "insight_store.dismissed",
                extra={
                    "user_id": self.user_id,
                    "insight_id": insight_id,
                    "for_date": for_date.isoformat(),
                },
            )

        return record

    def dismissed_ids(self, for_date: date) -> set[str]:
        """Insight ids dismissed on the given day."""
        return {
            r[0] for r in self._records_for_day(for_date)
            .filter(InsightRecord.dismissed_at.isnot(None))
            .with_entities(InsightRecord.insight_id)
            .all()
        }

    def history(self, limit: int = 50, offset: int = 0) -> tuple[list[InsightRecord], int]:
        """
        Recorded insights, newest day first.

        Returns:
            Tuple of (records, total count)
        """
        query = self.db.query(InsightRecord).filter(
            InsightRecord.user_id == self.user_id,
        )
        total = query.count()
        records = (
            query.order_by(
                InsightRecord.created_for_date.desc(),
                InsightRecord.created_at.desc(),
                InsightRecord.insight_id.asc(),
            )
            .offset(max(0, offset))
            .limit(max(0, limit))
            .all()
        )
        return records, total
