"""
Persisted record of an insight shown to a user.

One row per (user, insight id, day). Recording is idempotent within a day
and dismissal is remembered for that day only, so a condition that still
holds tomorrow resurfaces.
"""

from sqlalchemy import Column, Date, Index, String, Text, UniqueConstraint

from creators_os.db_base import Base
from creators_os.models.base import (
    TimestampMixin,
    UserScopedMixin,
    UTCDateTime,
    generate_uuid,
)


class InsightRecord(Base, UserScopedMixin, TimestampMixin):
    __tablename__ = "insight_records"

    id = Column(String(255), primary_key=True, default=generate_uuid)

    scope = Column(String(20), nullable=False)
    related_creator_user_id = Column(String(255), nullable=True)

    # Stable id from the engine, e.g. "company_concentration:acme"
    insight_id = Column(String(255), nullable=False)
    insight_key = Column(String(50), nullable=False)
    severity = Column(String(20), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    creator_name = Column(String(255), nullable=True)

    created_for_date = Column(Date, nullable=False)
    dismissed_at = Column(UTCDateTime(), nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "user_id", "insight_id", "created_for_date",
            name="uq_insight_record_user_insight_day",
        ),
        Index("ix_insight_records_user_date", "user_id", "created_for_date"),
    )

    @property
    def is_dismissed(self) -> bool:
        return self.dismissed_at is not None

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "id": self.id,
            "insight_id": self.insight_id,
            "insight_key": self.insight_key,
            "severity": self.severity,
            "title": self.title,
            "message": self.message,
            "scope": self.scope,
            "creator_name": self.creator_name,
            "related_creator_user_id": self.related_creator_user_id,
            "created_for_date": self.created_for_date.isoformat() if self.created_for_date else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "dismissed_at": self.dismissed_at.isoformat() if self.dismissed_at else None,
        }

    def __repr__(self) -> str:
        return (
            f"<InsightRecord(user_id={self.user_id}, insight_id={self.insight_id}, "
            f"created_for_date={self.created_for_date})>"
        )
