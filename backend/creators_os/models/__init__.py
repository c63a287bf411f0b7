"""SQLAlchemy models."""

from creators_os.models.insight_record import InsightRecord

__all__ = ["InsightRecord"]
