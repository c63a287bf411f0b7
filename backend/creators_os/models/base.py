"""
Shared model mixins and column types.

- UTCDateTime: timestamps stored as UTC and always read back tz-aware
- TimestampMixin: created_at / updated_at maintained by the database
- UserScopedMixin: user_id column for per-user isolation
"""

import uuid
from datetime import timezone

from sqlalchemy import Column, DateTime, String, func
from sqlalchemy.types import TypeDecorator


def generate_uuid() -> str:
    return str(uuid.uuid4())


class UTCDateTime(TypeDecorator):
    """
    DateTime that binds and returns aware UTC values.

    Backends without timezone support (SQLite) hand back naive values;
    those are UTC by construction and get tzinfo attached on read.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class TimestampMixin:
    created_at = Column(UTCDateTime(), nullable=False, server_default=func.now())
    updated_at = Column(UTCDateTime(), nullable=True, onupdate=func.now())


class UserScopedMixin:
    """
    Rows owned by a single user.

    SECURITY: user_id comes from the authenticated request, never from the
    request body.
    """
    user_id = Column(String(255), nullable=False, index=True)
