"""
Entitlement error hierarchy.

Provides:
- EntitlementError: base for all entitlement failures
- LimitExceededError: a free-plan limit has been reached
"""

from typing import Optional


class EntitlementError(Exception):
    """Base exception for entitlement-related failures."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class LimitExceededError(EntitlementError):
    """
    Raised when adding one more item would exceed the plan limit.

    Carries a machine-readable error_code and the Hebrew upgrade prompt.
    """

    def __init__(
        self,
        limit_type: str,
        limit: int,
        current: int,
        message: Optional[str] = None,
    ):
        self.limit_type = limit_type
        self.limit = limit
        self.current = current
        self.error_code = "LIMIT_EXCEEDED"
        super().__init__(message or f"Limit {limit_type} reached ({current}/{limit})")

    def to_dict(self) -> dict:
        return {
            "error": self.error_code,
            "limit_type": self.limit_type,
            "limit": self.limit,
            "current": self.current,
            "message": self.message,
        }
