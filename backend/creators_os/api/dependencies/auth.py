"""
Request identity dependencies.

Identity is established by the upstream auth layer, which forwards:
- X-User-Id: authenticated user id (required)
- X-Account-Type: "creator" (default) or "agency"

Routes never read user ids from request bodies.
"""

import logging
from dataclasses import dataclass

from fastapi import Depends, Request

from creators_os.platform.errors import AuthenticationError, PermissionDeniedError

logger = logging.getLogger(__name__)

USER_ID_HEADER = "X-User-Id"
ACCOUNT_TYPE_HEADER = "X-Account-Type"

ACCOUNT_TYPE_CREATOR = "creator"
ACCOUNT_TYPE_AGENCY = "agency"


@dataclass(frozen=True)
class UserContext:
    user_id: str
    account_type: str = ACCOUNT_TYPE_CREATOR

    @property
    def is_agency(self) -> bool:
        return self.account_type == ACCOUNT_TYPE_AGENCY


def get_user_context(request: Request) -> UserContext:
    """
    Resolve the caller's identity.

    Raises:
        AuthenticationError: If X-User-Id is missing or blank
    """
    user_id = (request.headers.get(USER_ID_HEADER) or "").strip()
    if not user_id:
        raise AuthenticationError()

    account_type = (request.headers.get(ACCOUNT_TYPE_HEADER) or ACCOUNT_TYPE_CREATOR).strip().lower()
    return UserContext(user_id=user_id, account_type=account_type)


def ensure_agency(user: UserContext, feature: str = "Agency insights") -> None:
    """
    Raises:
        PermissionDeniedError: If the caller is not an agency account
    """
    if not user.is_agency:
        logger.warning(
            "agency_access.denied",
            extra={"user_id": user.user_id, "account_type": user.account_type, "feature": feature},
        )
        raise PermissionDeniedError(f"{feature} require an agency account")


def require_agency_account(user: UserContext = Depends(get_user_context)) -> UserContext:
    """Dependency for agency-only routes."""
    ensure_agency(user)
    return user
