"""
Freemium limits API routes.

- POST /api/limits/check: usage against the plan limit, with prompts
- POST /api/limits/enforce: same check, 402 when nothing more can be added
"""

import logging

from fastapi import APIRouter, Depends

from creators_os.api.dependencies.auth import UserContext, get_user_context
from creators_os.api.schemas.limits import LimitCheckRequest, LimitStatusResponse
from creators_os.entitlements.errors import LimitExceededError
from creators_os.entitlements.freemium import (
    LimitStatus,
    check_limit,
    enforce_limit,
    get_approaching_limit_message,
    get_upgrade_message,
    is_approaching_limit,
)
from creators_os.platform.errors import PaymentRequiredError, ValidationError


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/limits", tags=["limits"])


def _status_response(request: LimitCheckRequest, status: LimitStatus) -> LimitStatusResponse:
    approaching = is_approaching_limit(status)
    return LimitStatusResponse(
        **status.to_dict(),
        is_approaching=approaching,
        upgrade_message=get_upgrade_message(request.limit_type) if status.is_at_limit else None,
        approaching_message=(
            get_approaching_limit_message(request.limit_type, status.remaining)
            if approaching else None
        ),
    )


@router.post("/check", response_model=LimitStatusResponse)
async def check_plan_limit(
    request: LimitCheckRequest,
    user: UserContext = Depends(get_user_context),
):
    """Check usage against the plan limit."""
    try:
        status = check_limit(request.plan, request.limit_type, request.current_count)
    except ValueError as e:
        raise ValidationError(str(e), details={"field": "limit_type"})

    return _status_response(request, status)


@router.post("/enforce", response_model=LimitStatusResponse)
async def enforce_plan_limit(
    request: LimitCheckRequest,
    user: UserContext = Depends(get_user_context),
):
    """
    Check usage and refuse when the limit is reached.

    Returns 402 PAYMENT_REQUIRED with the upgrade prompt.
    """
    try:
        status = enforce_limit(request.plan, request.limit_type, request.current_count)
    except ValueError as e:
        raise ValidationError(str(e), details={"field": "limit_type"})
    except LimitExceededError as e:
        logger.info(
            "limits.enforced",
            extra={"user_id": user.user_id, "limit_type": e.limit_type},
        )
        raise PaymentRequiredError(e.message, details=e.to_dict())

    return _status_response(request, status)
