"""
Insights API routes.

Provides endpoints for:
- Computing insights for a creator snapshot
- Computing agency insights across managed creators
- Dismissing an insight for today
- Listing recorded insights
- The severity style table

SECURITY:
- All routes require X-User-Id from the upstream auth layer
- Agency scope requires an agency account
- Records are user-scoped
"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query

from creators_os.api.dependencies.auth import (
    UserContext,
    ensure_agency,
    get_user_context,
    require_agency_account,
)
from creators_os.api.dependencies.config import get_insight_config, get_now
from creators_os.api.schemas.insights import (
    DismissResponse,
    InsightHistoryResponse,
    InsightListResponse,
    InsightRecordResponse,
    InsightResponse,
    SeverityStyleResponse,
    parse_agency_request,
    parse_snapshot,
)
from creators_os.database.session import get_db_session
from creators_os.insights.config import InsightConfig
from creators_os.insights.models import INSIGHT_SEVERITY_CONFIG, InsightScope
from creators_os.platform.errors import ValidationError
from creators_os.services.insight_service import InsightService
from creators_os.services.insight_store import InsightStore


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/insights", tags=["insights"])

DEFAULT_LIMIT = 3


def _list_response(insights, limit: int) -> InsightListResponse:
    return InsightListResponse(
        insights=[InsightResponse.from_display(i) for i in insights[:limit]],
        total=len(insights),
    )


@router.post("", response_model=InsightListResponse, response_model_exclude_none=True)
async def compute_snapshot_insights(
    payload: Dict[str, Any] = Body(...),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=50, description="Maximum insights to return"),
    persist: bool = Query(False, description="Record the returned insights and hide dismissed ones"),
    user: UserContext = Depends(get_user_context),
    config: InsightConfig = Depends(get_insight_config),
    now: Optional[datetime] = Depends(get_now),
    db_session=Depends(get_db_session),
):
    """
    Compute insights for one snapshot, most severe first.

    Agency-scoped snapshots require an agency account.
    """
    result = parse_snapshot(payload)
    if not result.ok:
        raise ValidationError("Invalid snapshot", details={"fields": result.errors})

    if result.snapshot.scope == InsightScope.AGENCY:
        ensure_agency(user)

    service = InsightService(db_session, user.user_id, config)
    insights = service.creator_insights(result.snapshot, now=now, persist=persist, limit=limit)
    if persist:
        db_session.commit()

    return _list_response(insights, limit)


@router.post("/agency", response_model=InsightListResponse, response_model_exclude_none=True)
async def compute_agency_snapshot_insights(
    payload: Dict[str, Any] = Body(...),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=50, description="Maximum insights to return"),
    persist: bool = Query(False, description="Record the returned insights and hide dismissed ones"),
    user: UserContext = Depends(require_agency_account),
    config: InsightConfig = Depends(get_insight_config),
    now: Optional[datetime] = Depends(get_now),
    db_session=Depends(get_db_session),
):
    """
    Compute insights across an agency's managed creators.

    Creator-level insights carry creator_name.
    """
    result = parse_agency_request(payload)
    if not result.ok:
        raise ValidationError("Invalid agency request", details={"fields": result.errors})

    service = InsightService(db_session, user.user_id, config)
    insights = service.agency_insights(result.creators, now=now, persist=persist, limit=limit)
    if persist:
        db_session.commit()

    return _list_response(insights, limit)


@router.get("/history", response_model=InsightHistoryResponse)
async def list_insight_history(
    limit: int = Query(50, ge=1, le=100, description="Maximum records to return"),
    offset: int = Query(0, ge=0, description="Offset for pagination"),
    user: UserContext = Depends(get_user_context),
    db_session=Depends(get_db_session),
):
    """Recorded insights for the current user, newest first."""
    store = InsightStore(db_session, user.user_id)
    records, total = store.history(limit=limit, offset=offset)

    return InsightHistoryResponse(
        items=[InsightRecordResponse.model_validate(r) for r in records],
        total=total,
        has_more=offset + len(records) < total,
    )


@router.get("/severity-config", response_model=Dict[str, SeverityStyleResponse])
async def get_severity_config(
    user: UserContext = Depends(get_user_context),
):
    """Static severity style table keyed by severity value."""
    return {
        severity.value: SeverityStyleResponse(**style)
        for severity, style in INSIGHT_SEVERITY_CONFIG.items()
    }


@router.post("/{insight_id}/dismiss", response_model=DismissResponse)
async def dismiss_insight(
    insight_id: str,
    user: UserContext = Depends(get_user_context),
    config: InsightConfig = Depends(get_insight_config),
    now: Optional[datetime] = Depends(get_now),
    db_session=Depends(get_db_session),
):
    """
    Dismiss an insight for today.

    Returns 404 when the insight was not recorded today.
    """
    service = InsightService(db_session, user.user_id, config)
    service.dismiss(insight_id, now=now)
    db_session.commit()

    logger.info(
        "insight.dismissed",
        extra={"user_id": user.user_id, "insight_id": insight_id},
    )

    return DismissResponse(success=True)
