"""
Deterministic insight engine.

Runs every enabled detector over a snapshot, ranks the candidates by
severity and renders them. Same snapshot, config and `now` always give
the same list.

Ranking:
- risk > warning > info
- Equal severity keeps detector registration order (stable sort)
- In agency computations, agency-wide insights come before per-creator
  insights of the same severity; per-creator insights follow creator
  input order
"""

import logging
from datetime import datetime
from typing import Iterable, Optional

from creators_os.insights.config import InsightConfig
from creators_os.insights.dates import get_timezone, resolve_now
from creators_os.insights.detectors import DetectorRegistry, InsightDetector
from creators_os.insights.models import (
    CreatorSnapshot,
    InsightCandidate,
    InsightDisplay,
    InsightScope,
    InsightSnapshot,
)
from creators_os.insights.templates import render_insight

logger = logging.getLogger(__name__)


def _run_detectors(
    detectors: Iterable[InsightDetector],
    snapshot: InsightSnapshot,
    now: datetime,
) -> list[InsightCandidate]:
    """Run applicable detectors. A failing detector is logged and skipped."""
    candidates = []
    for detector in detectors:
        if not detector.applies_to(snapshot):
            continue
        try:
            candidates.extend(detector.detect(snapshot, now))
        except Exception as e:
            logger.error(
                "insights.detector_failed",
                extra={
                    "insight_key": detector.insight_key.value,
                    "creator_name": snapshot.creator_name,
                    "error": str(e),
                },
                exc_info=True,
            )
    return candidates


def _rank_and_render(
    candidates: list[InsightCandidate],
    config: InsightConfig,
) -> list[InsightDisplay]:
    ranked = sorted(candidates, key=lambda c: -c.severity.rank)
    if config.max_insights is not None:
        ranked = ranked[:max(0, config.max_insights)]
    return [render_insight(c) for c in ranked]


def compute_insights(
    snapshot: InsightSnapshot,
    config: Optional[InsightConfig] = None,
    now: Optional[datetime] = None,
) -> list[InsightDisplay]:
    """
    Compute insights for a single snapshot.

    Args:
        snapshot: Tasks, events and companies plus scope
        config: Engine configuration (defaults if omitted)
        now: Reference time; defaults to the clock in the configured timezone

    Returns:
        Rendered insights, most severe first (may be empty)
    """
    config = config or InsightConfig()
    now = resolve_now(now, get_timezone(config.timezone))

    detectors = DetectorRegistry.get_all_detectors(config)
    candidates = _run_detectors(detectors, snapshot, now)
    insights = _rank_and_render(candidates, config)

    logger.info(
        "insights.computed",
        extra={
            "scope": snapshot.scope.value,
            "tasks": len(snapshot.tasks),
            "events": len(snapshot.events),
            "candidates": len(candidates),
            "insights": len(insights),
        },
    )
    return insights


def compute_agency_insights(
    creators: Iterable[CreatorSnapshot],
    config: Optional[InsightConfig] = None,
    now: Optional[datetime] = None,
) -> list[InsightDisplay]:
    """
    Compute insights across an agency's managed creators.

    Agency-wide detectors see the union of all creators' data.
    Creator-attributed detectors run once per creator and tag each
    insight with the creator's name.

    Args:
        creators: Managed creators in display order
        config: Engine configuration (defaults if omitted)
        now: Reference time; defaults to the clock in the configured timezone

    Returns:
        Rendered insights, most severe first (may be empty)
    """
    creators = list(creators)
    if not creators:
        return []

    config = config or InsightConfig()
    now = resolve_now(now, get_timezone(config.timezone))

    combined = InsightSnapshot(
        tasks=[t for c in creators for t in c.tasks],
        events=[e for c in creators for e in c.events],
        companies=[co for c in creators for co in c.companies],
        scope=InsightScope.AGENCY,
    )
    agency_detectors = DetectorRegistry.get_all_detectors(config, agency_wide=True)
    candidates = _run_detectors(agency_detectors, combined, now)

    creator_detectors = DetectorRegistry.get_all_detectors(config, agency_wide=False)
    for creator in creators:
        candidates.extend(_run_detectors(creator_detectors, creator.to_snapshot(), now))

    insights = _rank_and_render(candidates, config)

    logger.info(
        "insights.agency_computed",
        extra={
            "creators": len(creators),
            "candidates": len(candidates),
            "insights": len(insights),
        },
    )
    return insights
