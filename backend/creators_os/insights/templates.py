"""
Template-based rendering of insight titles and messages.

Provides deterministic, Hebrew-localized insight text.
No LLM dependency - same candidate always renders the same text.
"""

import logging

from creators_os.insights.models import (
    InsightCandidate,
    InsightDisplay,
    InsightKey,
    InsightSeverity,
)

logger = logging.getLogger(__name__)


INSIGHT_TITLES = {
    InsightKey.OVERDUE_TASKS: "משימות באיחור",
    InsightKey.HEAVY_DAYS_STREAK: "ימים עמוסים ברצף",
    InsightKey.COMPANY_CONCENTRATION: "ריכוז לקוחות",
    InsightKey.COMPLETION_RATE_LOW: "שיעור השלמה נמוך",
    InsightKey.NO_EVENTS_WEEK: "שבוע פנוי",
    InsightKey.CREATOR_AT_RISK: "יוצר בסיכון",
    InsightKey.AGENCY_PERFORMANCE_UP: "ביצועים בשיפור",
}

INSIGHT_ICONS = {
    InsightKey.OVERDUE_TASKS: "⏰",
    InsightKey.HEAVY_DAYS_STREAK: "🔥",
    InsightKey.COMPANY_CONCENTRATION: "📊",
    InsightKey.COMPLETION_RATE_LOW: "📉",
    InsightKey.NO_EVENTS_WEEK: "📅",
    InsightKey.CREATOR_AT_RISK: "🚨",
    InsightKey.AGENCY_PERFORMANCE_UP: "⭐",
}

DEFAULT_ICON = "💡"


# Templates organized by: InsightKey -> variant -> severity
INSIGHT_TEMPLATES = {
    InsightKey.OVERDUE_TASKS: {
        "default": {
            InsightSeverity.WARNING: "{count} משימות באיחור.",
            InsightSeverity.RISK: "{count} משימות באיחור. כדאי לטפל בהן בהקדם.",
        },
        "long_overdue": {
            InsightSeverity.RISK: (
                "{count} משימות באיחור, מתוכן {long_overdue_count} "
                "באיחור של {long_overdue_days}+ ימים."
            ),
        },
    },
    InsightKey.HEAVY_DAYS_STREAK: {
        "default": {
            InsightSeverity.WARNING: (
                "{streak} ימים עמוסים ברצף, עם {min_events}+ אירועים ביום."
            ),
        },
    },
    InsightKey.COMPANY_CONCENTRATION: {
        "default": {
            InsightSeverity.WARNING: (
                "{company_name} מהווה {percentage}% מהפעילות שלך."
            ),
        },
    },
    InsightKey.COMPLETION_RATE_LOW: {
        "default": {
            InsightSeverity.WARNING: (
                "רק {rate}% מהמשימות הושלמו ב-{window_days} הימים האחרונים."
            ),
        },
    },
    InsightKey.NO_EVENTS_WEEK: {
        "default": {
            InsightSeverity.INFO: "אין אירועים מתוכננים השבוע.",
        },
    },
    InsightKey.CREATOR_AT_RISK: {
        "default": {
            InsightSeverity.RISK: "{creator_name}: {signals}.",
        },
    },
    InsightKey.AGENCY_PERFORMANCE_UP: {
        "default": {
            InsightSeverity.INFO: (
                "שיעור ההשלמה בסוכנות עלה ל-{current_rate}% "
                "(לעומת {previous_rate}% בתקופה הקודמת)."
            ),
        },
    },
}


# Phrases for the compound creator-at-risk message
RISK_SIGNAL_TEMPLATES = {
    "overdue": "{overdue_count} משימות באיחור",
    "low_completion": "שיעור השלמה {completion_rate}%",
    "idle": "ללא אירועים ב-{idle_days} הימים האחרונים",
    "overloaded": "במצב עומס יתר",
}


def _format_signals(params: dict) -> str:
    phrases = []
    for signal in params.get("signals", []):
        template = RISK_SIGNAL_TEMPLATES.get(signal)
        if template is None:
            continue
        try:
            phrases.append(template.format(**params))
        except KeyError:
            phrases.append(signal)
    return ", ".join(phrases)


def _fallback_message(candidate: InsightCandidate) -> str:
    return candidate.insight_key.value.replace("_", " ")


def render_message(candidate: InsightCandidate) -> str:
    """
    Render the human-readable message for a candidate.

    Args:
        candidate: InsightCandidate produced by a detector

    Returns:
        Message string (deterministic)
    """
    variants = INSIGHT_TEMPLATES.get(candidate.insight_key, {})
    variant = candidate.params.get("variant", "default")
    severity_templates = variants.get(variant, variants.get("default", {}))
    template = severity_templates.get(candidate.severity)

    # Fall back to any template of the variant
    if not template and severity_templates:
        template = next(iter(severity_templates.values()))

    if not template:
        return _fallback_message(candidate)

    context = dict(candidate.params)
    if candidate.insight_key == InsightKey.CREATOR_AT_RISK:
        context["signals"] = _format_signals(candidate.params)
        context.setdefault("creator_name", candidate.creator_name or "")

    try:
        return template.format(**context)
    except KeyError as e:
        logger.warning(
            "insight_template.missing_param",
            extra={"insight_key": candidate.insight_key.value, "param": str(e)},
        )
        return _fallback_message(candidate)


def render_insight(candidate: InsightCandidate) -> InsightDisplay:
    """Turn a candidate into an InsightDisplay."""
    return InsightDisplay(
        id=candidate.insight_id,
        insight_key=candidate.insight_key,
        severity=candidate.severity,
        title=INSIGHT_TITLES.get(candidate.insight_key, _fallback_message(candidate)),
        message=render_message(candidate),
        icon=INSIGHT_ICONS.get(candidate.insight_key, DEFAULT_ICON),
        creator_name=candidate.creator_name,
        creator_id=candidate.creator_id,
    )
