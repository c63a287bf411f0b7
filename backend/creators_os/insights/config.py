"""
Configuration for deterministic insight computation.

Provides:
- InsightThresholds: Tunable thresholds for every insight rule
- InsightConfig: Full configuration for the insight engine
- load_insight_config: Load configuration from file or defaults

Thresholds can be configured via:
1. An explicit config file path
2. INSIGHT_CONFIG_PATH environment variable
3. config/insights.json relative to the project root
4. Default values in this module

Configuration objects are passed explicitly to the engine. There is no
module-level cached instance.
"""

import json
import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional

from creators_os.insights.models import InsightKey

logger = logging.getLogger(__name__)


DEFAULT_TIMEZONE = "Asia/Jerusalem"


@dataclass(frozen=True)
class InsightThresholds:
    """
    Thresholds for insight detection.

    Percentages are in percentage points (e.g., 60.0 = 60%).
    """

    # Overdue tasks
    long_overdue_days: int = 3  # Any task this late escalates to risk
    overdue_risk_count: int = 10  # This many overdue tasks escalates to risk

    # Heavy-days streak
    heavy_days_window_days: int = 7  # Trailing window ending today
    heavy_day_min_events: int = 5  # Events per day to count as heavy
    heavy_days_min_streak: int = 3

    # Company concentration
    concentration_pct: float = 60.0  # Fires strictly above this share
    concentration_min_activities: int = 5

    # Completion rate
    completion_window_days: int = 30
    completion_rate_pct: float = 50.0  # Fires strictly below this rate
    completion_min_tasks: int = 5

    # Creator at risk (agency scope)
    creator_idle_days: int = 7
    creator_risk_min_signals: int = 2

    # Agency performance up (agency scope)
    performance_improvement_pp: float = 10.0

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: dict) -> "InsightThresholds":
        """Build thresholds from a dict, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning(
                "insight_config.unknown_thresholds",
                extra={"keys": unknown},
            )
        return cls(**{k: v for k, v in data.items() if k in known})


def _default_enabled_keys() -> list[str]:
    return [
        InsightKey.OVERDUE_TASKS.value,
        InsightKey.HEAVY_DAYS_STREAK.value,
        InsightKey.COMPANY_CONCENTRATION.value,
        InsightKey.COMPLETION_RATE_LOW.value,
        InsightKey.NO_EVENTS_WEEK.value,
        InsightKey.CREATOR_AT_RISK.value,
        InsightKey.AGENCY_PERFORMANCE_UP.value,
    ]


@dataclass
class InsightConfig:
    """
    Full configuration for the insight engine.

    Controls:
    - Detection thresholds
    - Enabled insight kinds (feature flags)
    - Output limit
    - Calendar conventions (timezone, first day of week)
    """

    thresholds: InsightThresholds = field(default_factory=InsightThresholds)

    # None means no cap; ranking is applied before truncation
    max_insights: Optional[int] = None

    timezone: str = DEFAULT_TIMEZONE

    # 0 = Monday ... 6 = Sunday, same as date.weekday()
    week_start_day: int = 0

    enabled_insight_keys: list[str] = field(default_factory=_default_enabled_keys)

    def is_insight_key_enabled(self, insight_key: InsightKey) -> bool:
        """Check if an insight kind is enabled."""
        return insight_key.value in self.enabled_insight_keys

    def get_enabled_keys(self) -> list[InsightKey]:
        """Get enabled keys as enums, dropping unknown values."""
        valid = {k.value for k in InsightKey}
        return [InsightKey(k) for k in self.enabled_insight_keys if k in valid]

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "thresholds": self.thresholds.to_dict(),
            "max_insights": self.max_insights,
            "timezone": self.timezone,
            "week_start_day": self.week_start_day,
            "enabled_insight_keys": list(self.enabled_insight_keys),
        }


def load_insight_config(config_path: Optional[Path] = None) -> InsightConfig:
    """
    Load insight configuration from file or environment.

    Priority:
    1. Explicit config file path argument
    2. INSIGHT_CONFIG_PATH environment variable
    3. config/insights.json relative to project root
    4. Default values

    Args:
        config_path: Optional explicit path to configuration file

    Returns:
        InsightConfig instance
    """
    if config_path and config_path.exists():
        return _load_from_file(config_path)

    env_path = os.environ.get("INSIGHT_CONFIG_PATH")
    if env_path:
        env_config_path = Path(env_path)
        if env_config_path.exists():
            return _load_from_file(env_config_path)
        logger.warning(
            "insight_config.env_path_missing",
            extra={"path": env_path},
        )

    # backend/creators_os/insights -> project root -> config/
    default_path = Path(__file__).parent.parent.parent.parent / "config" / "insights.json"
    if default_path.exists():
        return _load_from_file(default_path)

    return InsightConfig()


def _load_from_file(path: Path) -> InsightConfig:
    """
    Load configuration from a JSON file.

    Args:
        path: Path to the JSON configuration file

    Returns:
        InsightConfig instance

    Raises:
        json.JSONDecodeError: If file is not valid JSON
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    logger.info("insight_config.loaded", extra={"path": str(path)})

    return InsightConfig(
        thresholds=InsightThresholds.from_dict(data.get("thresholds", {})),
        max_insights=data.get("max_insights"),
        timezone=data.get("timezone", DEFAULT_TIMEZONE),
        week_start_day=data.get("week_start_day", 0),
        enabled_insight_keys=data.get("enabled_insight_keys", _default_enabled_keys()),
    )
