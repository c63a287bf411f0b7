"""Insight configuration and clock dependencies."""

from datetime import datetime
from typing import Optional

from fastapi import Request

from creators_os.insights.config import InsightConfig, load_insight_config


def get_insight_config(request: Request) -> InsightConfig:
    """Configuration built once in create_app, or loaded on demand."""
    config = getattr(request.app.state, "insight_config", None)
    if config is None:
        config = load_insight_config()
        request.app.state.insight_config = config
    return config


def get_now() -> Optional[datetime]:
    """Reference time for computations. None means the current clock."""
    return None
