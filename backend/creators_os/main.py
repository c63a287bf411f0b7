"""
Creators OS insights service entry point.

Run with:
    uvicorn creators_os.main:create_app --factory
"""

import logging
from typing import Optional

from fastapi import FastAPI

from creators_os.api.routes import health, insights, limits
from creators_os.database.session import init_db
from creators_os.insights.config import InsightConfig, load_insight_config
from creators_os.platform.errors import register_error_handlers

logger = logging.getLogger(__name__)


def create_app(
    insight_config: Optional[InsightConfig] = None,
    init_database: bool = True,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        insight_config: Engine configuration; loaded from file/env when omitted
        init_database: Create missing tables on the configured database
    """
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = FastAPI(title="Creators OS Insights", version="0.1.0")

    app.state.insight_config = insight_config or load_insight_config()

    register_error_handlers(app)
    app.include_router(health.router)
    app.include_router(insights.router)
    app.include_router(limits.router)

    if init_database:
        init_db()

    logger.info(
        "app.created",
        extra={
            "timezone": app.state.insight_config.timezone,
            "enabled_insight_keys": app.state.insight_config.enabled_insight_keys,
        },
    )
    return app
