"""
Detector registry.

Registration order is evaluation order, and evaluation order breaks ties
between insights of equal severity. Keep imports in
creators_os.insights.detectors in the intended order.

    @DetectorRegistry.register(InsightKey.OVERDUE_TASKS)
    class OverdueTasksDetector(InsightDetector):
        ...

    detectors = DetectorRegistry.get_all_detectors(config)
"""

import logging
from typing import Optional, Type

from creators_os.insights.config import InsightConfig
from creators_os.insights.models import InsightKey

logger = logging.getLogger(__name__)


class DetectorRegistry:
    """Maps InsightKey to the detector class that produces it."""

    # Dicts keep insertion order
    _detectors: dict[InsightKey, Type] = {}

    @classmethod
    def register(cls, insight_key: InsightKey):
        """Class decorator registering a detector for `insight_key`."""
        def decorator(detector_cls: Type):
            previous = cls._detectors.get(insight_key)
            if previous is not None and previous is not detector_cls:
                logger.warning(
                    "detector_registry.overwritten",
                    extra={
                        "insight_key": insight_key.value,
                        "previous": previous.__name__,
                        "detector": detector_cls.__name__,
                    },
                )
            cls._detectors[insight_key] = detector_cls
            return detector_cls

        return decorator

    @classmethod
    def get_all_detectors(
        cls,
        config: InsightConfig,
        agency_wide: Optional[bool] = None,
    ) -> list:
        """
        Instantiate enabled detectors in registration order.

        Args:
            config: Configuration for the detectors
            agency_wide: When set, keep only detectors whose agency_wide
                flag matches
        """
        detectors = []
        for insight_key, detector_cls in cls._detectors.items():
            if not config.is_insight_key_enabled(insight_key):
                continue
            if agency_wide is not None and detector_cls.agency_wide != agency_wide:
                continue
            detectors.append(detector_cls(config))
        return detectors

    @classmethod
    def get_registered_keys(cls) -> list[InsightKey]:
        return list(cls._detectors.keys())

    @classmethod
    def unregister(cls, insight_key: InsightKey) -> None:
        """Remove a registration. Used by tests."""
        cls._detectors.pop(insight_key, None)
