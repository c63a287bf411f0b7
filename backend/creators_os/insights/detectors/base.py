"""
Base class for insight detectors.

All insight detectors must inherit from InsightDetector and implement
the detect() method. Detectors analyze an InsightSnapshot and produce
InsightCandidate objects when a rule fires.

DESIGN PRINCIPLES:
- Deterministic: Same snapshot and `now` always produce same outputs
- Stateless: No state preserved between detect() calls
- Pure: No side effects, no I/O, no clock reads
- Configurable: Thresholds from InsightConfig
- Lenient: Records missing a required field are skipped, never raised on
"""

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Iterable, Optional

from creators_os.insights.config import InsightConfig
from creators_os.insights.dates import get_timezone, to_local_date
from creators_os.insights.models import (
    InsightCandidate,
    InsightKey,
    InsightScope,
    InsightSeverity,
    InsightSnapshot,
    Task,
)


BOTH_SCOPES = frozenset({InsightScope.CREATOR, InsightScope.AGENCY})
AGENCY_ONLY = frozenset({InsightScope.AGENCY})


class InsightDetector(ABC):
    """
    Abstract base class for insight detectors.

    Each detector is responsible for:
    1. Evaluating one rule against a snapshot
    2. Deciding severity
    3. Producing InsightCandidate objects with template params

    Subclasses must implement:
    - insight_key: The kind of insight this detector produces
    - detect(): The rule itself

    Subclasses may override:
    - scopes: Scopes the rule applies to
    - requires_creator: Rule needs a named creator (agency attribution)
    - agency_wide: Rule describes the agency as a whole, evaluated once
      over all creators' data rather than per creator
    """

    scopes: frozenset = BOTH_SCOPES
    requires_creator: bool = False
    agency_wide: bool = False

    def __init__(self, config: InsightConfig):
        """
        Initialize detector with configuration.

        Args:
            config: InsightConfig containing thresholds and settings
        """
        self.config = config
        self.thresholds = config.thresholds
        self.tz = get_timezone(config.timezone)

    @property
    @abstractmethod
    def insight_key(self) -> InsightKey:
        """The kind of insight this detector produces."""
        pass

    @abstractmethod
    def detect(self, snapshot: InsightSnapshot, now: datetime) -> list[InsightCandidate]:
        """
        Evaluate the rule.

        Args:
            snapshot: Tasks, events and companies to evaluate
            now: Aware reference time in the configured timezone

        Returns:
            List of InsightCandidate objects (may be empty)
        """
        pass

    def applies_to(self, snapshot: InsightSnapshot) -> bool:
        """Check scope and attribution requirements."""
        if snapshot.scope not in self.scopes:
            return False
        if self.requires_creator and not snapshot.creator_name:
            return False
        return True

    def _today(self, now: datetime) -> date:
        return to_local_date(now, self.tz)

    def _local_date(self, value) -> Optional[date]:
        return to_local_date(value, self.tz)

    def _active_tasks(self, tasks: Iterable[Task]) -> list[Task]:
        return [t for t in tasks if t.is_active]

    def _overdue_tasks(self, tasks: Iterable[Task], today: date) -> list[Task]:
        """Active tasks due strictly before today. Tasks without a due date never count."""
        overdue = []
        for task in self._active_tasks(tasks):
            due = self._local_date(task.due_date)
            if due is not None and due < today:
                overdue.append(task)
        return overdue

    def _completion_counts(self, tasks: Iterable[Task]) -> tuple[int, int]:
        """
        Count (done, active) tasks.

        Archived tasks that were never finished are in neither bucket.
        """
        done = 0
        active = 0
        for task in tasks:
            if task.is_done:
                done += 1
            elif task.is_active:
                active += 1
        return done, active

    def _completion_rate(self, done: int, active: int) -> Optional[int]:
        """
        Completion rate as a rounded percentage.

        Returns None when there is nothing to rate.
        """
        done = max(0, done)
        active = max(0, active)
        total = done + active
        if total == 0:
            return None
        return int(round(done * 100 / total))

    def _safe_ratio(self, numerator: int, denominator: int, default: float = 0.0) -> float:
        """Divide, returning default if denominator is zero or negative."""
        if denominator <= 0:
            return default
        return max(0, numerator) / denominator

    def _candidate(
        self,
        snapshot: InsightSnapshot,
        severity: InsightSeverity,
        params: Optional[dict] = None,
        subject_id: Optional[str] = None,
    ) -> InsightCandidate:
        """
        Build a candidate for this detector's key.

        In agency scope the snapshot's creator is attached, and the
        creator id becomes part of the stable insight id.
        """
        creator_name = None
        creator_id = None
        if snapshot.scope == InsightScope.AGENCY and snapshot.creator_name:
            creator_name = snapshot.creator_name
            creator_id = snapshot.creator_id
            creator_ref = snapshot.creator_id or snapshot.creator_name
            subject_id = f"{creator_ref}:{subject_id}" if subject_id else creator_ref

        return InsightCandidate(
            insight_key=self.insight_key,
            severity=severity,
            params=params or {},
            subject_id=subject_id,
            creator_name=creator_name,
            creator_id=creator_id,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(insight_key={self.insight_key.value})"
