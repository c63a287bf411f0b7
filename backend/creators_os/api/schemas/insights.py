"""
Pydantic schemas for the Insights API.

Request models validate snapshot payloads (snake_case JSON, ISO-8601
datetimes, YYYY-MM-DD dates). parse_snapshot / parse_agency_request turn
a raw payload into engine snapshots without raising.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from creators_os.insights.models import (
    CalendarEvent,
    CompanyRef,
    CreatorSnapshot,
    InsightDisplay,
    InsightScope,
    InsightSnapshot,
    Task,
    TaskStatus,
)


def _parse_day_or_timestamp(value: Any) -> Any:
    """A bare YYYY-MM-DD string is a date, anything else is left to pydantic."""
    if isinstance(value, str) and len(value) == 10:
        try:
            return date.fromisoformat(value)
        except ValueError:
            return value
    return value


# =============================================================================
# Request models
# =============================================================================

class TaskPayload(BaseModel):
    id: str = Field(..., min_length=1)
    title: str = ""
    status: TaskStatus = TaskStatus.TODO
    due_date: Optional[Union[datetime, date]] = None
    archived: bool = False
    company_id: Optional[str] = None
    created_at: Optional[datetime] = None
    priority: Optional[str] = None

    @field_validator("due_date", mode="before")
    @classmethod
    def parse_due_date(cls, value):
        return _parse_day_or_timestamp(value)

    def to_task(self) -> Task:
        return Task(
            id=self.id,
            title=self.title,
            status=self.status,
            due_date=self.due_date,
            archived=self.archived,
            company_id=self.company_id,
            created_at=self.created_at,
            priority=self.priority,
        )


class EventPayload(BaseModel):
    id: str = Field(..., min_length=1)
    start: Union[datetime, date]
    end: Optional[datetime] = None
    created_at: Optional[datetime] = None
    category: Optional[str] = None
    company_id: Optional[str] = None
    title: Optional[str] = None

    @field_validator("start", mode="before")
    @classmethod
    def parse_start(cls, value):
        return _parse_day_or_timestamp(value)

    def to_event(self) -> CalendarEvent:
        return CalendarEvent(
            id=self.id,
            start=self.start,
            end=self.end,
            created_at=self.created_at,
            category=self.category,
            company_id=self.company_id,
            title=self.title,
        )


class CompanyPayload(BaseModel):
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)

    def to_company(self) -> CompanyRef:
        return CompanyRef(id=self.id, name=self.name)


class InsightSnapshotRequest(BaseModel):
    """Snapshot for a single creator (or an agency viewing its own data)."""

    tasks: List[TaskPayload] = Field(default_factory=list)
    events: List[EventPayload] = Field(default_factory=list)
    companies: List[CompanyPayload] = Field(default_factory=list)
    scope: InsightScope = InsightScope.CREATOR
    creator_name: Optional[str] = None
    creator_id: Optional[str] = None

    def to_snapshot(self) -> InsightSnapshot:
        return InsightSnapshot(
            tasks=[t.to_task() for t in self.tasks],
            events=[e.to_event() for e in self.events],
            companies=[c.to_company() for c in self.companies],
            scope=self.scope,
            creator_name=self.creator_name,
            creator_id=self.creator_id,
        )


class CreatorPayload(BaseModel):
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    tasks: List[TaskPayload] = Field(default_factory=list)
    events: List[EventPayload] = Field(default_factory=list)
    companies: List[CompanyPayload] = Field(default_factory=list)

    def to_creator(self) -> CreatorSnapshot:
        return CreatorSnapshot(
            id=self.id,
            name=self.name,
            tasks=[t.to_task() for t in self.tasks],
            events=[e.to_event() for e in self.events],
            companies=[c.to_company() for c in self.companies],
        )


class AgencyInsightsRequest(BaseModel):
    """Managed creators, in display order."""

    creators: List[CreatorPayload] = Field(default_factory=list)


# =============================================================================
# Tagged parse results
# =============================================================================

@dataclass
class SnapshotParseResult:
    """ok=True carries the snapshot; ok=False carries field errors."""
    ok: bool
    snapshot: Optional[InsightSnapshot] = None
    errors: list[dict] = field(default_factory=list)


@dataclass
class AgencyParseResult:
    ok: bool
    creators: list[CreatorSnapshot] = field(default_factory=list)
    errors: list[dict] = field(default_factory=list)


def _field_errors(exc: ValidationError) -> list[dict]:
    return [
        {
            "field": ".".join(str(part) for part in err.get("loc", ())),
            "message": err.get("msg", ""),
        }
        for err in exc.errors()
    ]


def _not_an_object() -> list[dict]:
    return [{"field": "", "message": "Payload must be a JSON object"}]


def parse_snapshot(payload: Any) -> SnapshotParseResult:
    """Validate a raw snapshot payload. Never raises for bad input."""
    if not isinstance(payload, dict):
        return SnapshotParseResult(ok=False, errors=_not_an_object())
    try:
        request = InsightSnapshotRequest.model_validate(payload)
    except ValidationError as e:
        return SnapshotParseResult(ok=False, errors=_field_errors(e))
    return SnapshotParseResult(ok=True, snapshot=request.to_snapshot())


def parse_agency_request(payload: Any) -> AgencyParseResult:
    """Validate a raw agency payload. Never raises for bad input."""
    if not isinstance(payload, dict):
        return AgencyParseResult(ok=False, errors=_not_an_object())
    try:
        request = AgencyInsightsRequest.model_validate(payload)
    except ValidationError as e:
        return AgencyParseResult(ok=False, errors=_field_errors(e))
    return AgencyParseResult(ok=True, creators=[c.to_creator() for c in request.creators])


# =============================================================================
# Response models
# =============================================================================

class InsightResponse(BaseModel):
    """A rendered insight."""

    id: str = Field(..., description="Stable insight identifier")
    insight_key: str = Field(..., description="Insight kind")
    severity: str = Field(..., description="info, warning or risk")
    title: str
    message: str
    icon: str
    creator_name: Optional[str] = Field(None, description="Set for agency insights about a creator")
    creator_id: Optional[str] = Field(None, description="Managed creator the insight is about")

    @classmethod
    def from_display(cls, insight: InsightDisplay) -> "InsightResponse":
        return cls(**insight.to_dict())


class InsightListResponse(BaseModel):
    insights: List[InsightResponse]
    total: int = Field(..., description="Insights before the limit was applied")


class DismissResponse(BaseModel):
    success: bool


class InsightRecordResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    insight_id: str
    insight_key: str
    severity: str
    title: str
    message: str
    scope: str
    creator_name: Optional[str] = None
    related_creator_user_id: Optional[str] = None
    created_for_date: date
    created_at: Optional[datetime] = None
    dismissed_at: Optional[datetime] = None


class InsightHistoryResponse(BaseModel):
    items: List[InsightRecordResponse]
    total: int
    has_more: bool


class SeverityStyleResponse(BaseModel):
    label: str
    icon: str
    color: str
    bg_color: str
    border_color: str
