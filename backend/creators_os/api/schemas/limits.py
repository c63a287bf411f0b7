"""
Pydantic schemas for the freemium limits API.
"""

from typing import Optional

from pydantic import BaseModel, Field


class LimitCheckRequest(BaseModel):
    plan: str = Field("free", description="free or premium; unknown plans are treated as free")
    limit_type: str = Field(..., description="companies, events_per_month, active_tasks or ai_generations_per_month")
    current_count: int = Field(0, description="Items the user already has")


class LimitStatusResponse(BaseModel):
    current: int
    limit: Optional[int] = Field(None, description="None when unlimited")
    is_at_limit: bool
    can_add: bool
    remaining: Optional[int] = Field(None, description="None when unlimited")
    is_approaching: bool = False
    upgrade_message: Optional[str] = None
    approaching_message: Optional[str] = None
