# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
HTTP request and response bodies for the facilitation API.
Used at the controller boundary only; services work with dicts and domain models.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from app.core.config import settings


# ── Selection Schemas ──

class SelectionRequest(BaseModel):
    start_date: Optional[date] = Field(
        default=None, description="Only count sessions on or after this date"
    )
    end_date: Optional[date] = Field(
        default=None, description="Only count sessions on or before this date"
    )
    count: int = Field(
        default=settings.DEFAULT_SELECTION_COUNT,
        ge=0,
        strict=True,
        description="How many facilitators to draw (clamped to roster size)",
    )

    @model_validator(mode="after")
    def check_range(self) -> "SelectionRequest":
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self


class SelectionDetail(BaseModel):
    name: str
    count: int
    days_since_last_session: Optional[int] = None
    weight: int


class SelectionResponse(BaseModel):
    selected: list[str]
    details: list[SelectionDetail]


# ── Statistics Schemas ──

class SessionRef(BaseModel):
    id: str
    title: str
    date: str


class FacilitatorStatistics(BaseModel):
    name: str
    count: int
    sessions: list[SessionRef]


class DateRange(BaseModel):
    start: Optional[str] = None
    end: Optional[str] = None


class FacilitationStatisticsResponse(BaseModel):
    statistics: list[FacilitatorStatistics]
    total_sessions: int
    date_range: DateRange


class RoleAssignment(BaseModel):
    role: str
    count: int
    sessions: list[dict]


class MemberRoleStatistics(BaseModel):
    name: str
    roles: list[RoleAssignment]
    total_assignments: int


class RoleStatisticsResponse(BaseModel):
    statistics: list[MemberRoleStatistics]
    session_count: int
