# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Domain models for roster members, sessions and derived statistics.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

TRAINING_SESSION = "training_session"


class TeamMember(BaseModel):
    """A roster entry eligible for facilitation."""
    model_config = ConfigDict(frozen=True)

    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: str = Field(..., min_length=1, max_length=255)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def reversed_name(self) -> str:
        return f"{self.last_name} {self.first_name}"


class SessionRecord(BaseModel):
    """A past session as stored by the calendar sync. Read-only."""
    id: str
    title: str
    date: str = Field(..., description="ISO date, YYYY-MM-DD")
    description: Optional[str] = None
    type: str = TRAINING_SESSION


class MemberFacilitationStats(BaseModel):
    """Facilitation history of one member, recomputed per request."""
    member: TeamMember
    count: int = 0
    last_facilitation_date: Optional[str] = None
    sessions: list[dict[str, Any]] = Field(default_factory=list)


class CandidateWeight(BaseModel):
    member: TeamMember
    count: int
    days_since_last_session: Optional[int] = None
    weight: float

    @property
    def name(self) -> str:
        return self.member.full_name
