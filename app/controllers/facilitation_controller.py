# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Facilitation statistics, selection, role statistics, roster.
Maps service errors to HTTP status codes; all logic lives in FacilitationService.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.schemas.facilitation import (
    FacilitationStatisticsResponse,
    RoleStatisticsResponse,
    SelectionRequest,
    SelectionResponse,
)
from app.repositories.session_repository import SessionFetchError
from app.services.facilitation_service import FacilitationService
from app.core.dependencies import get_facilitation_service

router = APIRouter(prefix="/api/v1", tags=["Facilitation"])


def _iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None


# ── Statistics ──

@router.get("/facilitators/statistics", response_model=FacilitationStatisticsResponse)
def get_facilitation_statistics(
    start_date: Optional[date] = Query(default=None, description="YYYY-MM-DD"),
    end_date: Optional[date] = Query(default=None, description="YYYY-MM-DD"),
    service: FacilitationService = Depends(get_facilitation_service),
):
    """How often each team member facilitated a training session."""
    try:
        return service.get_facilitation_statistics(_iso(start_date), _iso(end_date))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SessionFetchError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.get("/role-statistics", response_model=RoleStatisticsResponse)
def get_role_statistics(
    start_date: Optional[date] = Query(default=None, description="YYYY-MM-DD"),
    end_date: Optional[date] = Query(default=None, description="YYYY-MM-DD"),
    service: FacilitationService = Depends(get_facilitation_service),
):
    """Role assignments per team member, parsed from session descriptions."""
    try:
        return service.get_role_statistics(_iso(start_date), _iso(end_date))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SessionFetchError as e:
        raise HTTPException(status_code=503, detail=str(e))


# ── Selection ──

@router.post("/facilitators/select", response_model=SelectionResponse)
def select_facilitators(
    payload: SelectionRequest,
    service: FacilitationService = Depends(get_facilitation_service),
):
    """Draw the next facilitators with fairness-weighted random selection."""
    try:
        return service.select_facilitators(
            start_date=_iso(payload.start_date),
            end_date=_iso(payload.end_date),
            count=payload.count,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SessionFetchError as e:
        raise HTTPException(status_code=503, detail=str(e))


# ── Roster ──

@router.get("/roster")
def list_roster(
    service: FacilitationService = Depends(get_facilitation_service),
):
    """Team members eligible for facilitation."""
    return [
        {
            "name": m.full_name,
            "first_name": m.first_name,
            "last_name": m.last_name,
        }
        for m in service.roster
    ]
