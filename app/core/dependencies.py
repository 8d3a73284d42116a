# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Builds the engine-backed repository and the service once, exposes them to Depends().
"""

from app.core.database import engine
from app.core.roster import load_roster
from app.repositories.session_repository import SessionRepository
from app.services.facilitation_service import FacilitationService

# ── Singletons ──
_session_repo = SessionRepository(engine)
_facilitation_service = FacilitationService(
    session_repo=_session_repo,
    roster=load_roster(),
)


# ── FastAPI dependency functions ──
def get_session_repo() -> SessionRepository:
    return _session_repo


def get_facilitation_service() -> FacilitationService:
    return _facilitation_service
