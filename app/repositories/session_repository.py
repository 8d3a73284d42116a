# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Session history data access.
Read-only view of training sessions synced from the team calendar.
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from app.core.logging import get_logger
from app.metrics.prometheus import SESSION_FETCH_ERRORS
from app.models.domain import TRAINING_SESSION, SessionRecord

logger = get_logger(__name__)

SESSION_COLS = "id, title, description, date, type"


class SessionFetchError(RuntimeError):
    """Session history could not be read; results would be incomplete."""


def _row_to_session(row) -> SessionRecord:
    """Map a sessions row; raises ValueError on a missing or malformed date."""
    session_date = row[3]
    if session_date is None:
        raise ValueError(f"Session {row[0]} has no date")
    if isinstance(session_date, datetime):
        session_date = session_date.date()
    if not isinstance(session_date, date):
        session_date = date.fromisoformat(str(session_date)[:10])
    return SessionRecord(
        id=str(row[0]),
        title=row[1] or "",
        description=row[2],
        date=session_date.isoformat(),
        type=row[4],
    )


class SessionRepository:
    def __init__(self, engine: Engine):
        self._engine = engine

    # ── Read ───────────────────────────────────────────────────────────

    def list_training_sessions(self, start_date: Optional[str] = None,
                               end_date: Optional[str] = None) -> List[SessionRecord]:
        """
        Non-deleted training sessions within [start_date, end_date].
        Raises SessionFetchError on any database failure or unreadable row.
        """
        conditions = ["type = :type", "google_deleted = false"]
        params: Dict[str, Any] = {"type": TRAINING_SESSION}
        if start_date:
            conditions.append("date >= :start_date")
            params["start_date"] = start_date
        if end_date:
            conditions.append("date <= :end_date")
            params["end_date"] = end_date
        where = " AND ".join(conditions)

        try:
            with self._engine.connect() as conn:
                rows = conn.execute(
                    text(f"SELECT {SESSION_COLS} FROM sessions WHERE {where} ORDER BY date DESC"),
                    params,
                ).fetchall()
            # ValidationError is a ValueError subclass
            return [_row_to_session(r) for r in rows]
        except (SQLAlchemyError, ValueError) as exc:
            SESSION_FETCH_ERRORS.inc()
            logger.error("Session fetch failed: start=%s, end=%s, error=%s",
                         start_date, end_date, exc)
            raise SessionFetchError(f"Could not load session history: {exc}") from exc

    def verify_connection(self):
        with self._engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    def dispose(self):
        self._engine.dispose()
