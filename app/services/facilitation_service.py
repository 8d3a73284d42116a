# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Facilitation statistics and next-facilitator selection.
Business logic over session history and the team roster.
"""

import random
from datetime import date, datetime, timezone
from typing import Any, Callable, Optional, Sequence

from app.core.logging import get_logger
from app.metrics.prometheus import (
    MEMBER_SELECTED,
    SELECTIONS_TOTAL,
    SESSIONS_PROCESSED,
    STATISTICS_QUERIES,
)
from app.models.domain import CandidateWeight, SessionRecord, TeamMember
from app.repositories.session_repository import SessionRepository
from app.services.fairness import aggregate, days_since
from app.services.role_statistics import aggregate_roles
from app.services.sampler import weighted_sample
from app.services.weighting import compute_weight

logger = get_logger(__name__)


def _utc_today() -> date:
    return datetime.now(timezone.utc).date()


def _normalize_date(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    try:
        return date.fromisoformat(value).isoformat()
    except (TypeError, ValueError):
        raise ValueError(f"Invalid date '{value}', expected YYYY-MM-DD") from None


def _validate_range(start_date: Optional[str], end_date: Optional[str]) -> tuple[Optional[str], Optional[str]]:
    """Return the bounds as canonical YYYY-MM-DD strings; raises ValueError."""
    start, end = _normalize_date(start_date), _normalize_date(end_date)
    if start and end and start > end:
        raise ValueError(f"start_date {start} is after end_date {end}")
    return start, end


class FacilitationService:
    """Business logic for facilitation fairness and selection."""

    def __init__(
        self,
        session_repo: SessionRepository,
        roster: Sequence[TeamMember],
        rng: Optional[random.Random] = None,
        today: Callable[[], date] = _utc_today,
    ) -> None:
        self._sessions = session_repo
        self._roster = list(roster)
        self._rng = rng or random.Random()
        self._today = today

    @property
    def roster(self) -> list[TeamMember]:
        return list(self._roster)

    # ── Queries ──

    def get_facilitation_statistics(
        self,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> dict[str, Any]:
        """
        Facilitation count and session list per roster member.
        Raises ValueError on a bad range, SessionFetchError if history is unavailable.
        """
        start_date, end_date = _validate_range(start_date, end_date)
        sessions = self._fetch(start_date, end_date)

        stats = aggregate(sessions, self._roster)
        statistics = sorted(
            (
                {"name": name, "count": s.count, "sessions": s.sessions}
                for name, s in stats.items()
            ),
            key=lambda entry: entry["count"],
            reverse=True,
        )

        STATISTICS_QUERIES.labels(report="facilitation").inc()
        logger.info(
            "Facilitation statistics: sessions=%d, members=%d, start=%s, end=%s",
            len(sessions), len(statistics), start_date, end_date,
        )
        return {
            "statistics": statistics,
            "total_sessions": len(sessions),
            "date_range": {"start": start_date, "end": end_date},
        }

    def get_role_statistics(
        self,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> dict[str, Any]:
        """Role assignments per member across the selected sessions."""
        start_date, end_date = _validate_range(start_date, end_date)
        sessions = self._fetch(start_date, end_date)

        STATISTICS_QUERIES.labels(report="roles").inc()
        return {
            "statistics": aggregate_roles(sessions, self._roster),
            "session_count": len(sessions),
        }

    # ── Commands ──

    def select_facilitators(
        self,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        count: int = 2,
    ) -> dict[str, Any]:
        """
        Draw the next facilitators, favoring members who facilitated
        least often and longest ago. count is clamped to the roster size.
        Raises ValueError on bad input before touching session history.
        """
        if isinstance(count, bool) or not isinstance(count, int):
            raise ValueError(f"count must be an integer, got {count!r}")
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")
        start_date, end_date = _validate_range(start_date, end_date)

        sessions = self._fetch(start_date, end_date)
        candidates = self._build_candidates(sessions)
        picked = weighted_sample(
            candidates, min(count, len(candidates)), rng=self._rng
        )

        SELECTIONS_TOTAL.inc()
        for candidate in picked:
            MEMBER_SELECTED.labels(member=candidate.name).inc()
        logger.info(
            "Facilitators selected: requested=%d, selected=%s",
            count, [c.name for c in picked],
        )
        return {
            "selected": [c.name for c in picked],
            "details": [
                {
                    "name": c.name,
                    "count": c.count,
                    "days_since_last_session": c.days_since_last_session,
                    "weight": round(c.weight),
                }
                for c in picked
            ],
        }

    # ── Internal ──

    def _fetch(self, start_date: Optional[str], end_date: Optional[str]) -> list[SessionRecord]:
        sessions = self._sessions.list_training_sessions(start_date, end_date)
        SESSIONS_PROCESSED.inc(len(sessions))
        return sessions

    def _build_candidates(self, sessions: list[SessionRecord]) -> list[CandidateWeight]:
        stats = aggregate(sessions, self._roster)
        if not stats:
            return []

        today = self._today()
        max_count = max(s.count for s in stats.values())
        candidates = []
        for s in stats.values():
            days = days_since(s.last_facilitation_date, today)
            candidates.append(
                CandidateWeight(
                    member=s.member,
                    count=s.count,
                    days_since_last_session=days,
                    weight=compute_weight(s.count, days, max_count, rng=self._rng),
                )
            )
        return candidates
