# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Facilitation fairness statistics. Pure computation, no I/O.
"""

from datetime import date
from typing import Iterable, Sequence

from app.models.domain import MemberFacilitationStats, SessionRecord, TeamMember
from app.services.description_parser import parse_facilitators
from app.services.name_matcher import match_member


def aggregate(
    sessions: Iterable[SessionRecord],
    roster: Sequence[TeamMember],
) -> dict[str, MemberFacilitationStats]:
    """
    Count facilitations per roster member, keyed by display name.

    Every member is present in the result, including those who never
    facilitated. Session order does not matter; the most recent date wins.
    """
    stats: dict[str, MemberFacilitationStats] = {
        member.full_name: MemberFacilitationStats(member=member)
        for member in roster
    }

    for session in sessions:
        for raw_name in parse_facilitators(session.description):
            member = match_member(raw_name, roster)
            if member is None:
                continue
            entry = stats[member.full_name]
            entry.count += 1
            entry.sessions.append(
                {"id": session.id, "title": session.title, "date": session.date}
            )
            # ISO dates compare chronologically as strings
            if (
                entry.last_facilitation_date is None
                or session.date > entry.last_facilitation_date
            ):
                entry.last_facilitation_date = session.date

    return stats


def days_since(iso_date: str | None, today: date) -> int | None:
    """Whole days from iso_date to today; None when there is no date."""
    if iso_date is None:
        return None
    return (today - date.fromisoformat(iso_date[:10])).days
