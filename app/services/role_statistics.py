# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Role assignment statistics, i.e. who held which role in past sessions.
Pure computation; uses the lenient name matcher.
"""

from typing import Any, Iterable, Sequence

from app.models.domain import SessionRecord, TeamMember
from app.services.description_parser import parse_role_sections
from app.services.name_matcher import match_member_lenient


def aggregate_roles(
    sessions: Iterable[SessionRecord],
    roster: Sequence[TeamMember],
) -> list[dict[str, Any]]:
    """Per-member role counts, busiest members first."""
    by_member: dict[str, dict[str, dict[str, Any]]] = {
        member.full_name: {} for member in roster
    }

    for session in sessions:
        for role, names in parse_role_sections(session.description).items():
            for raw_name in names:
                member = match_member_lenient(raw_name, roster)
                if member is None:
                    continue
                roles = by_member[member.full_name]
                assignment = roles.setdefault(
                    role, {"role": role, "count": 0, "sessions": []}
                )
                assignment["count"] += 1
                assignment["sessions"].append(
                    {"date": session.date, "title": session.title}
                )

    statistics = []
    for name, roles in by_member.items():
        role_list = sorted(roles.values(), key=lambda r: r["count"], reverse=True)
        statistics.append({
            "name": name,
            "roles": role_list,
            "total_assignments": sum(r["count"] for r in role_list),
        })
    statistics.sort(key=lambda s: s["total_assignments"], reverse=True)
    return statistics
