# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Team roster: the static list of members eligible for facilitation.
Loaded once at startup and injected into the service layer.
"""

import json
from pathlib import Path

from app.core.config import settings
from app.core.logging import get_logger
from app.models.domain import TeamMember

logger = get_logger(__name__)

DEFAULT_ROSTER: tuple[TeamMember, ...] = tuple(
    TeamMember(first_name=first, last_name=last)
    for first, last in (
        ("Aneta", "Kmetíková"),
        ("Matěj", "Hrnčíř"),
        ("Marko", "Petrović"),
        ("Matyas", "Hodek"),
        ("Julie", "Holá"),
        ("Veronika", "Honsová"),
        ("Jan", "Chmelík"),
        ("David", "Izák"),
        ("Ondřej", "Kulhavý"),
        ("Marie", "Machytková"),
        ("Anna", "Pokorná"),
        ("Dominika", "Poláková"),
        ("Annabela", "Šimková"),
        ("David", "Štantejský"),
        ("Laura", "Šimůnková"),
        ("Matěj", "Vrbas"),
    )
)


def load_roster(path: str | None = None) -> list[TeamMember]:
    """
    Load the roster from a JSON file of {first_name, last_name} objects.
    Falls back to DEFAULT_ROSTER when no file is configured.
    Raises ValueError if the file is not a JSON list.
    """
    roster_file = path if path is not None else settings.TEAM_ROSTER_FILE
    if not roster_file:
        return list(DEFAULT_ROSTER)

    with Path(roster_file).open(encoding="utf-8") as fh:
        raw = json.load(fh)
    if not isinstance(raw, list):
        raise ValueError(f"Roster file '{roster_file}' must contain a JSON list")

    roster = [TeamMember(**entry) for entry in raw]
    logger.info("Roster loaded: file=%s, members=%d", roster_file, len(roster))
    return roster
