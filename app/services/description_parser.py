# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Session description parsing. Pure computation, no side effects.

Session descriptions come from the shared calendar and look like:

    Facilitace
    - Vrbas Matěj
    - Kmetíková Aneta

    Zapisovatel:
    - Hodek Matyáš
"""

from typing import Optional

FACILITATION_HEADING = "facilitace"
LIST_MARKER = "-"


def parse_facilitators(description: Optional[str]) -> list[str]:
    """
    Return raw facilitator names listed under the facilitation heading.
    The section is contiguous: it ends at the first blank or non-list line.
    Never raises; missing heading or empty input yields [].
    """
    if not description:
        return []

    names: list[str] = []
    in_section = False

    for line in description.split("\n"):
        stripped = line.strip()

        if not in_section:
            if stripped.lower() == FACILITATION_HEADING:
                in_section = True
            continue

        if not stripped or not stripped.startswith(LIST_MARKER):
            break
        names.append(stripped[len(LIST_MARKER):].strip())

    return names


def parse_role_sections(description: Optional[str]) -> dict[str, list[str]]:
    """
    Split a description into role -> raw names.

    Any non-blank line that is not a list item is a role heading (trailing
    colon dropped). Blank lines are skipped and do not close a section.
    List items before the first heading are ignored.
    """
    roles: dict[str, list[str]] = {}
    if not description:
        return roles

    current_role: Optional[str] = None
    for line in description.split("\n"):
        stripped = line.strip()
        if not stripped:
            continue

        if not stripped.startswith(LIST_MARKER):
            current_role = stripped.removesuffix(":").strip()
            continue

        if current_role is None:
            continue
        name = stripped[len(LIST_MARKER):].strip()
        if name:
            roles.setdefault(current_role, []).append(name)

    return roles
