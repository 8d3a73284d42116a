# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Resolve free-text names to roster members.

Two strictness levels exist on purpose:
  * match_member          exact match, either name order, diacritics ignored.
                          Feeds facilitation fairness and selection.
  * match_member_lenient  text contains both first and last name.
                          Feeds the role statistics report only.
"""

import unicodedata
from typing import Iterable, Optional

from app.models.domain import TeamMember


def normalize_name(text: str) -> str:
    """NFD-decompose, drop combining marks, lower-case and trim."""
    decomposed = unicodedata.normalize("NFD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.lower().strip()


def match_member(raw_name: str, roster: Iterable[TeamMember]) -> Optional[TeamMember]:
    """Return the first member whose name (in either order) equals raw_name."""
    needle = normalize_name(raw_name)
    if not needle:
        return None
    for member in roster:
        if needle in (
            normalize_name(member.full_name),
            normalize_name(member.reversed_name),
        ):
            return member
    return None


def match_member_lenient(
    raw_name: str, roster: Iterable[TeamMember]
) -> Optional[TeamMember]:
    """Return the first member whose first and last name both occur in raw_name."""
    haystack = raw_name.lower().strip()
    if not haystack:
        return None
    for member in roster:
        first = member.first_name.lower()
        last = member.last_name.lower()
        if first in haystack and last in haystack:
            return member
        if haystack == member.full_name.lower():
            return member
    return None
