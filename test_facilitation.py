# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Facilitation Service: Algorithm & Service Tests
=================================================
Parser, name matching, fairness aggregation, weights, sampling and the
service layer over an in-memory session store.
"""
import random
import sys
from collections import Counter
from datetime import date

import pytest

from app.core.roster import DEFAULT_ROSTER, load_roster
from app.models.domain import CandidateWeight, SessionRecord, TeamMember
from app.repositories.session_repository import SessionFetchError
from app.services.description_parser import parse_facilitators, parse_role_sections
from app.services.facilitation_service import FacilitationService
from app.services.fairness import aggregate, days_since
from app.services.name_matcher import match_member, match_member_lenient, normalize_name
from app.services.role_statistics import aggregate_roles
from app.services.sampler import weighted_sample
from app.services.weighting import base_weight, compute_weight


# ============================================
# Fixtures & helpers
# ============================================
ALICE = TeamMember(first_name="Anna", last_name="Alfa")
BORIS = TeamMember(first_name="Boris", last_name="Beta")
CYRIL = TeamMember(first_name="Cyril", last_name="Gama")
ABC = [ALICE, BORIS, CYRIL]


def _session(sid, day, description, title="TS"):
    return SessionRecord(id=sid, title=title, date=day, description=description)


class FakeSessionRepository:
    """In-memory stand-in for SessionRepository."""

    def __init__(self, sessions=None, error=None):
        self.sessions = sessions or []
        self.error = error
        self.calls = []

    def list_training_sessions(self, start_date=None, end_date=None):
        self.calls.append((start_date, end_date))
        if self.error:
            raise self.error
        return list(self.sessions)


def _service(sessions=None, roster=ABC, today=date(2024, 1, 11), seed=7, error=None):
    repo = FakeSessionRepository(sessions, error)
    svc = FacilitationService(repo, roster, rng=random.Random(seed), today=lambda: today)
    return svc, repo


def _candidate(member, weight, count=0):
    return CandidateWeight(member=member, count=count, weight=weight)


# ============================================
# Description parser
# ============================================
class TestParseFacilitators:
    def test_section_stops_at_blank_line(self):
        text = "Facilitace\n- Anna Alfa\n- Boris Beta\n- Cyril Gama\n\n- Dana Delta\n- Eva Epsilon"
        assert parse_facilitators(text) == ["Anna Alfa", "Boris Beta", "Cyril Gama"]

    def test_section_stops_at_non_list_line(self):
        text = "Facilitace\n- Anna Alfa\nZapisovatel\n- Boris Beta"
        assert parse_facilitators(text) == ["Anna Alfa"]

    def test_none_and_no_heading(self):
        assert parse_facilitators(None) == []
        assert parse_facilitators("") == []
        assert parse_facilitators("random text with no heading") == []

    def test_heading_case_and_whitespace_insensitive(self):
        text = "Agenda\n   FACILITACE  \n  -   Anna Alfa  \n-Boris Beta"
        assert parse_facilitators(text) == ["Anna Alfa", "Boris Beta"]

    def test_lines_before_heading_ignored(self):
        text = "- Someone Else\nFacilitace\n- Anna Alfa"
        assert parse_facilitators(text) == ["Anna Alfa"]

    def test_heading_with_colon_is_not_the_heading(self):
        assert parse_facilitators("Facilitace:\n- Anna Alfa") == []

    def test_windows_line_endings(self):
        assert parse_facilitators("Facilitace\r\n- Anna Alfa\r\n") == ["Anna Alfa"]


class TestParseRoleSections:
    def test_roles_and_blank_lines(self):
        text = "Facilitace\n- Anna Alfa\n\nZapisovatel:\n- Boris Beta\n\n- Cyril Gama"
        assert parse_role_sections(text) == {
            "Facilitace": ["Anna Alfa"],
            "Zapisovatel": ["Boris Beta", "Cyril Gama"],
        }

    def test_items_without_heading_ignored(self):
        assert parse_role_sections("- Anna Alfa\nRole\n-\n- Boris Beta") == {"Role": ["Boris Beta"]}

    def test_empty(self):
        assert parse_role_sections(None) == {}


# ============================================
# Name matcher
# ============================================
class TestMatchMember:
    def test_order_invariant(self):
        a = match_member("Vrbas Matěj", DEFAULT_ROSTER)
        b = match_member("Matěj Vrbas", DEFAULT_ROSTER)
        assert a is not None and a == b
        assert a.full_name == "Matěj Vrbas"

    def test_diacritics_and_case_ignored(self):
        member = match_member("matej vrbas", DEFAULT_ROSTER)
        assert member == TeamMember(first_name="Matěj", last_name="Vrbas")

    def test_roster_without_diacritics_matches_accented_text(self):
        member = match_member("Hodek Matyáš", DEFAULT_ROSTER)
        assert member.full_name == "Matyas Hodek"

    def test_unknown_and_partial_names(self):
        assert match_member("Matěj", DEFAULT_ROSTER) is None
        assert match_member("Bc. Matěj Vrbas", DEFAULT_ROSTER) is None
        assert match_member("", DEFAULT_ROSTER) is None

    def test_normalize_name(self):
        assert normalize_name("  Šimůnková ") == "simunkova"


class TestMatchMemberLenient:
    def test_contains_both_names(self):
        member = match_member_lenient("Bc. Matěj Vrbas, DiS.", DEFAULT_ROSTER)
        assert member.full_name == "Matěj Vrbas"

    def test_any_order(self):
        assert match_member_lenient("Vrbas, Matěj", DEFAULT_ROSTER).full_name == "Matěj Vrbas"

    def test_first_name_alone_is_not_enough(self):
        assert match_member_lenient("Matěj", DEFAULT_ROSTER) is None

    def test_diacritics_not_stripped(self):
        assert match_member_lenient("Matej Vrbas", DEFAULT_ROSTER) is None
        assert match_member("Matej Vrbas", DEFAULT_ROSTER).full_name == "Matěj Vrbas"

    def test_modes_stay_distinct(self):
        text = "Ing. Anna Alfa"
        assert match_member(text, ABC) is None
        assert match_member_lenient(text, ABC) == ALICE


# ============================================
# Fairness aggregation
# ============================================
class TestAggregate:
    def test_every_member_present_with_empty_history(self):
        stats = aggregate([], ABC)
        assert list(stats) == ["Anna Alfa", "Boris Beta", "Cyril Gama"]
        assert all(s.count == 0 and s.last_facilitation_date is None for s in stats.values())

    def test_empty_roster(self):
        assert aggregate([_session("s1", "2024-01-10", "Facilitace\n- Anna Alfa")], []) == {}

    def test_counts_match_occurrences_and_latest_date_wins(self):
        sessions = [
            _session("s2", "2024-03-01", "Facilitace\n- Anna Alfa\n- Unknown Person"),
            _session("s1", "2024-01-10", "Facilitace\n- Alfa Anna\n- Boris Beta"),
            _session("s3", "2024-02-01", "No heading here"),
        ]
        stats = aggregate(sessions, ABC)
        assert stats["Anna Alfa"].count == 2
        assert stats["Anna Alfa"].last_facilitation_date == "2024-03-01"
        assert [s["id"] for s in stats["Anna Alfa"].sessions] == ["s2", "s1"]
        assert stats["Boris Beta"].count == 1
        assert stats["Boris Beta"].last_facilitation_date == "2024-01-10"
        assert sum(s.count for s in stats.values()) == 3

    def test_zero_count_iff_no_date(self):
        sessions = [_session("s1", "2024-01-10", "Facilitace\n- Boris Beta")]
        for s in aggregate(sessions, ABC).values():
            assert (s.count == 0) == (s.last_facilitation_date is None)

    def test_days_since(self):
        assert days_since(None, date(2024, 1, 11)) is None
        assert days_since("2024-01-10", date(2024, 1, 11)) == 1
        assert days_since("2023-01-11", date(2024, 1, 11)) == 365


# ============================================
# Weights
# ============================================
class TestWeights:
    def test_no_history_flat_count_weight(self):
        assert base_weight(0, None, 0) == 100 * 2 + 365

    def test_count_and_recency_terms(self):
        assert base_weight(1, 1, 1) == 10 * 2 + 1
        assert base_weight(0, None, 1) == 20 * 2 + 365
        assert base_weight(2, 1000, 5) == 40 * 2 + 365

    @pytest.mark.parametrize("max_count", [1, 3, 10])
    def test_lower_count_strictly_heavier(self, max_count):
        for days in (None, 0, 30, 400):
            weights = [base_weight(c, days, max_count) for c in range(max_count + 1)]
            assert all(a > b for a, b in zip(weights, weights[1:]))

    def test_always_positive(self):
        rng = random.Random(1)
        for max_count in range(0, 6):
            for count in range(0, max_count + 1):
                for days in (None, -30, 0, 1, 364, 365, 10_000):
                    assert compute_weight(count, days, max_count, rng=rng) > 0

    def test_jitter_within_twenty_percent(self):
        rng = random.Random(3)
        base = base_weight(1, 10, 2)
        for _ in range(200):
            w = compute_weight(1, 10, 2, rng=rng)
            assert 0.8 * base <= w <= 1.2 * base

    def test_jitter_varies_between_calls(self):
        rng = random.Random(5)
        assert len({compute_weight(0, None, 0, rng=rng) for _ in range(10)}) > 1


# ============================================
# Sampler
# ============================================
class TestWeightedSample:
    def test_k_distinct(self):
        pool = [_candidate(TeamMember(first_name=f"M{i}", last_name="X"), 1 + i) for i in range(8)]
        picked = weighted_sample(pool, 5, rng=random.Random(0))
        assert len(picked) == 5
        assert len({c.name for c in picked}) == 5

    def test_exhaustion(self):
        picked = weighted_sample([_candidate(m, 10) for m in ABC], 10, rng=random.Random(0))
        assert sorted(c.name for c in picked) == sorted(m.full_name for m in ABC)

    def test_zero_and_empty(self):
        assert weighted_sample([_candidate(ALICE, 5)], 0) == []
        assert weighted_sample([], 3) == []

    def test_heavier_candidate_drawn_more_often(self):
        pool = [_candidate(ALICE, 1), _candidate(BORIS, 9)]
        rng = random.Random(11)
        firsts = Counter(weighted_sample(pool, 1, rng=rng)[0].name for _ in range(2000))
        assert firsts["Boris Beta"] > 1600

    def test_input_not_mutated(self):
        pool = [_candidate(m, 10) for m in ABC]
        weighted_sample(pool, 2, rng=random.Random(0))
        assert len(pool) == 3


# ============================================
# Role statistics
# ============================================
class TestAggregateRoles:
    def test_counts_and_ordering(self):
        sessions = [
            _session("s1", "2024-01-10", "Zapisovatel:\n- Boris Beta\nČasomíra\n- Ing. Boris Beta", "TS 1"),
            _session("s2", "2024-01-17", "Zapisovatel:\n- Beta Boris\n- Cyril Gama", "TS 2"),
        ]
        stats = aggregate_roles(sessions, ABC)
        assert [s["name"] for s in stats] == ["Boris Beta", "Cyril Gama", "Anna Alfa"]
        boris = stats[0]
        assert boris["total_assignments"] == 3
        assert [r["role"] for r in boris["roles"]] == ["Zapisovatel", "Časomíra"]
        assert boris["roles"][0]["sessions"] == [
            {"date": "2024-01-10", "title": "TS 1"},
            {"date": "2024-01-17", "title": "TS 2"},
        ]
        assert stats[2]["roles"] == []


# ============================================
# Service
# ============================================
class TestFacilitationServiceStatistics:
    def test_empty_roster_and_no_sessions(self):
        svc, _ = _service(sessions=[], roster=[])
        result = svc.get_facilitation_statistics()
        assert result["statistics"] == []
        assert result["total_sessions"] == 0

    def test_sorted_by_count(self):
        sessions = [
            _session("s1", "2024-01-03", "Facilitace\n- Cyril Gama"),
            _session("s2", "2024-01-10", "Facilitace\n- Cyril Gama\n- Anna Alfa"),
        ]
        svc, repo = _service(sessions)
        result = svc.get_facilitation_statistics("2024-01-01", "2024-01-31")
        assert [(s["name"], s["count"]) for s in result["statistics"]] == [
            ("Cyril Gama", 2), ("Anna Alfa", 1), ("Boris Beta", 0),
        ]
        assert result["total_sessions"] == 2
        assert repo.calls == [("2024-01-01", "2024-01-31")]

    def test_fetch_failure_propagates(self):
        svc, _ = _service(error=SessionFetchError("db down"))
        with pytest.raises(SessionFetchError):
            svc.get_facilitation_statistics()

    def test_inverted_range_rejected_before_fetch(self):
        svc, repo = _service()
        with pytest.raises(ValueError):
            svc.get_facilitation_statistics("2024-02-01", "2024-01-01")
        assert repo.calls == []

    @pytest.mark.skipif(sys.version_info < (3, 11), reason="basic ISO 8601 dates need 3.11")
    def test_dates_normalized_before_compare_and_fetch(self):
        svc, repo = _service()
        result = svc.get_facilitation_statistics("20240101", "2024-01-31")
        assert result["date_range"] == {"start": "2024-01-01", "end": "2024-01-31"}
        svc.select_facilitators("20240101", "20240131", count=1)
        assert repo.calls == [("2024-01-01", "2024-01-31"), ("2024-01-01", "2024-01-31")]

    @pytest.mark.skipif(sys.version_info < (3, 11), reason="basic ISO 8601 dates need 3.11")
    def test_inverted_range_detected_across_formats(self):
        svc, repo = _service()
        with pytest.raises(ValueError):
            svc.get_role_statistics("2024-02-01", "20240115")
        assert repo.calls == []

    def test_role_statistics(self):
        svc, _ = _service([_session("s1", "2024-01-10", "Zapisovatel\n- Anna Alfa")])
        result = svc.get_role_statistics()
        assert result["session_count"] == 1
        assert result["statistics"][0]["name"] == "Anna Alfa"


class TestFacilitationServiceSelection:
    def test_never_facilitated_member_favoured(self):
        svc, _ = _service([_session("s1", "2024-01-10", "Facilitace\n- Anna Alfa\n- Boris Beta")])
        picks = Counter(svc.select_facilitators(count=1)["selected"][0] for _ in range(1000))
        assert picks["Cyril Gama"] > 500
        assert picks["Anna Alfa"] < 300
        assert picks["Boris Beta"] < 300

    def test_details_follow_selection_order(self):
        svc, _ = _service([_session("s1", "2024-01-10", "Facilitace\n- Anna Alfa")])
        result = svc.select_facilitators(count=3)
        assert sorted(result["selected"]) == ["Anna Alfa", "Boris Beta", "Cyril Gama"]
        assert [d["name"] for d in result["details"]] == result["selected"]
        details = {d["name"]: d for d in result["details"]}
        assert details["Anna Alfa"]["count"] == 1
        assert details["Anna Alfa"]["days_since_last_session"] == 1
        assert details["Cyril Gama"]["days_since_last_session"] is None
        assert all(isinstance(d["weight"], int) and d["weight"] > 0 for d in result["details"])

    def test_count_clamped(self):
        svc, _ = _service()
        assert len(svc.select_facilitators(count=50)["selected"]) == 3

    def test_empty_roster_selects_nobody(self):
        svc, _ = _service(roster=[])
        assert svc.select_facilitators(count=2) == {"selected": [], "details": []}

    @pytest.mark.parametrize("bad", [-1, 1.5, "2", None, True])
    def test_invalid_count_rejected_before_fetch(self, bad):
        svc, repo = _service()
        with pytest.raises(ValueError):
            svc.select_facilitators(count=bad)
        assert repo.calls == []

    def test_fetch_failure_propagates(self):
        svc, _ = _service(error=SessionFetchError("db down"))
        with pytest.raises(SessionFetchError):
            svc.select_facilitators(count=2)


# ============================================
# Roster loading
# ============================================
class TestLoadRoster:
    def test_default_roster(self):
        assert load_roster("") == list(DEFAULT_ROSTER)

    def test_from_file(self, tmp_path):
        path = tmp_path / "roster.json"
        path.write_text('[{"first_name": "Anna", "last_name": "Alfa"}]', encoding="utf-8")
        assert load_roster(str(path)) == [ALICE]

    def test_rejects_non_list(self, tmp_path):
        path = tmp_path / "roster.json"
        path.write_text('{"first_name": "Anna"}', encoding="utf-8")
        with pytest.raises(ValueError):
            load_roster(str(path))
