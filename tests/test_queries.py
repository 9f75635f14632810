"""
tests/test_queries.py
=====================

Unit tests for tsfclub.queries
"""

from tsfclub import queries
from tsfclub.models import MembershipStatus


def test_search_calicut_finds_nit_calicut(store):
    assert [c.name for c in queries.search_colleges(store, "calicut")] == ["NIT Calicut"]


def test_search_matches_district_case_insensitively(store):
    assert [c.id for c in queries.search_colleges(store, "KOZHIKODE")] == ["1", "4"]


def test_blank_search_returns_default_page(store):
    assert len(queries.search_colleges_or_default(store, "   ", limit=3)) == 3
    assert len(queries.search_colleges_or_default(store, None)) == 6


def test_parent_filters(store):
    assert [c.id for c in queries.chapters_by_college(store, "1")] == ["1"]
    assert [m.id for m in queries.meetings_by_chapter(store, "1")] == ["1", "2", "4"]
    assert [m.chapter_id for m in queries.memberships_by_user(store, "6")] == ["2", "1"]
    assert len(queries.memberships_by_chapter(store, "1")) == 4


def test_find_membership(store):
    assert queries.find_membership(store, "6", "1").status is MembershipStatus.REJECTED
    assert queries.find_membership(store, "8", "1") is None


def test_point_totals(store):
    assert queries.total_points_for_user(store, "3", "1") == 75
    assert queries.total_points_for_user(store, "6") == 120
    assert queries.total_points_for_user(store, "6", "1") == 0
    assert len(queries.points_by_user(store, "2")) == 2


def test_status_filters(store):
    assert [m.id for m in queries.pending_memberships(store)] == ["3"]
    assert queries.pending_memberships(store, "2") == []
    assert [c.id for c in queries.pending_chapters(store)] == ["3", "4"]
    assert [m.id for m in queries.upcoming_meetings(store, "1")] == ["2"]
    assert [m.id for m in queries.completed_meetings(store)] == ["1"]


def test_meeting_helpers(store):
    done = store.get("meeting", "1")
    assert queries.role_for_meeting(done, "2") == "Anchor"
    assert queries.average_rating(done) == 5.0
    assert queries.average_rating(store.get("meeting", "2")) is None


def test_certificates_and_email_lookup(store):
    assert len(queries.certificates_by_user(store, "6", active_only=True)) == 1
    assert queries.certificates_by_user(store, "3") == []
    assert queries.get_user_by_email(store, "RAHUL@nitc.ac.in").id == "2"
