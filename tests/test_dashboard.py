"""
tests/test_dashboard.py
=======================

Dashboard aggregates over the fixture network.
"""

import pytest

from tsfclub import dashboard
from tsfclub.errors import NotFound
from tsfclub.models import PointType


def test_member_summary_fathima(store):
    summary = dashboard.member_summary(store, "3")
    assert summary["total_points"] == 75
    assert summary["next_certificate"] == "bronze"
    assert summary["points_to_next"] == 25
    assert summary["chapters"] == ["1"]
    assert summary["upcoming_meetings"] == [{
        "id": "2",
        "title": "Debate: AI in Classrooms",
        "chapter_id": "1",
        "date_time": "2026-11-05T12:30:00+00:00",
        "role": "Anchor",
    }]
    assert "password_hash" not in summary["user"]


def test_member_summary_with_certificate(store):
    summary = dashboard.member_summary(store, "6")
    assert summary["total_points"] == 120
    assert summary["next_certificate"] == "silver"
    assert summary["points_to_next"] == 80
    assert [c["certificate_number"] for c in summary["certificates"]] == ["TSF-2026-00001"]


def test_unknown_member(store):
    with pytest.raises(NotFound):
        dashboard.member_summary(store, "99")


def test_chapter_admin_summary(store):
    summary = dashboard.chapter_admin_summary(store, "1")
    assert summary["total_members"] == 2
    assert summary["total_points"] == 110
    assert summary["average_points"] == 55
    assert summary["pending_requests"] == 1
    assert summary["upcoming_meetings"] == 1
    assert summary["completed_meetings"] == 1


def test_chapter_points_count_active_members_only(engine):
    # user 4 holds a pending membership in chapter 1
    engine.award_points("4", "1", PointType.ADMIN_BONUS, "2", amount=40)
    summary = dashboard.chapter_admin_summary(engine.store, "1")
    assert summary["total_points"] == 110
    assert summary["average_points"] == 55


def test_super_admin_summary(store):
    summary = dashboard.super_admin_summary(store)
    assert summary["colleges"] == 6
    assert summary["users"] == 8
    assert summary["chapters"] == {"pending": 2, "active": 2, "deactivated": 1}
    assert summary["pending_chapters"] == ["3", "4"]
    assert summary["certificates_issued"] == 1
    assert summary["districts"]["Kozhikode"] == {
        "colleges": 2, "pending": 1, "active": 1, "deactivated": 0,
    }
