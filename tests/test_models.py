"""
tests/test_models.py
====================

Unit tests for tsfclub.models
"""

from datetime import timezone

from tsfclub.models import (
    Chapter,
    ChapterStatus,
    Meeting,
    MeetingRoles,
    PointType,
    User,
    to_dict,
)


def test_enum_str_is_wire_value():
    assert str(ChapterStatus.ACTIVE) == "active"
    assert PointType("anchor_role") is PointType.ANCHOR_ROLE


def test_chapter_from_dict_parses_status_and_timestamps():
    ch = Chapter.from_dict({
        "id": "1",
        "name": "TSF Chapter - NIT Calicut",
        "college_id": "1",
        "status": "active",
        "founded_date": "2024-07-15T10:00:00Z",
    })
    assert ch.status is ChapterStatus.ACTIVE
    assert ch.founded_date.tzinfo is not None
    assert ch.founded_date.utcoffset() == timezone.utc.utcoffset(None)
    assert ch.version == 1


def test_roles_precedence_and_participants():
    roles = MeetingRoles(anchor="2", topic_provider="3", judges=["4"], speakers=["3", "5"])
    assert roles.role_of("2") == "Anchor"
    assert roles.role_of("3") == "Topic Provider"
    assert roles.role_of("4") == "Judge"
    assert roles.role_of("5") == "Speaker"
    assert roles.role_of("9") is None
    assert roles.participants() == ["2", "3", "4", "5"]


def test_meeting_round_trip_through_dict():
    meeting = Meeting.from_dict({
        "id": "1",
        "chapter_id": "1",
        "title": "Impromptu Speaking Night",
        "date_time": "2026-09-10T12:30:00Z",
        "status": "completed",
        "roles": {"anchor": "2", "listeners": ["4"]},
        "feedback": [{"user_id": "3", "rating": 5}],
    })
    assert meeting.current_participants == 2
    data = to_dict(meeting)
    assert data["status"] == "completed"
    assert data["roles"]["anchor"] == "2"
    assert data["feedback"][0]["rating"] == 5
    assert data["date_time"].startswith("2026-09-10T12:30:00")


def test_public_profile_hides_password_hash():
    user = User("1", "Anjali Menon", "anjali@tsfclub.org", password_hash="$2b$secret")
    profile = user.public_profile()
    assert "password_hash" not in profile
    assert profile["role"] == "member"
