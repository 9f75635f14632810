"""
tests/test_meetings.py
======================

Scheduling, completing and cancelling meetings; attendance and role
points; feedback.
"""

from datetime import datetime, timezone

import pytest

from tsfclub import queries
from tsfclub.errors import DuplicateEntity, InvalidStateTransition, NotFound, ValidationError
from tsfclub.models import MeetingRoles, MeetingStatus, PointType

WHEN = datetime(2026, 12, 3, 12, 30, tzinfo=timezone.utc)


def test_schedule_meeting(engine):
    meeting = engine.schedule_meeting(
        "1", "Panel Discussion", WHEN,
        roles=MeetingRoles(anchor="3", topic_provider="2", speakers=["4"]),
        max_participants=10,
    )
    assert meeting.id == "5"
    assert meeting.status is MeetingStatus.UPCOMING
    assert meeting.current_participants == 3


def test_schedule_on_pending_chapter_refused(engine):
    with pytest.raises(InvalidStateTransition):
        engine.schedule_meeting("3", "Kick-off", WHEN)


def test_schedule_over_capacity_refused(engine):
    with pytest.raises(ValidationError):
        engine.schedule_meeting(
            "1", "Tiny Room", WHEN,
            roles=MeetingRoles(anchor="2", topic_provider="3"),
            max_participants=1,
        )


def test_complete_awards_attendance_and_roles(engine):
    awarded = engine.complete_meeting("2", awarded_by="2")
    assert [(p.user_id, p.type) for p in awarded] == [
        ("3", PointType.MEETING_ATTENDANCE),
        ("3", PointType.ANCHOR_ROLE),
        ("2", PointType.MEETING_ATTENDANCE),
        ("2", PointType.TOPIC_PROVIDER),
    ]
    assert all(p.meeting_id == "2" for p in awarded)

    store = engine.store
    assert store.get("meeting", "2").status is MeetingStatus.COMPLETED
    assert queries.total_points_for_user(store, "3", "1") == 110
    assert store.get("membership", "2").points == 110
    assert store.get("membership", "1").points == 60
    assert store.get("membership", "1").attendance_rate == 1.0
    assert store.get("membership", "2").last_meeting_attended == "2"


def test_partial_attendance(engine):
    awarded = engine.complete_meeting("2", awarded_by="2", attendees=["3"])
    assert len(awarded) == 2
    rahul = engine.store.get("membership", "1")
    assert rahul.attendance_rate == 0.5
    assert rahul.last_meeting_attended == "1"


def test_complete_twice_refused(engine):
    with pytest.raises(InvalidStateTransition):
        engine.complete_meeting("1", awarded_by="2")
    assert engine.store.count("point") == 7


def test_unknown_attendee_rolls_back(engine):
    with pytest.raises(NotFound):
        engine.complete_meeting("2", awarded_by="2", attendees=["3", "99"])
    assert engine.store.get("meeting", "2").status is MeetingStatus.UPCOMING
    assert engine.store.count("point") == 7


def test_cancel_then_complete_refused(engine):
    assert engine.cancel_meeting("2").status is MeetingStatus.CANCELLED
    with pytest.raises(InvalidStateTransition):
        engine.complete_meeting("2", awarded_by="2")


def test_feedback(engine):
    engine.submit_feedback("1", "2", 4, "Well run")
    assert queries.average_rating(engine.store.get("meeting", "1")) == 4.5

    with pytest.raises(DuplicateEntity):
        engine.submit_feedback("1", "3", 3)
    with pytest.raises(ValidationError):
        engine.submit_feedback("1", "4", 6)
    with pytest.raises(InvalidStateTransition):
        engine.submit_feedback("2", "3", 5)
