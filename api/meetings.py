"""
api.meetings
============

Scheduling, completing and cancelling meetings, plus member feedback.
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from tsfclub import queries
from tsfclub.lifecycle import LifecycleEngine
from tsfclub.models import MeetingRoles, MeetingStatus, to_dict
from tsfclub.store import EntityStore

from .deps import get_engine, get_store

router = APIRouter(prefix="/meetings", tags=["meetings"])


class RolesBody(BaseModel):
    anchor: Optional[str] = None
    topic_provider: Optional[str] = None
    judges: List[str] = Field(default_factory=list)
    speakers: List[str] = Field(default_factory=list)
    listeners: List[str] = Field(default_factory=list)


class MeetingRequest(BaseModel):
    """Body of POST /meetings."""
    chapter_id: str
    title: str
    date_time: datetime
    roles: RolesBody = Field(default_factory=RolesBody)
    agenda: str = ""
    description: str = ""
    duration: int = 60
    meet_url: str = ""
    max_participants: int = 0


class CompleteRequest(BaseModel):
    """``attendees`` defaults to everyone holding a role."""
    awarded_by: str
    attendees: Optional[List[str]] = None
    version: Optional[int] = None


class CancelRequest(BaseModel):
    version: Optional[int] = None


class FeedbackRequest(BaseModel):
    user_id: str
    rating: int
    comment: str = ""


def _meeting_view(meeting) -> dict:
    body = to_dict(meeting)
    body["current_participants"] = meeting.current_participants
    body["average_rating"] = queries.average_rating(meeting)
    return body


@router.get("")
def list_meetings(
    chapter_id: Optional[str] = Query(None, alias="chapterId"),
    status: Optional[MeetingStatus] = Query(None),
    store: EntityStore = Depends(get_store),
):
    meetings = store.all("meeting")
    if chapter_id is not None:
        meetings = queries.meetings_by_chapter(store, chapter_id)
    if status is not None:
        meetings = [m for m in meetings if m.status is status]
    return [_meeting_view(m) for m in meetings]


@router.get("/{meeting_id}")
def get_meeting(meeting_id: str, store: EntityStore = Depends(get_store)):
    return _meeting_view(store.get("meeting", meeting_id))


@router.post("", status_code=201)
def schedule_meeting(data: MeetingRequest, engine: LifecycleEngine = Depends(get_engine)):
    meeting = engine.schedule_meeting(
        data.chapter_id,
        data.title,
        data.date_time,
        roles=MeetingRoles(**data.roles.model_dump()),
        agenda=data.agenda,
        description=data.description,
        duration=data.duration,
        meet_url=data.meet_url,
        max_participants=data.max_participants,
    )
    return _meeting_view(meeting)


@router.post("/{meeting_id}/complete")
def complete_meeting(
    meeting_id: str,
    data: CompleteRequest,
    engine: LifecycleEngine = Depends(get_engine),
):
    """Complete the meeting; returns it together with the awarded ledger rows."""
    awarded = engine.complete_meeting(
        meeting_id, data.awarded_by, data.attendees, expected_version=data.version
    )
    return {
        "meeting": _meeting_view(engine.store.get("meeting", meeting_id)),
        "points": [to_dict(p) for p in awarded],
    }


@router.post("/{meeting_id}/cancel")
def cancel_meeting(
    meeting_id: str,
    data: Optional[CancelRequest] = None,
    engine: LifecycleEngine = Depends(get_engine),
):
    data = data or CancelRequest()
    return _meeting_view(engine.cancel_meeting(meeting_id, expected_version=data.version))


@router.post("/{meeting_id}/feedback", status_code=201)
def submit_feedback(
    meeting_id: str,
    data: FeedbackRequest,
    engine: LifecycleEngine = Depends(get_engine),
):
    feedback = engine.submit_feedback(meeting_id, data.user_id, data.rating, data.comment)
    return to_dict(feedback)
