"""
api.chapters
============

Chapter requests and the super‑admin approve / reject decisions.
"""

from typing import Dict, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from tsfclub.lifecycle import LifecycleEngine
from tsfclub.models import ChapterStatus, to_dict
from tsfclub.store import EntityStore

from .deps import get_engine, get_store

router = APIRouter(prefix="/chapters", tags=["chapters"])


class ChapterRequest(BaseModel):
    """Body of POST /chapters."""
    college_id: str
    name: str
    admin_id: Optional[str] = None
    description: str = ""
    meeting_frequency: str = ""
    meeting_day: str = ""
    meeting_time: str = ""
    social_links: Dict[str, str] = Field(default_factory=dict)


class Decision(BaseModel):
    """Optional body of approve / reject; ``version`` enables the stale check."""
    reason: Optional[str] = None
    version: Optional[int] = None


@router.get("")
def list_chapters(
    college_id: Optional[str] = Query(None, alias="collegeId"),
    status: Optional[ChapterStatus] = Query(None),
    store: EntityStore = Depends(get_store),
):
    chapters = store.all("chapter")
    if college_id is not None:
        chapters = [c for c in chapters if c.college_id == college_id]
    if status is not None:
        chapters = [c for c in chapters if c.status is status]
    return [to_dict(c) for c in chapters]


@router.get("/{chapter_id}")
def get_chapter(chapter_id: str, store: EntityStore = Depends(get_store)):
    return to_dict(store.get("chapter", chapter_id))


@router.post("", status_code=201)
def request_chapter(data: ChapterRequest, engine: LifecycleEngine = Depends(get_engine)):
    chapter = engine.request_chapter(
        data.college_id,
        data.name,
        admin_id=data.admin_id,
        description=data.description,
        meeting_frequency=data.meeting_frequency,
        meeting_day=data.meeting_day,
        meeting_time=data.meeting_time,
        social_links=data.social_links,
    )
    return to_dict(chapter)


@router.post("/{chapter_id}/approve")
def approve_chapter(
    chapter_id: str,
    data: Optional[Decision] = None,
    engine: LifecycleEngine = Depends(get_engine),
):
    data = data or Decision()
    return to_dict(engine.approve_chapter(chapter_id, expected_version=data.version))


@router.post("/{chapter_id}/reject")
def reject_chapter(
    chapter_id: str,
    data: Optional[Decision] = None,
    engine: LifecycleEngine = Depends(get_engine),
):
    data = data or Decision()
    return to_dict(engine.reject_chapter(chapter_id, data.reason, expected_version=data.version))
