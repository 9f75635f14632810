"""
api.points
==========

Points ledger, per‑user totals and certificate issuance.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from tsfclub import queries
from tsfclub.lifecycle import LifecycleEngine
from tsfclub.models import PointType, to_dict
from tsfclub.store import EntityStore

from .deps import get_engine, get_store

router = APIRouter(tags=["points"])


class AwardRequest(BaseModel):
    """
    Body of POST /points.

    ``points`` may be omitted for fixed‑value types; a value that differs
    from the standard amount needs ``override`` and a ``description``.
    """
    user_id: str
    chapter_id: str
    type: PointType
    awarded_by: str
    points: Optional[int] = None
    meeting_id: Optional[str] = None
    description: str = ""
    override: bool = False


class EvaluateRequest(BaseModel):
    user_id: str
    chapter_id: str
    issued_by: Optional[str] = None


@router.post("/points", status_code=201)
def award_points(data: AwardRequest, engine: LifecycleEngine = Depends(get_engine)):
    point = engine.award_points(
        data.user_id,
        data.chapter_id,
        data.type,
        data.awarded_by,
        amount=data.points,
        meeting_id=data.meeting_id,
        description=data.description,
        override=data.override,
    )
    return to_dict(point)


@router.get("/points")
def list_points(
    user_id: str = Query(..., alias="userId"),
    chapter_id: Optional[str] = Query(None, alias="chapterId"),
    store: EntityStore = Depends(get_store),
):
    return [to_dict(p) for p in queries.points_by_user(store, user_id, chapter_id)]


@router.get("/users/{user_id}/points/total")
def total_points(
    user_id: str,
    chapter_id: Optional[str] = Query(None, alias="chapterId"),
    store: EntityStore = Depends(get_store),
):
    store.get("user", user_id)
    return {
        "user_id": user_id,
        "chapter_id": chapter_id,
        "total": queries.total_points_for_user(store, user_id, chapter_id),
    }


# ---------- certificates ----------
@router.post("/certificates/evaluate")
def evaluate_certificates(data: EvaluateRequest, engine: LifecycleEngine = Depends(get_engine)):
    """Issue every certificate the user has earned; returns only the new ones."""
    issued = engine.evaluate_and_issue(data.user_id, data.chapter_id, data.issued_by)
    return [to_dict(c) for c in issued]


@router.get("/certificates")
def list_certificates(
    user_id: str = Query(..., alias="userId"),
    active_only: bool = Query(False, alias="activeOnly"),
    store: EntityStore = Depends(get_store),
):
    return [to_dict(c) for c in queries.certificates_by_user(store, user_id, active_only)]
