"""
api.memberships
===============

Membership requests and the chapter‑admin decisions on them.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from tsfclub.lifecycle import LifecycleEngine
from tsfclub.models import MembershipStatus, to_dict
from tsfclub.store import EntityStore

from .deps import get_engine, get_store

router = APIRouter(prefix="/memberships", tags=["memberships"])


class MembershipRequest(BaseModel):
    user_id: str
    chapter_id: str


class MembershipDecision(BaseModel):
    approved_by: str
    reason: Optional[str] = None
    version: Optional[int] = None


class Promotion(BaseModel):
    version: Optional[int] = None


@router.get("")
def list_memberships(
    user_id: Optional[str] = Query(None, alias="userId"),
    chapter_id: Optional[str] = Query(None, alias="chapterId"),
    status: Optional[MembershipStatus] = Query(None),
    store: EntityStore = Depends(get_store),
):
    found = [
        m
        for m in store.all("membership")
        if (user_id is None or m.user_id == user_id)
        and (chapter_id is None or m.chapter_id == chapter_id)
        and (status is None or m.status is status)
    ]
    return [to_dict(m) for m in found]


@router.post("", status_code=201)
def request_membership(data: MembershipRequest, engine: LifecycleEngine = Depends(get_engine)):
    return to_dict(engine.request_membership(data.user_id, data.chapter_id))


@router.post("/{membership_id}/approve")
def approve_membership(
    membership_id: str,
    data: MembershipDecision,
    engine: LifecycleEngine = Depends(get_engine),
):
    membership = engine.approve_membership(
        membership_id, data.approved_by, expected_version=data.version
    )
    return to_dict(membership)


@router.post("/{membership_id}/reject")
def reject_membership(
    membership_id: str,
    data: MembershipDecision,
    engine: LifecycleEngine = Depends(get_engine),
):
    membership = engine.reject_membership(
        membership_id, data.approved_by, data.reason, expected_version=data.version
    )
    return to_dict(membership)


@router.post("/{membership_id}/promote")
def promote_member(
    membership_id: str,
    data: Optional[Promotion] = None,
    engine: LifecycleEngine = Depends(get_engine),
):
    data = data or Promotion()
    return to_dict(engine.promote_member(membership_id, expected_version=data.version))
