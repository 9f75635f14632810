"""
api.dashboard
=============

Dashboard aggregates and the district → college → chapter graph.
"""

from fastapi import APIRouter, Depends

from tsfclub import dashboard
from tsfclub.network import ChapterNetwork
from tsfclub.store import EntityStore

from .deps import get_store

router = APIRouter(tags=["dashboard"])


@router.get("/dashboard/member/{user_id}")
def member_dashboard(user_id: str, store: EntityStore = Depends(get_store)):
    return dashboard.member_summary(store, user_id)


@router.get("/dashboard/chapter/{chapter_id}")
def chapter_dashboard(chapter_id: str, store: EntityStore = Depends(get_store)):
    return dashboard.chapter_admin_summary(store, chapter_id)


@router.get("/dashboard/super")
def super_dashboard(store: EntityStore = Depends(get_store)):
    return dashboard.super_admin_summary(store)


@router.get("/network")
def get_network(store: EntityStore = Depends(get_store)):
    """
    Return the club network for visualization.

    Nodes are districts, colleges and chapters (chapters carry their
    status); links point from parent to child.
    """
    return ChapterNetwork.from_store(store).to_json()
