"""
api.colleges
============

College search and registration.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from tsfclub import queries
from tsfclub.lifecycle import LifecycleEngine
from tsfclub.models import to_dict
from tsfclub.settings import Settings
from tsfclub.store import EntityStore

from .deps import get_engine, get_settings, get_store

router = APIRouter(prefix="/colleges", tags=["colleges"])


class CollegeRequest(BaseModel):
    """Body of POST /colleges."""
    name: str
    city: str
    district: str
    website: str = ""


@router.get("", response_model=List[Dict[str, Any]])
def list_colleges(
    query: Optional[str] = Query(None, description="Matches name, short name, city or district"),
    store: EntityStore = Depends(get_store),
    config: Settings = Depends(get_settings),
):
    """
    Search colleges by case‑insensitive substring.

    A blank *query* returns the first ``search_limit`` colleges instead.
    """
    return [to_dict(c) for c in queries.search_colleges_or_default(store, query, config.search_limit)]


@router.get("/{college_id}")
def get_college(college_id: str, store: EntityStore = Depends(get_store)):
    college = store.get("college", college_id)
    body = to_dict(college)
    body["chapters"] = [c.id for c in queries.chapters_by_college(store, college_id)]
    return body


@router.post("", status_code=201)
def register_college(data: CollegeRequest, engine: LifecycleEngine = Depends(get_engine)):
    return to_dict(engine.register_college(data.name, data.city, data.district, data.website))
