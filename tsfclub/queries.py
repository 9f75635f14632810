"""
tsfclub.queries
===============

Read‑only views over an :class:`~tsfclub.store.EntityStore`.

Every filter returns records in the insertion order of the underlying
collection; nothing here sorts or mutates.
"""

from __future__ import annotations

from typing import List, Optional

from .auth import find_user_by_email
from .models import (
    Certificate,
    Chapter,
    ChapterStatus,
    College,
    Meeting,
    MeetingStatus,
    Membership,
    MembershipStatus,
    Point,
    User,
)
from .settings import settings
from .store import EntityStore

__all__ = [
    "chapters_by_college",
    "meetings_by_chapter",
    "memberships_by_user",
    "memberships_by_chapter",
    "find_membership",
    "search_colleges",
    "search_colleges_or_default",
    "total_points_for_user",
    "points_by_user",
    "certificates_by_user",
    "pending_memberships",
    "pending_chapters",
    "upcoming_meetings",
    "completed_meetings",
    "role_for_meeting",
    "average_rating",
    "get_user_by_email",
]


# ---------------------------------------------------------------------
# Parent‑id filters
# ---------------------------------------------------------------------
def chapters_by_college(store: EntityStore, college_id: str) -> List[Chapter]:
    return [c for c in store.all("chapter") if c.college_id == college_id]


def meetings_by_chapter(store: EntityStore, chapter_id: str) -> List[Meeting]:
    return [m for m in store.all("meeting") if m.chapter_id == chapter_id]


def memberships_by_user(store: EntityStore, user_id: str) -> List[Membership]:
    return [m for m in store.all("membership") if m.user_id == user_id]


def memberships_by_chapter(store: EntityStore, chapter_id: str) -> List[Membership]:
    return [m for m in store.all("membership") if m.chapter_id == chapter_id]


def find_membership(store: EntityStore, user_id: str, chapter_id: str) -> Optional[Membership]:
    """The membership linking *user_id* and *chapter_id*, if any."""
    for m in store.all("membership"):
        if m.user_id == user_id and m.chapter_id == chapter_id:
            return m
    return None


def get_user_by_email(store: EntityStore, email: str) -> Optional[User]:
    return find_user_by_email(store, email)


# ---------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------
def search_colleges(store: EntityStore, query: str) -> List[College]:
    """
    Case‑insensitive substring match on name, short name, city and district.

    >>> [c.name for c in search_colleges(store, "calicut")]
    ['NIT Calicut']
    """
    q = query.lower()
    return [
        c
        for c in store.all("college")
        if q in c.name.lower()
        or q in c.short_name.lower()
        or q in c.city.lower()
        or q in c.district.lower()
    ]


def search_colleges_or_default(
    store: EntityStore, query: Optional[str], limit: Optional[int] = None
) -> List[College]:
    """Search when *query* is non‑blank, otherwise the first *limit* colleges."""
    if query and query.strip():
        return search_colleges(store, query.strip())
    return store.all("college")[: limit or settings.search_limit]


# ---------------------------------------------------------------------
# Points & certificates
# ---------------------------------------------------------------------
def points_by_user(store: EntityStore, user_id: str, chapter_id: Optional[str] = None) -> List[Point]:
    return [
        p
        for p in store.all("point")
        if p.user_id == user_id and (chapter_id is None or p.chapter_id == chapter_id)
    ]


def total_points_for_user(store: EntityStore, user_id: str, chapter_id: Optional[str] = None) -> int:
    """
    Sum of the user's ledger entries.

    With ``chapter_id=None`` the sum spans every chapter; pass a chapter id
    to restrict it to that chapter.
    """
    return sum(p.points for p in points_by_user(store, user_id, chapter_id))


def certificates_by_user(
    store: EntityStore, user_id: str, active_only: bool = False
) -> List[Certificate]:
    return [
        c
        for c in store.all("certificate")
        if c.user_id == user_id and (c.is_active or not active_only)
    ]


# ---------------------------------------------------------------------
# Status filters
# ---------------------------------------------------------------------
def pending_memberships(store: EntityStore, chapter_id: Optional[str] = None) -> List[Membership]:
    return [
        m
        for m in store.all("membership")
        if m.status is MembershipStatus.PENDING
        and (chapter_id is None or m.chapter_id == chapter_id)
    ]


def pending_chapters(store: EntityStore) -> List[Chapter]:
    return [c for c in store.all("chapter") if c.status is ChapterStatus.PENDING]


def _meetings_with_status(
    store: EntityStore, status: MeetingStatus, chapter_id: Optional[str]
) -> List[Meeting]:
    return [
        m
        for m in store.all("meeting")
        if m.status is status and (chapter_id is None or m.chapter_id == chapter_id)
    ]


def upcoming_meetings(store: EntityStore, chapter_id: Optional[str] = None) -> List[Meeting]:
    return _meetings_with_status(store, MeetingStatus.UPCOMING, chapter_id)


def completed_meetings(store: EntityStore, chapter_id: Optional[str] = None) -> List[Meeting]:
    return _meetings_with_status(store, MeetingStatus.COMPLETED, chapter_id)


# ---------------------------------------------------------------------
# Meeting helpers
# ---------------------------------------------------------------------
def role_for_meeting(meeting: Meeting, user_id: str) -> Optional[str]:
    """Display name of the user's role in *meeting* (None when unassigned)."""
    return meeting.roles.role_of(user_id)


def average_rating(meeting: Meeting) -> Optional[float]:
    """Mean feedback rating rounded to one decimal, None without feedback."""
    if not meeting.feedback:
        return None
    return round(sum(f.rating for f in meeting.feedback) / len(meeting.feedback), 1)
