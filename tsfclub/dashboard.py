"""
tsfclub.dashboard
=================

Aggregated numbers behind the member, chapter‑admin and super‑admin
dashboards.  Each function returns a plain dict ready for JSON.
"""

from __future__ import annotations

from collections import Counter
from typing import Any, Dict

from . import accrual, queries
from .models import ChapterStatus, MembershipStatus, to_dict
from .network import ChapterNetwork
from .store import EntityStore


def member_summary(store: EntityStore, user_id: str) -> Dict[str, Any]:
    """Points progress, certificates and upcoming meetings for one member."""
    user = store.get("user", user_id)
    total = queries.total_points_for_user(store, user_id)
    tier = accrual.next_tier(total)

    chapters = [
        m.chapter_id
        for m in queries.memberships_by_user(store, user_id)
        if m.status is MembershipStatus.APPROVED and m.is_active
    ]
    upcoming = []
    for chapter_id in chapters:
        for meeting in queries.upcoming_meetings(store, chapter_id):
            upcoming.append({
                "id": meeting.id,
                "title": meeting.title,
                "chapter_id": chapter_id,
                "date_time": meeting.date_time.isoformat(),
                "role": queries.role_for_meeting(meeting, user_id),
            })

    return {
        "user": user.public_profile(),
        "total_points": total,
        "next_certificate": tier.type.value if tier else None,
        "points_to_next": tier.threshold - total if tier else 0,
        "certificates": [to_dict(c) for c in queries.certificates_by_user(store, user_id, active_only=True)],
        "chapters": chapters,
        "upcoming_meetings": upcoming,
    }


def chapter_admin_summary(store: EntityStore, chapter_id: str) -> Dict[str, Any]:
    """Head‑count, points and pending work for one chapter."""
    chapter = store.get("chapter", chapter_id)
    members = queries.memberships_by_chapter(store, chapter_id)
    active = [m for m in members if m.status is MembershipStatus.APPROVED and m.is_active]
    total_points = sum(m.points for m in active)
    return {
        "chapter": to_dict(chapter),
        "total_members": len(active),
        "total_points": total_points,
        "average_points": round(total_points / len(active)) if active else 0,
        "pending_requests": len(queries.pending_memberships(store, chapter_id)),
        "upcoming_meetings": len(queries.upcoming_meetings(store, chapter_id)),
        "completed_meetings": len(queries.completed_meetings(store, chapter_id)),
    }


def super_admin_summary(store: EntityStore) -> Dict[str, Any]:
    """Network‑wide chapter counts and per‑district statistics."""
    counts = Counter(c.status for c in store.all("chapter"))
    return {
        "colleges": store.count("college"),
        "users": store.count("user"),
        "chapters": {s.value: counts.get(s, 0) for s in ChapterStatus},
        "pending_chapters": [c.id for c in queries.pending_chapters(store)],
        "certificates_issued": store.count("certificate"),
        "districts": ChapterNetwork.from_store(store).district_stats(),
    }
