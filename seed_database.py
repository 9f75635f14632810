#!/usr/bin/env python
"""
Seed database with the sample club network.

Loads the JSON fixtures shipped in ``tsfclub/data`` (colleges, demo users,
chapters, memberships, meetings, points and certificates) and writes them
to the database configured by ``TSF_DB_URL``.
"""

import sys

from tsfclub import db
from tsfclub.models import ChapterStatus
from tsfclub.store import EntityStore


def seed_database(fixtures=None) -> EntityStore:
    """Write every fixture record to the database."""
    store = EntityStore.from_fixtures(fixtures)
    with db.SessionLocal() as s:
        rows = db.save_store(s, store)

    for chapter in store.all("chapter"):
        marker = "✅" if chapter.status is ChapterStatus.ACTIVE else "  "
        print(f"{marker} {chapter.name} ({chapter.status.value}, {chapter.total_members} members)")

    print(f"\nWrote {rows} rows to the database!")
    return store


if __name__ == "__main__":
    print("Ensuring database tables exist...")
    db.create_all()

    print("Seeding database with sample club network...")
    seed_database(sys.argv[1] if len(sys.argv) > 1 else None)

    print("\nDone! You can now run the API server with:")
    print("uvicorn api.main:app --reload --port 8000")
