"""
tsfclub.db
==========

SQLite persistence layer for the club engine.

This module exposes:

* ``engine`` – a global SQLModel engine built from ``settings.db_url``
* ``SessionLocal`` – a session factory used via ``with SessionLocal() as s:``
* one table per record type (``CollegeDB`` … ``CertificateDB``)
* ``save_store()`` / ``load_store()`` – snapshot an :class:`EntityStore`
  to the database and rebuild one from it
* ``create_all()`` – helper to create tables at first run

The points table is an append‑only ledger: ``save_store`` inserts new
rows and never rewrites existing ones.  Certificates are unique on
(user_id, chapter_id, type).
"""

from __future__ import annotations

import logging
from dataclasses import fields, is_dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, Column, UniqueConstraint
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Field, Session, SQLModel, create_engine, select

from .models import (
    Certificate,
    Chapter,
    College,
    Meeting,
    Membership,
    Point,
    User,
    plain,
)
from .settings import settings
from .store import EntityStore

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------
def make_engine(url: Optional[str] = None, echo: Optional[bool] = None) -> Engine:
    """Create an engine; in‑memory SQLite URLs share one connection."""
    url = url or settings.db_url
    kwargs: Dict[str, Any] = {"echo": settings.db_echo if echo is None else echo}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    return create_engine(url, **kwargs)


engine = make_engine()


# ---------------------------------------------------------------------------
# Session factory
# ---------------------------------------------------------------------------
def SessionLocal(bind: Optional[Engine] = None) -> Session:  # noqa: N802 (factory camel‑case for consistency with FastAPI docs)
    """Return a new Session bound to *bind* or the global engine."""
    return Session(bind or engine)


# ---------------------------------------------------------------------------
# Converters shared by every table
# ---------------------------------------------------------------------------
def _aware(value: Any) -> Any:
    """SQLite drops tzinfo; stored timestamps are always UTC."""
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class _RowMixin:
    """``from_entity`` / ``to_entity`` for tables that mirror a dataclass."""

    @classmethod
    def from_entity(cls, record: Any):
        """Create a DB row from an in‑memory record."""
        values = {}
        for f in fields(record):
            value = getattr(record, f.name)
            if isinstance(value, Enum):
                value = value.value
            elif isinstance(value, (dict, list)) or is_dataclass(value):
                value = plain(value)
            values[f.name] = value
        return cls(**values)

    def to_entity(self) -> Any:
        """Convert the DB row back into the plain dataclass."""
        record_cls = _ENTITIES[type(self)]
        names = [f.name for f in fields(record_cls)]
        return record_cls.from_dict({n: _aware(getattr(self, n)) for n in names})


# ---------------------------------------------------------------------------
# ORM models that mirror tsfclub.models
# ---------------------------------------------------------------------------
class CollegeDB(_RowMixin, SQLModel, table=True):
    __tablename__ = "colleges"

    id: str = Field(primary_key=True)
    name: str = Field(index=True)
    short_name: str = ""
    city: str = ""
    district: str = Field(default="", index=True)
    website: str = ""
    type: str = "Unknown"
    established: int = 0
    affiliation: str = "Unknown"


class UserDB(_RowMixin, SQLModel, table=True):
    __tablename__ = "users"

    id: str = Field(primary_key=True)
    name: str
    email: str = Field(index=True, unique=True)
    password_hash: Optional[str] = None
    role: str = "member"
    college_id: Optional[str] = None
    bio: str = ""
    phone: str = ""
    semester: str = ""
    department: str = ""
    is_active: bool = True
    created_at: datetime
    updated_at: datetime


class ChapterDB(_RowMixin, SQLModel, table=True):
    __tablename__ = "chapters"

    id: str = Field(primary_key=True)
    name: str
    college_id: str = Field(index=True)
    description: str = ""
    status: str = "pending"
    admin_id: Optional[str] = None
    founded_date: Optional[datetime] = None
    meeting_frequency: str = ""
    meeting_day: str = ""
    meeting_time: str = ""
    social_links: Dict[str, str] = Field(default_factory=dict, sa_column=Column(JSON))
    total_members: int = 0
    rejection_reason: Optional[str] = None
    version: int = 1
    created_at: datetime
    updated_at: datetime


class MembershipDB(_RowMixin, SQLModel, table=True):
    __tablename__ = "memberships"
    __table_args__ = (UniqueConstraint("user_id", "chapter_id"),)

    id: str = Field(primary_key=True)
    user_id: str = Field(index=True)
    chapter_id: str = Field(index=True)
    status: str = "pending"
    role: str = "member"
    joined_at: Optional[datetime] = None
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    is_active: bool = False
    points: int = 0
    attendance_rate: float = 0.0
    last_meeting_attended: Optional[str] = None
    rejection_reason: Optional[str] = None
    version: int = 1
    created_at: datetime
    updated_at: datetime


class MeetingDB(_RowMixin, SQLModel, table=True):
    __tablename__ = "meetings"

    id: str = Field(primary_key=True)
    chapter_id: str = Field(index=True)
    title: str
    date_time: datetime
    agenda: str = ""
    description: str = ""
    duration: int = 60
    meet_url: str = ""
    status: str = "upcoming"
    max_participants: int = 0
    roles: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    feedback: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))
    version: int = 1
    created_at: datetime
    updated_at: datetime


class PointDB(_RowMixin, SQLModel, table=True):
    __tablename__ = "points"

    id: str = Field(primary_key=True)
    user_id: str = Field(index=True)
    chapter_id: str = Field(index=True)
    points: int
    type: str
    awarded_by: str
    description: str = ""
    meeting_id: Optional[str] = None
    override: bool = False
    awarded_at: datetime


class CertificateDB(_RowMixin, SQLModel, table=True):
    __tablename__ = "certificates"
    __table_args__ = (UniqueConstraint("user_id", "chapter_id", "type"),)

    id: str = Field(primary_key=True)
    user_id: str = Field(index=True)
    chapter_id: str
    type: str
    points_threshold: int
    points_earned: int
    certificate_number: str = Field(unique=True)
    title: str = ""
    description: str = ""
    issued_by: Optional[str] = None
    is_active: bool = True
    issued_date: datetime


# kind → table, in dependency order
TABLES = {
    "college": CollegeDB,
    "user": UserDB,
    "chapter": ChapterDB,
    "meeting": MeetingDB,
    "membership": MembershipDB,
    "point": PointDB,
    "certificate": CertificateDB,
}

_ENTITIES = {
    CollegeDB: College,
    UserDB: User,
    ChapterDB: Chapter,
    MeetingDB: Meeting,
    MembershipDB: Membership,
    PointDB: Point,
    CertificateDB: Certificate,
}


# ---------------------------------------------------------------------------
# Snapshot helpers
# ---------------------------------------------------------------------------
def save_store(s: Session, store: EntityStore) -> int:
    """
    Write every record of *store* to the database and commit.

    Mutable records are merged (insert or update); ledger rows that already
    exist are left untouched.  Returns the number of rows written.
    """
    written = 0
    with store.transaction():
        for kind, table in TABLES.items():
            records = store.all(kind)
            if kind == "point":
                known = set(s.exec(select(PointDB.id)).all())
                for rec in records:
                    if rec.id not in known:
                        s.add(PointDB.from_entity(rec))
                        written += 1
                continue
            for rec in records:
                s.merge(table.from_entity(rec))
                written += 1
    s.commit()
    logger.info(f"Saved {written} rows to the database")
    return written


def load_store(s: Session) -> EntityStore:
    """Rebuild an :class:`EntityStore` from the database."""
    store = EntityStore()
    for kind, table in TABLES.items():
        for row in s.exec(select(table)).all():
            store.add(row.to_entity())
    logger.info(f"Loaded {len(store)} records from the database")
    return store


# ---------------------------------------------------------------------------
# Utility: create tables
# ---------------------------------------------------------------------------
def create_all(bind: Optional[Engine] = None) -> None:
    """Create all tables (safe if they already exist)."""
    SQLModel.metadata.create_all(bind or engine)
