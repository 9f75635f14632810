"""
tsfclub.store
=============

An in‑memory registry holding the seven record collections, each keyed
by id and kept in insertion order.

The store is an explicit object: build one per process (the API keeps a
singleton) or per test, seed it from the JSON fixtures, and drop it with
:pymeth:`EntityStore.clear`.  There is no module‑level state.
"""

from __future__ import annotations

import copy
import json
import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from . import auth
from .errors import NotFound
from .models import (
    Certificate,
    Chapter,
    College,
    Meeting,
    Membership,
    Point,
    User,
)
from .settings import Settings, settings as default_settings

logger = logging.getLogger(__name__)

# kind → (record class, fixture file)
KINDS: Dict[str, tuple] = {
    "college": (College, "colleges.json"),
    "user": (User, "users.json"),
    "chapter": (Chapter, "chapters.json"),
    "meeting": (Meeting, "meetings.json"),
    "membership": (Membership, "memberships.json"),
    "point": (Point, "points.json"),
    "certificate": (Certificate, "certificates.json"),
}

_KIND_BY_CLASS = {cls: kind for kind, (cls, _) in KINDS.items()}


class EntityStore:
    """
    Dictionary‑backed registry of every record the engine manages.

    Example
    -------
    >>> store = EntityStore()
    >>> _ = store.add(College("1", "NIT Calicut", "NITC", "Kozhikode", "Kozhikode"))
    >>> store.get("college", "1").name
    'NIT Calicut'
    """

    def __init__(self) -> None:
        self._collections: Dict[str, Dict[str, Any]] = {kind: {} for kind in KINDS}
        self._lock = threading.RLock()
        self._depth = 0

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def from_fixtures(
        cls,
        directory: Path | str | None = None,
        config: Settings | None = None,
    ) -> "EntityStore":
        """
        Build a store seeded from ``<directory>/<kind>s.json`` files.

        Fixture users may carry a demo ``password``; it is hashed with
        bcrypt before the record is stored and never kept in clear text.
        """
        config = config or default_settings
        directory = Path(directory or config.fixtures_dir)
        store = cls()
        for kind, (record_cls, filename) in KINDS.items():
            path = directory / filename
            if not path.exists():
                continue
            for rec in json.loads(path.read_text(encoding="utf-8")):
                if kind == "user" and "password" in rec:
                    rec = dict(rec)
                    rec["password_hash"] = auth.hash_password(
                        rec.pop("password"), rounds=config.bcrypt_rounds
                    )
                store.add(record_cls.from_dict(rec))
        logger.info(
            f"Seeded store from {directory}: "
            + ", ".join(f"{len(store._collections[k])} {k}s" for k in KINDS)
        )
        return store

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def add(self, record: Any) -> Any:
        """Insert or overwrite a record under its id."""
        kind = _KIND_BY_CLASS[type(record)]
        self._collections[kind][record.id] = record
        return record

    def get(self, kind: str, ident: str) -> Any:
        """Retrieve by id (raise :class:`NotFound` if not present)."""
        try:
            return self._collections[kind][ident]
        except KeyError:
            raise NotFound(kind, ident) from None

    def find(self, kind: str, ident: str) -> Optional[Any]:
        """Retrieve by id or return None."""
        return self._collections[kind].get(ident)

    def all(self, kind: str) -> List[Any]:
        """Every record of *kind*, in insertion order."""
        return list(self._collections[kind].values())

    def next_id(self, kind: str) -> str:
        """One past the highest numeric id of *kind*, as a string."""
        numeric = [int(i) for i in self._collections[kind] if str(i).isdigit()]
        return str(max(numeric, default=0) + 1)

    def count(self, kind: str) -> int:
        return len(self._collections[kind])

    def clear(self) -> None:
        """Drop every record (explicit teardown)."""
        with self._lock:
            for coll in self._collections.values():
                coll.clear()

    @contextmanager
    def transaction(self) -> Iterator["EntityStore"]:
        """
        Apply a block of mutations atomically.

        Holds the store lock for the whole block; if the block raises, every
        collection is restored to its state on entry.  Records keep their
        identity: field values are written back into the same objects and
        records added by the block are dropped.  Nested calls join the
        outermost transaction.
        """
        with self._lock:
            if self._depth:
                self._depth += 1
                try:
                    yield self
                finally:
                    self._depth -= 1
                return

            snapshot = {
                kind: [(rec, copy.deepcopy(vars(rec))) for rec in coll.values()]
                for kind, coll in self._collections.items()
            }
            self._depth = 1
            try:
                yield self
            except Exception:
                for kind, saved in snapshot.items():
                    coll = self._collections[kind]
                    coll.clear()
                    for rec, state in saved:
                        vars(rec).clear()
                        vars(rec).update(state)
                        coll[rec.id] = rec
                logger.debug("Transaction rolled back")
                raise
            finally:
                self._depth = 0

    # ------------------------------------------------------------------
    # Dunder helpers for convenience
    # ------------------------------------------------------------------
    def __len__(self) -> int:
        return sum(len(coll) for coll in self._collections.values())

    def __contains__(self, item: tuple) -> bool:
        kind, ident = item
        return ident in self._collections[kind]
