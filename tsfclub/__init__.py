"""
TSF Club
========

Membership and chapter life‑cycle engine for a network of student
communication clubs: colleges host chapters, users request membership,
meetings award points, and points turn into certificates.

Import structure
----------------
`import tsfclub` is intentionally cheap: no sub‑module is imported by
default.  Heavy dependencies such as *matplotlib*, *networkx* and
*sqlmodel* are only imported when you explicitly access
:pymod:`tsfclub.viz`, :pymod:`tsfclub.network` or :pymod:`tsfclub.db`.

Sub‑modules
~~~~~~~~~~~
- :pymod:`tsfclub.models`     – record dataclasses + status enums
- :pymod:`tsfclub.errors`     – error taxonomy
- :pymod:`tsfclub.store`      – ``EntityStore`` in‑memory registry
- :pymod:`tsfclub.queries`    – read‑only filters, search and totals
- :pymod:`tsfclub.accrual`    – point values and certificate tiers
- :pymod:`tsfclub.lifecycle`  – state‑machine guard + ``LifecycleEngine``
- :pymod:`tsfclub.auth`       – bcrypt credentials, sign‑up, login
- :pymod:`tsfclub.dashboard`  – dashboard aggregates
- :pymod:`tsfclub.network`    – district → college → chapter graph (NetworkX)
- :pymod:`tsfclub.viz`        – plotting helpers
- :pymod:`tsfclub.db`         – SQLite snapshot persistence (SQLModel)
- :pymod:`tsfclub.cli`        – command‑line utilities (init-db, seed, serve …)

Quick start
-----------
>>> from tsfclub.store import EntityStore
>>> from tsfclub.lifecycle import LifecycleEngine
>>> store = EntityStore.from_fixtures()
>>> engine = LifecycleEngine(store)
>>> engine.approve_chapter("3").status
<ChapterStatus.ACTIVE: 'active'>
"""

__all__ = [
    "models",
    "errors",
    "store",
    "queries",
    "accrual",
    "lifecycle",
    "auth",
    "dashboard",
    "network",
    "viz",
    "db",
    "cli",
]

__version__ = "0.1.0"
