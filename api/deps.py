"""
api.deps
========

FastAPI dependency providers.

`get_store` returns one **EntityStore** per process, seeded from the JSON
fixtures, so every request sees the same records.  Tests replace it via
``app.dependency_overrides``.
"""

from functools import lru_cache

from fastapi import Depends

from tsfclub.lifecycle import LifecycleEngine
from tsfclub.settings import Settings, settings
from tsfclub.store import EntityStore


@lru_cache
def get_settings() -> Settings:
    """Return application settings."""
    return settings


@lru_cache
def get_store() -> EntityStore:
    """Singleton fixture‑seeded store (persists across requests)."""
    return EntityStore.from_fixtures(config=get_settings())


def get_engine(
    store: EntityStore = Depends(get_store),
    config: Settings = Depends(get_settings),
) -> LifecycleEngine:
    """Lifecycle engine bound to the request's store."""
    return LifecycleEngine(store, config)
