"""
tests/test_store.py
===================

Unit tests for tsfclub.store.EntityStore
"""

import json

import pytest

from tsfclub.auth import verify_password
from tsfclub.errors import NotFound
from tsfclub.models import College
from tsfclub.store import EntityStore


def test_fixture_counts(store):
    assert store.count("college") == 6
    assert store.count("user") == 8
    assert store.count("chapter") == 5
    assert store.count("membership") == 6
    assert store.count("meeting") == 4
    assert store.count("point") == 7
    assert store.count("certificate") == 1
    assert len(store) == 37


def test_fixture_passwords_are_hashed(store):
    user = store.get("user", "2")
    assert user.password_hash.startswith("$2")
    assert not hasattr(user, "password")
    assert verify_password("admin123", user.password_hash)


def test_get_unknown_raises_not_found(store):
    with pytest.raises(NotFound):
        store.get("chapter", "99")
    # NotFound is also a LookupError
    with pytest.raises(LookupError):
        store.get("user", "99")
    assert store.find("chapter", "99") is None


def test_next_id_and_contains(store):
    assert store.next_id("chapter") == "6"
    assert EntityStore().next_id("point") == "1"
    assert ("college", "1") in store
    assert ("college", "99") not in store


def test_transaction_rolls_back_on_error(store):
    with pytest.raises(RuntimeError):
        with store.transaction():
            store.add(College("99", "Test College", "TC", "Kochi", "Ernakulam"))
            store.get("chapter", "1").total_members = 42
            raise RuntimeError("boom")

    assert ("college", "99") not in store
    assert store.get("chapter", "1").total_members == 2


def test_rollback_keeps_record_identity(store):
    chapter = store.get("chapter", "1")
    meeting = store.get("meeting", "1")
    with pytest.raises(RuntimeError):
        with store.transaction():
            chapter.total_members = 42
            meeting.roles.judges.append("4")
            raise RuntimeError("boom")

    assert store.get("chapter", "1") is chapter
    assert chapter.total_members == 2
    assert store.get("meeting", "1") is meeting
    assert meeting.roles.judges == []


def test_nested_transaction_joins_outer(store):
    with store.transaction():
        store.add(College("98", "Outer College", "OC", "Kochi", "Ernakulam"))
        with store.transaction():
            store.add(College("99", "Inner College", "IC", "Kochi", "Ernakulam"))
    assert ("college", "98") in store
    assert ("college", "99") in store


def test_clear():
    store = EntityStore()
    store.add(College("1", "NIT Calicut", "NITC", "Kozhikode", "Kozhikode"))
    store.clear()
    assert len(store) == 0


def test_from_fixtures_with_partial_directory(tmp_path):
    (tmp_path / "colleges.json").write_text(json.dumps([
        {"id": "1", "name": "NIT Calicut", "short_name": "NITC", "city": "Kozhikode", "district": "Kozhikode"},
    ]))
    store = EntityStore.from_fixtures(tmp_path)
    assert store.count("college") == 1
    assert store.count("user") == 0
