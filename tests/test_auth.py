"""
tests/test_auth.py
==================

bcrypt helpers, sign‑up and login.
"""

import pytest

from tsfclub.auth import authenticate, hash_password, register_user, verify_password
from tsfclub.errors import DuplicateEntity, NotFound, ValidationError


def test_hash_and_verify():
    hashed = hash_password("member123", rounds=4)
    assert hashed != "member123"
    assert verify_password("member123", hashed)
    assert not verify_password("member124", hashed)


def test_long_passwords_truncate_at_72_bytes():
    hashed = hash_password("a" * 100, rounds=4)
    assert verify_password("a" * 72 + "b" * 28, hashed)


def test_authenticate_fixture_user(store):
    assert authenticate(store, "rahul@nitc.ac.in", "admin123").id == "2"
    assert authenticate(store, " Rahul@NITC.ac.in ", "admin123").id == "2"
    assert authenticate(store, "rahul@nitc.ac.in", "wrong") is None
    assert authenticate(store, "nobody@example.com", "admin123") is None


def test_register_then_login(store):
    user = register_user(store, "Nikhil Varma", "Nikhil@CET.ac.in", "pass123", "pass123", college_id="3")
    assert user.id == "9"
    assert user.email == "nikhil@cet.ac.in"
    assert authenticate(store, "nikhil@cet.ac.in", "pass123") is user


def test_register_rejections(store):
    with pytest.raises(ValidationError, match="Passwords do not match"):
        register_user(store, "Nikhil Varma", "nikhil@cet.ac.in", "pass123", "pass124")
    with pytest.raises(ValidationError):
        register_user(store, "", "nikhil@cet.ac.in", "pass123", "pass123")
    with pytest.raises(DuplicateEntity):
        register_user(store, "Rahul Again", "RAHUL@nitc.ac.in", "pass123", "pass123")
    with pytest.raises(NotFound):
        register_user(store, "Nikhil Varma", "nikhil@cet.ac.in", "pass123", "pass123", college_id="99")
    assert store.count("user") == 8
