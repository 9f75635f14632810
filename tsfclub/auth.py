"""
tsfclub.auth
============

Credential helpers: bcrypt hashing/verification, sign‑up and login
against an :class:`~tsfclub.store.EntityStore`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

import bcrypt

from .errors import DuplicateEntity, NotFound, ValidationError
from .models import User, UserRole
from .settings import settings

if TYPE_CHECKING:
    from .store import EntityStore

logger = logging.getLogger(__name__)


def _to_bcrypt_secret(password: str) -> bytes:
    """
    bcrypt only uses the first 72 BYTES of the password.
    We truncate to 72 bytes to avoid ValueError and to make behavior explicit.
    """
    pw = password.encode("utf-8")
    if len(pw) > 72:
        pw = pw[:72]
    return pw


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """Return a salted bcrypt hash as a UTF-8 string."""
    salt = bcrypt.gensalt(rounds=rounds or settings.bcrypt_rounds)
    return bcrypt.hashpw(_to_bcrypt_secret(password), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify password against stored bcrypt hash."""
    return bcrypt.checkpw(_to_bcrypt_secret(password), password_hash.encode("utf-8"))


def find_user_by_email(store: "EntityStore", email: str) -> Optional[User]:
    email = email.strip().lower()
    for user in store.all("user"):
        if user.email.lower() == email:
            return user
    return None


def authenticate(store: "EntityStore", email: str, password: str) -> Optional[User]:
    """Return the user when the credentials match, else None."""
    user = find_user_by_email(store, email)
    if user is None or not user.password_hash or not user.is_active:
        return None
    if not verify_password(password, user.password_hash):
        logger.warning(f"Failed login for {email}")
        return None
    return user


def register_user(
    store: "EntityStore",
    name: str,
    email: str,
    password: str,
    confirm_password: str,
    college_id: Optional[str] = None,
    role: UserRole = UserRole.MEMBER,
) -> User:
    """
    Create a user account.

    Raises
    ------
    ValidationError
        A required field is blank or the passwords differ.
    DuplicateEntity
        The email is already registered.
    NotFound
        *college_id* is given but unknown.
    """
    if not name.strip() or not email.strip() or not password:
        raise ValidationError("name, email and password are required")
    if password != confirm_password:
        raise ValidationError("Passwords do not match")

    with store.transaction():
        if find_user_by_email(store, email) is not None:
            raise DuplicateEntity(f"email {email!r} is already registered")
        if college_id is not None and ("college", college_id) not in store:
            raise NotFound("college", college_id)
        user = User(
            id=store.next_id("user"),
            name=name.strip(),
            email=email.strip().lower(),
            password_hash=hash_password(password),
            role=role,
            college_id=college_id,
        )
        store.add(user)
    logger.info(f"Registered user {user.id} <{user.email}>")
    return user
