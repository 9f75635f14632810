"""
tsfclub.errors
==============

Exceptions raised by the store and the lifecycle engine.  None of them is
fatal; the HTTP layer maps each one to a status code and the CLI prints it.
"""

from __future__ import annotations


class ClubError(Exception):
    """Base class for every engine failure."""


class NotFound(ClubError, LookupError):
    """Referenced id does not exist in the store."""

    def __init__(self, kind: str, ident: str) -> None:
        super().__init__(f"{kind} {ident!r} not found")
        self.kind = kind
        self.ident = ident


class InvalidStateTransition(ClubError, ValueError):
    """Operation attempted from a state that does not permit it."""


class DuplicateEntity(ClubError):
    """A record that must be unique already exists."""


class ValidationError(ClubError, ValueError):
    """Missing or malformed input on a creation request."""


class StaleEntity(ClubError):
    """Caller's expected version no longer matches the stored record."""

    def __init__(self, kind: str, ident: str, expected: int, actual: int) -> None:
        super().__init__(
            f"{kind} {ident!r} is at version {actual}, caller expected {expected}"
        )
        self.expected = expected
        self.actual = actual
