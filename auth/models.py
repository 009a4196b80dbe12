"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Mirrors the approach
in catalog/models.py -- dataclasses own domain shape; stores and services do
the work.

Layer rule: no imports from api/ or catalog/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class User:
    """A registered catalog user.

    email is the login identifier and is matched exactly as stored (no case
    folding). hashed_password is cleared (None) on every User handed back to
    the HTTP layer -- see SessionService._public().
    """

    email: str
    id: int | None = None
    hashed_password: str | None = None
    name: str | None = None
    created_at: str | None = None


@dataclass(frozen=True)
class SessionClaims:
    """Identity asserted by a verified session token."""

    user_id: int
    email: str
