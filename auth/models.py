"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Mirrors the approach
in petstore/models.py -- dataclasses own domain shape; stores and routes do
the work.

Layer rule: no imports from api/ or petstore/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class User:
    """A stored credential.

    hashed_password is a bcrypt hash; the plaintext is never persisted.
    Users are created by registration or the seed command and are never
    mutated afterwards.
    """

    email: str
    hashed_password: str
    id: int | None = None
    created_at: str | None = None


@dataclass(frozen=True)
class Identity:
    """Request-scoped identity decoded from a verified bearer token.

    Built from the token claims alone. The user row is not re-read, so a
    token issued to a since-deleted user stays valid until it expires.
    """

    id: int
    email: str
