"""Password hashing utilities (bcrypt through passlib)."""

from __future__ import annotations

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash(password: str) -> str:
    """Hash a plain password with the current bcrypt settings."""
    return pwd_context.hash(password)


def verify(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against its hashed version."""
    return pwd_context.verify(plain_password, hashed_password)


def needs_rehash(hashed_password: str) -> bool:
    """True when the stored hash was made with outdated scheme settings."""
    return pwd_context.needs_update(hashed_password)


__all__ = ["hash", "verify", "needs_rehash", "pwd_context"]
