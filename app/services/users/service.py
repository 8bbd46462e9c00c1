"""High-level business services for the users domain."""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import (
    InvalidCredentialsException,
    ResourceAlreadyExistsException,
    ResourceNotFoundException,
)
from app.modules.users.models import User
from app.modules.users.schemas import UserCreate
from app.modules.utils.security import hash as hash_password
from app.modules.utils.security import needs_rehash, verify

logger = logging.getLogger(__name__)


class UserService:
    """Encapsulates shared user operations used by routers and the seed script."""

    def __init__(self, db: Session):
        self.db = db

    # ----- Creation -----
    def create_user(self, payload: UserCreate) -> User:
        existing = self.db.scalars(
            select(User).where(
                or_(User.username == payload.username, User.email == payload.email)
            )
        ).first()
        if existing:
            field = "username" if existing.username == payload.username else "email"
            logger.warning("Registration rejected: %s already taken", field)
            raise ResourceAlreadyExistsException("User", field=field)

        new_user = User(
            username=payload.username,
            email=payload.email,
            hashed_password=hash_password(payload.password),
        )
        self.db.add(new_user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning("Registration for %s lost a uniqueness race", payload.username)
            raise ResourceAlreadyExistsException("User")
        self.db.refresh(new_user)
        logger.info("User registered: id=%s username=%s", new_user.id, new_user.username)
        return new_user

    # ----- Authentication -----
    def authenticate(self, username: str, password: str) -> User:
        user = self.get_by_username(username)
        if user is None or not verify(password, user.hashed_password):
            logger.warning("Failed login for username=%s", username)
            raise InvalidCredentialsException()
        if needs_rehash(user.hashed_password):
            user.hashed_password = hash_password(password)
            self.db.commit()
            logger.info("Upgraded password hash for user %s", user.id)
        return user

    # ----- Access helpers -----
    def get_by_username(self, username: str) -> Optional[User]:
        return self.db.scalars(select(User).where(User.username == username)).first()

    def get_user_or_404(self, user_id: int) -> User:
        user = self.db.get(User, user_id)
        if not user:
            raise ResourceNotFoundException("User", user_id)
        return user


__all__ = ["UserService"]
