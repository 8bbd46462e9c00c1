"""JWT utilities for auth enforcement.

Responsibilities:
- Create and verify HS256-signed access tokens with expirations.
- Resolve the current user for protected routes.
- Surface invalid/expired tokens as `InvalidTokenException` (401).
"""

# ============================================
# Imports and Dependencies
# ============================================
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import InvalidTokenException
from app.modules.users.models import User
from app.modules.users.schemas import TokenData

logger = logging.getLogger(__name__)

# Swagger's "Authorize" button posts form credentials here.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token")


# ============================================
# Token Creation Function
# ============================================
def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token signed with the application secret.

    - Clones payload, normalizes user_id to int, and sets exp claim.
    """
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode.update({"exp": expire})

    if "user_id" in to_encode:
        try:
            to_encode["user_id"] = int(to_encode["user_id"])
        except (TypeError, ValueError):
            logger.error(f"Invalid user_id format: {to_encode['user_id']}")
            raise ValueError("Invalid user_id format")

    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


# ============================================
# Token Verification Function
# ============================================
def verify_access_token(token: str) -> TokenData:
    """Verify JWT access token (signature, exp, user_id) and return TokenData."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError as e:
        logger.info(f"Rejected access token: {str(e)}")
        raise InvalidTokenException()

    user_id = payload.get("user_id")
    if user_id is None:
        logger.warning("User ID not found in token payload")
        raise InvalidTokenException()

    try:
        return TokenData(id=int(user_id))
    except (TypeError, ValueError):
        logger.warning(f"Invalid user_id in token payload: {user_id}")
        raise InvalidTokenException()


# ============================================
# Current User Retrieval Function
# ============================================
def get_current_user(
    request: Request,
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Return the authenticated user named by the bearer token."""
    token_data = verify_access_token(token)
    user = db.get(User, token_data.id)
    if user is None:
        logger.warning(f"Token refers to missing user {token_data.id}")
        raise InvalidTokenException("User for this token no longer exists")
    # Picked up by LoggingMiddleware for the access line.
    request.state.user_id = user.id
    return user


__all__ = [
    "oauth2_scheme",
    "create_access_token",
    "verify_access_token",
    "get_current_user",
]
