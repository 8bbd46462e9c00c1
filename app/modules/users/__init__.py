"""User domain package exports."""

from .models import User
from .schemas import (
    RegisterResponse,
    Token,
    TokenData,
    UserBase,
    UserCreate,
    UserLogin,
    UserOut,
    UserPublic,
)

__all__ = [
    "User",
    "UserBase",
    "UserCreate",
    "UserLogin",
    "UserOut",
    "UserPublic",
    "RegisterResponse",
    "Token",
    "TokenData",
    "UserService",
]


def __getattr__(name: str):
    """Resolve the service lazily so importing models never pulls in services."""
    if name == "UserService":
        from app.services.users.service import UserService as _UserService

        return _UserService
    raise AttributeError(f"module 'app.modules.users' has no attribute {name!r}")
