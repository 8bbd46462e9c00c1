"""Pydantic schemas for users and authentication."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserBase(BaseModel):
    username: str = Field(..., min_length=3, max_length=50, pattern=r"^[A-Za-z0-9_.-]+$")
    email: EmailStr


class UserCreate(UserBase):
    password: str = Field(..., min_length=6, max_length=128)


class UserLogin(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserOut(UserBase):
    id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserPublic(BaseModel):
    id: int
    username: str

    model_config = ConfigDict(from_attributes=True)


class RegisterResponse(BaseModel):
    message: str
    user_id: int


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: int


class TokenData(BaseModel):
    id: Optional[int] = None


__all__ = [
    "UserBase",
    "UserCreate",
    "UserLogin",
    "UserOut",
    "UserPublic",
    "RegisterResponse",
    "Token",
    "TokenData",
]
