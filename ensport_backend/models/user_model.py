# ensport_backend/models/user_model.py
# Defines back-office accounts (admins, sport managers, editors) and their schemas

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel
from sqlmodel import SQLModel, Field

from ensport_backend.core.clock import utc_now


class UserRole(str, Enum):
    ADMIN = "ADMIN"                  # Unrestricted
    SPORT_MANAGER = "SPORT_MANAGER"  # Manages the matches of exactly one sport
    EDITOR = "EDITOR"                # Banners only
    USER = "USER"


class User(SQLModel, table=True):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    username: str = Field(index=True, unique=True)
    password_hash: str
    role: UserRole = Field(default=UserRole.USER)
    sport_type: Optional[str] = None   # Scope of a SPORT_MANAGER
    is_active: bool = Field(default=True)

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


# -------------------------------
# Pydantic schemas
# -------------------------------

class LoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class UserCreate(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None
    role: UserRole = UserRole.USER
    sport_type: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None


class UserUpdate(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None
    role: Optional[UserRole] = None
    sport_type: Optional[str] = None
    is_active: Optional[bool] = None


class UserRead(BaseModel):
    """User profile without the password hash."""
    id: str
    username: str
    role: UserRole
    sport_type: Optional[str] = None
    is_active: bool
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
