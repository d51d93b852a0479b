# ensport_backend/services/user_service.py
# Back-office account administration and credential checks

import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ensport_backend.core.clock import utc_now
from ensport_backend.core.config import PROTECTED_ADMIN_USERNAME
from ensport_backend.core.errors import ValidationError, NotFoundError, ForbiddenError
from ensport_backend.core.security import hash_password, verify_password
from ensport_backend.models.user_model import User, UserRole, UserCreate, UserUpdate

logger = logging.getLogger(__name__)


async def find_user_by_username(db: AsyncSession, username: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.username == username))
    return result.scalars().first()


async def authenticate(db: AsyncSession, username: Optional[str], password: Optional[str]) -> Optional[User]:
    """Return the user when the credentials match, else None. Does not check is_active."""
    if not username or not password:
        return None
    user = await find_user_by_username(db, username.strip())
    if not user or not verify_password(password, user.password_hash):
        return None
    return user


async def get_user(db: AsyncSession, user_id: str) -> User:
    user = await db.get(User, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


async def list_users(db: AsyncSession) -> List[User]:
    result = await db.execute(select(User).order_by(User.created_at.desc()))
    return list(result.scalars().all())


async def create_user(db: AsyncSession, data: UserCreate) -> User:
    username = (data.username or "").strip()
    if not username or not data.password:
        raise ValidationError("Username and password are required")
    if await find_user_by_username(db, username):
        raise ValidationError("Username already exists")

    user = User(
        username=username,
        password_hash=hash_password(data.password),
        role=data.role,
        sport_type=data.sport_type or None,
        first_name=data.first_name,
        last_name=data.last_name,
        email=data.email,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info("User %s created with role %s", user.username, UserRole(user.role).value)
    return user


async def update_user(db: AsyncSession, user_id: str, data: UserUpdate) -> User:
    user = await get_user(db, user_id)

    if data.username is not None:
        username = data.username.strip()
        if not username:
            raise ValidationError("Username must not be blank")
        if username != user.username and await find_user_by_username(db, username):
            raise ValidationError("Username already exists")
        user.username = username
    if data.password:
        user.password_hash = hash_password(data.password)
    if data.role is not None:
        user.role = data.role
    if data.sport_type is not None:
        user.sport_type = data.sport_type or None
    if data.is_active is not None:
        user.is_active = data.is_active

    user.updated_at = utc_now()
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info("User %s updated", user.username)
    return user


async def delete_user(db: AsyncSession, user_id: str) -> None:
    user = await get_user(db, user_id)
    if UserRole(user.role) == UserRole.ADMIN and user.username == PROTECTED_ADMIN_USERNAME:
        raise ForbiddenError("The main admin account cannot be deleted")

    await db.delete(user)
    await db.commit()
    logger.info("User %s deleted", user.username)
