# ensport_backend/routes/user_routes.py
# Account administration (ADMIN only)

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ensport_backend.core.auth import require_admin
from ensport_backend.core.database import get_db
from ensport_backend.models.user_model import UserCreate, UserUpdate, UserRead
from ensport_backend.services import user_service

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("")
async def list_users(db: AsyncSession = Depends(get_db)):
    users = await user_service.list_users(db)
    return {"users": [UserRead.model_validate(u) for u in users]}


@router.post("", status_code=201)
async def create_user(payload: UserCreate, db: AsyncSession = Depends(get_db)):
    user = await user_service.create_user(db, payload)
    return {"message": "User created", "user": UserRead.model_validate(user)}


@router.get("/{user_id}")
async def get_user(user_id: str, db: AsyncSession = Depends(get_db)):
    user = await user_service.get_user(db, user_id)
    return {"user": UserRead.model_validate(user)}


@router.put("/{user_id}")
async def update_user(user_id: str, payload: UserUpdate, db: AsyncSession = Depends(get_db)):
    user = await user_service.update_user(db, user_id, payload)
    return {"message": "User updated", "user": UserRead.model_validate(user)}


@router.delete("/{user_id}")
async def delete_user(user_id: str, db: AsyncSession = Depends(get_db)):
    await user_service.delete_user(db, user_id)
    return {"message": "User deleted"}
