# ensport_backend/routes/sport_routes.py

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ensport_backend.core.database import get_db
from ensport_backend.services.sport_service import list_active_sports

router = APIRouter()


@router.get("")
async def get_sports(db: AsyncSession = Depends(get_db)):
    sports = await list_active_sports(db)
    return [
        {"id": s.id, "name": s.name, "code": s.code, "description": s.description, "icon": s.icon}
        for s in sports
    ]
