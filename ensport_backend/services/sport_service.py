# ensport_backend/services/sport_service.py

from typing import List

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ensport_backend.models.sport_model import Sport


async def list_active_sports(db: AsyncSession) -> List[Sport]:
    result = await db.execute(select(Sport).where(Sport.is_active == True).order_by(Sport.name))  # noqa: E712
    return list(result.scalars().all())
