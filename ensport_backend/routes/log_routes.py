# ensport_backend/routes/log_routes.py

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ensport_backend.core.auth import require_admin
from ensport_backend.core.database import get_db
from ensport_backend.core.security import Operator
from ensport_backend.services.activity_logger import list_logs

router = APIRouter()


@router.get("")
async def get_logs(page: int = 1, limit: int = 20, filter: str = "all", search: str = "",
                   db: AsyncSession = Depends(get_db), operator: Operator = Depends(require_admin)):
    """Activity log, newest first. filter: all, banner, match, auth, subscription, notification."""
    return await list_logs(db, page=page, limit=limit, filter_name=filter, search=search.strip())
