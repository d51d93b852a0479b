# ensport_backend/routes/banner_routes.py

from typing import Optional

from fastapi import APIRouter, Depends, File, Request, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from ensport_backend.core.auth import require_roles
from ensport_backend.core.database import get_db
from ensport_backend.core.errors import ValidationError
from ensport_backend.core.rate_limit import rate_limit
from ensport_backend.core.security import Operator
from ensport_backend.services import banner_service
from ensport_backend.services.banner_service import BANNER_ROLES, banner_to_dict
from ensport_backend.services.image_host import get_image_host

router = APIRouter()
require_banner_role = require_roles(*BANNER_ROLES)


@router.post("/upload", status_code=201, dependencies=[Depends(rate_limit("upload"))])
async def upload_banner(request: Request, image: Optional[UploadFile] = File(None),
                        db: AsyncSession = Depends(get_db), image_host=Depends(get_image_host),
                        operator: Operator = Depends(require_banner_role)):
    if image is None:
        raise ValidationError("Please choose a file")
    data = await image.read()
    banner = await banner_service.upload_banner(
        db, image_host, operator, image.filename or "banner", image.content_type, data, request=request,
    )
    return {"message": "Banner uploaded", "banner": banner_to_dict(banner)}


@router.get("/history")
async def banner_history(db: AsyncSession = Depends(get_db),
                         operator: Operator = Depends(require_banner_role)):
    banners = await banner_service.banner_history(db)
    return {"banners": [banner_to_dict(b) for b in banners]}


@router.get("/latest")
async def latest_banner(db: AsyncSession = Depends(get_db)):
    banner = await banner_service.latest_banner(db)
    return {"banner": banner_to_dict(banner) if banner else None}


@router.get("/public")
async def public_banners(db: AsyncSession = Depends(get_db)):
    banners = await banner_service.public_banners(db)
    return {
        "banners": [{"id": b.id, "filename": b.filename, "url": b.url} for b in banners],
        "count": len(banners),
    }


@router.delete("/{banner_id}")
async def delete_banner(banner_id: str, request: Request, db: AsyncSession = Depends(get_db),
                        image_host=Depends(get_image_host),
                        operator: Operator = Depends(require_banner_role)):
    await banner_service.delete_banner(db, image_host, operator, banner_id, request=request)
    return {"message": "Banner deleted"}
