# ensport_backend/services/banner_service.py
# Home page banners: upload to the image host, list, delete

import asyncio
import logging
from typing import List, Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ensport_backend.core.config import BANNER_HISTORY_LIMIT
from ensport_backend.core.errors import NotFoundError, ForbiddenError, ImageHostError
from ensport_backend.core.security import Operator
from ensport_backend.models.activity_log_model import ActivityAction
from ensport_backend.models.banner_model import Banner
from ensport_backend.models.user_model import UserRole
from ensport_backend.services.activity_logger import log_operator_activity
from ensport_backend.services.image_host import validate_image

logger = logging.getLogger(__name__)

BANNER_ROLES = (UserRole.ADMIN, UserRole.EDITOR, UserRole.SPORT_MANAGER)


def banner_to_dict(banner: Banner) -> dict:
    return {
        "id": banner.id,
        "filename": banner.filename,
        "url": banner.url,
        "uploaded_by": banner.uploaded_by,
        "uploaded_at": banner.created_at,
    }


async def upload_banner(db: AsyncSession, image_host, operator: Operator, filename: str,
                        content_type: Optional[str], data: bytes,
                        request: Optional[Request] = None) -> Banner:
    validate_image(content_type, len(data))

    uploaded = await asyncio.to_thread(image_host.upload_image, data, filename, content_type)

    banner = Banner(
        filename=filename,
        url=uploaded["url"],
        public_id=uploaded["public_id"],
        uploaded_by=operator.id,
    )
    db.add(banner)
    await db.commit()
    await db.refresh(banner)

    await log_operator_activity(
        db, operator, ActivityAction.UPLOAD_BANNER, filename,
        target_id=banner.id,
        details={"file_size": len(data), "url": banner.url},
        request=request,
    )
    return banner


async def delete_banner(db: AsyncSession, image_host, operator: Operator, banner_id: str,
                        request: Optional[Request] = None) -> None:
    """
    Admins delete any banner, sport managers only their own uploads.
    The row is removed even if the CDN delete fails (the asset may already be gone).
    """
    banner = await db.get(Banner, banner_id)
    if not banner:
        raise NotFoundError("Banner not found")

    own_upload = operator.role == UserRole.SPORT_MANAGER and banner.uploaded_by == operator.id
    if not (operator.is_admin or own_upload):
        raise ForbiddenError("You are not allowed to delete this banner")

    try:
        await asyncio.to_thread(image_host.destroy, banner.public_id)
    except ImageHostError as e:
        logger.warning("Error deleting %s from the image host: %s", banner.public_id, e)

    details = {"public_id": banner.public_id, "url": banner.url}
    filename = banner.filename
    await db.delete(banner)
    await db.commit()

    await log_operator_activity(
        db, operator, ActivityAction.DELETE_BANNER, filename,
        target_id=banner_id, details=details, request=request,
    )


async def banner_history(db: AsyncSession, limit: int = BANNER_HISTORY_LIMIT) -> List[Banner]:
    result = await db.execute(select(Banner).order_by(Banner.created_at.desc()).limit(limit))
    return list(result.scalars().all())


async def latest_banner(db: AsyncSession) -> Optional[Banner]:
    result = await db.execute(select(Banner).order_by(Banner.created_at.desc()).limit(1))
    return result.scalars().first()


async def public_banners(db: AsyncSession) -> List[Banner]:
    result = await db.execute(select(Banner).order_by(Banner.created_at.desc()))
    return list(result.scalars().all())
