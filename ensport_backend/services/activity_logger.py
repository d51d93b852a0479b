# ensport_backend/services/activity_logger.py
# Writes and reads the activity log (audit trail)

import json
import logging
import math
from typing import Any, Optional

from fastapi import Request
from sqlalchemy import func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ensport_backend.core.errors import ValidationError
from ensport_backend.core.rate_limit import client_address
from ensport_backend.core.security import Operator
from ensport_backend.models.activity_log_model import ActivityLog, ActivityAction, ACTION_GROUPS

logger = logging.getLogger(__name__)

SYSTEM_USER = {"user_id": "system", "user_name": "scheduler", "user_role": "SYSTEM"}


async def log_activity(
    db: AsyncSession,
    *,
    user_id: str,
    user_name: str,
    user_role: str,
    action: ActivityAction,
    target: str,
    target_id: Optional[str] = None,
    details: Optional[Any] = None,
    request: Optional[Request] = None,
) -> Optional[ActivityLog]:
    """
    Record one activity entry and commit it.
    Never raises: a failed audit write is logged and the caller carries on.
    """
    ip_address = None
    user_agent = None
    if request is not None:
        ip_address = client_address(request)
        user_agent = request.headers.get("user-agent")

    entry = ActivityLog(
        user_id=user_id,
        user_name=user_name,
        user_role=str(user_role),
        action=ActivityAction(action).value,
        target=target,
        target_id=target_id,
        details=json.dumps(details, default=str) if details is not None else None,
        ip_address=ip_address,
        user_agent=user_agent,
    )

    try:
        db.add(entry)
        await db.commit()
    except Exception:
        logger.exception("Error logging activity %s by %s", entry.action, user_name)
        await db.rollback()
        return None

    logger.info("Activity logged: %s by %s (%s)", entry.action, user_name, entry.user_role)
    return entry


async def log_operator_activity(db: AsyncSession, operator: Operator, action: ActivityAction,
                                target: str, **kwargs) -> Optional[ActivityLog]:
    return await log_activity(
        db,
        user_id=operator.id,
        user_name=operator.username,
        user_role=operator.role.value,
        action=action,
        target=target,
        **kwargs,
    )


def log_to_dict(entry: ActivityLog) -> dict:
    details = None
    if entry.details:
        try:
            details = json.loads(entry.details)
        except ValueError:
            details = entry.details
    return {
        "id": entry.id,
        "user_id": entry.user_id,
        "user_name": entry.user_name,
        "user_role": entry.user_role,
        "action": entry.action,
        "target": entry.target,
        "target_id": entry.target_id,
        "details": details,
        "ip_address": entry.ip_address,
        "user_agent": entry.user_agent,
        "created_at": entry.created_at,
    }


async def list_logs(db: AsyncSession, page: int = 1, limit: int = 20,
                    filter_name: str = "all", search: str = "") -> dict:
    """
    Paginated log listing, newest first.
    filter_name is "all" or one of ACTION_GROUPS; search matches user name, action,
    target and role, case-insensitively.
    """
    if page < 1 or limit < 1:
        raise ValidationError("page and limit must be positive")
    if filter_name != "all" and filter_name not in ACTION_GROUPS:
        raise ValidationError(f"Unknown filter '{filter_name}'")

    conditions = []
    if filter_name != "all":
        conditions.append(ActivityLog.action.in_([a.value for a in ACTION_GROUPS[filter_name]]))
    if search:
        pattern = f"%{search}%"
        conditions.append(or_(
            ActivityLog.user_name.ilike(pattern),
            ActivityLog.action.ilike(pattern),
            ActivityLog.target.ilike(pattern),
            ActivityLog.user_role.ilike(pattern),
        ))

    count_query = select(func.count()).select_from(ActivityLog)
    query = select(ActivityLog)
    for condition in conditions:
        count_query = count_query.where(condition)
        query = query.where(condition)

    total = (await db.execute(count_query)).scalar_one()

    result = await db.execute(
        query.order_by(ActivityLog.created_at.desc()).offset((page - 1) * limit).limit(limit)
    )
    logs = result.scalars().all()

    return {
        "logs": [log_to_dict(entry) for entry in logs],
        "total": total,
        "page": page,
        "total_pages": math.ceil(total / limit) if total else 0,
        "has_more": page * limit < total,
    }
