# ensport_backend/routes/scheduler_routes.py
# Entry points for an external cron: status sweep and 24-hour reminder sweep

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from ensport_backend.core.clock import get_clock
from ensport_backend.core.config import SCHEDULER_SECRET
from ensport_backend.core.database import get_db
from ensport_backend.core.security import secrets_match
from ensport_backend.services.email_service import get_mailer
from ensport_backend.services.match_service import sync_statuses
from ensport_backend.services.notification_service import run_reminder_sweep

logger = logging.getLogger(__name__)


def get_scheduler_secret() -> str:
    return SCHEDULER_SECRET


def verify_scheduler_token(x_scheduler_token: Optional[str] = Header(None),
                           secret: str = Depends(get_scheduler_secret)):
    """Open when no secret is configured; otherwise the header must match it."""
    if secret and not secrets_match(x_scheduler_token, secret):
        raise HTTPException(status_code=401, detail="Invalid scheduler token")


router = APIRouter(dependencies=[Depends(verify_scheduler_token)])


@router.post("/tick")
async def tick(db: AsyncSession = Depends(get_db), mailer=Depends(get_mailer), clock=Depends(get_clock)):
    """Status sweep first, so reminders only consider matches that are still SCHEDULED."""
    now = clock()
    changes = await sync_statuses(db, now)
    reminders = await run_reminder_sweep(db, mailer, now)
    logger.info("Scheduler tick: %d status changes, %d reminders sent",
                len(changes), reminders["successful_notifications"])
    return {"status_changes": changes, "reminders": reminders}


@router.api_route("/check-reminders", methods=["GET", "POST"])
async def check_reminders(db: AsyncSession = Depends(get_db), mailer=Depends(get_mailer),
                          clock=Depends(get_clock)):
    summary = await run_reminder_sweep(db, mailer, clock())
    message = "No matches need reminders" if not summary["total_matches"] else "Reminders processed"
    return {"message": message, **summary}


@router.post("/update-statuses")
async def update_statuses(db: AsyncSession = Depends(get_db), clock=Depends(get_clock)):
    changes = await sync_statuses(db, clock())
    return {"updated": len(changes), "changes": changes}
