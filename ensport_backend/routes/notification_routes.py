# ensport_backend/routes/notification_routes.py
# Manual email triggers for one match (ADMIN or the match's sport manager)

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ensport_backend.core.auth import get_current_operator
from ensport_backend.core.database import get_db
from ensport_backend.core.security import Operator
from ensport_backend.models.match_model import MatchNotificationRequest
from ensport_backend.services import match_service
from ensport_backend.services.email_service import get_mailer

router = APIRouter()


@router.post("/24hour-reminder")
async def send_24hour_reminder(payload: MatchNotificationRequest, request: Request,
                               db: AsyncSession = Depends(get_db), mailer=Depends(get_mailer),
                               operator: Operator = Depends(get_current_operator)):
    outcome = await match_service.trigger_reminder(db, mailer, operator, payload.match_id, request=request)
    return {"message": "24-hour reminder processed", **outcome.to_dict()}


@router.post("/match-result")
async def send_match_result(payload: MatchNotificationRequest, request: Request,
                            db: AsyncSession = Depends(get_db), mailer=Depends(get_mailer),
                            operator: Operator = Depends(get_current_operator)):
    outcome = await match_service.trigger_result_notification(
        db, mailer, operator, payload.match_id, request=request,
    )
    return {"message": "Match result notification processed", **outcome.to_dict()}
