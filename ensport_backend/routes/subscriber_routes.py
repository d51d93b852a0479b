# ensport_backend/routes/subscriber_routes.py

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from ensport_backend.core.auth import get_optional_operator
from ensport_backend.core.database import get_db
from ensport_backend.core.security import Operator
from ensport_backend.models.subscriber_model import SubscribeRequest, SubscriberRead
from ensport_backend.services import subscriber_service
from ensport_backend.services.email_service import get_mailer

router = APIRouter()


@router.post("", status_code=201)
async def subscribe(payload: SubscribeRequest, request: Request, response: Response,
                    db: AsyncSession = Depends(get_db), mailer=Depends(get_mailer)):
    subscriber, created = await subscriber_service.subscribe(
        db, mailer, payload.email, payload.sports, request=request,
    )
    if not created:
        response.status_code = 200
        return {"message": "Subscription reactivated",
                "subscriber": SubscriberRead.from_subscriber(subscriber)}
    return {"message": "Subscribed", "subscriber": SubscriberRead.from_subscriber(subscriber)}


@router.get("")
async def get_subscribers(email: Optional[str] = None, db: AsyncSession = Depends(get_db),
                          operator: Optional[Operator] = Depends(get_optional_operator)):
    """With ?email= a single public lookup; without it the full list (ADMIN only)."""
    if email:
        subscriber = await subscriber_service.get_subscriber(db, email)
        return {"subscriber": SubscriberRead.from_subscriber(subscriber)}

    if operator is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    if not operator.is_admin:
        raise HTTPException(status_code=403, detail="Insufficient permissions")

    subscribers = await subscriber_service.list_subscribers(db)
    return {
        "subscribers": [SubscriberRead.from_subscriber(s) for s in subscribers],
        "total": len(subscribers),
    }


@router.delete("")
async def unsubscribe(request: Request, email: Optional[str] = None, db: AsyncSession = Depends(get_db)):
    await subscriber_service.unsubscribe(db, email, request=request)
    return {"message": "Unsubscribed"}
