# ensport_backend/services/subscriber_service.py
# Email subscriptions: subscribe, reactivate, look up, unsubscribe

import json
import logging
from typing import List, Optional, Tuple

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ensport_backend.core.clock import utc_now
from ensport_backend.core.errors import ValidationError, NotFoundError
from ensport_backend.models.activity_log_model import ActivityAction
from ensport_backend.models.subscriber_model import Subscriber
from ensport_backend.services.activity_logger import log_activity
from ensport_backend.services.notification_service import send_welcome

logger = logging.getLogger(__name__)

# Subscribers act without an account
GUEST = {"user_id": "guest", "user_role": "GUEST"}


def normalize_email(email: Optional[str]) -> str:
    email = (email or "").strip().lower()
    local, _, domain = email.partition("@")
    if not local or not domain or " " in email:
        raise ValidationError("Please enter a valid email address")
    return email


async def find_subscriber(db: AsyncSession, email: str) -> Optional[Subscriber]:
    result = await db.execute(select(Subscriber).where(Subscriber.email == email))
    return result.scalars().first()


async def subscribe(db: AsyncSession, mailer, email: Optional[str], sports: Optional[List[str]] = None,
                    request: Optional[Request] = None) -> Tuple[Subscriber, bool]:
    """
    Register an email for match notifications.
    Returns (subscriber, created). A deactivated subscriber is reactivated with the new
    interests; an active one is a ValidationError.
    """
    email = normalize_email(email)
    sports_json = json.dumps(sports) if sports else None

    subscriber = await find_subscriber(db, email)
    if subscriber:
        if subscriber.is_active:
            raise ValidationError("This email is already subscribed")
        subscriber.is_active = True
        subscriber.sports = sports_json
        subscriber.updated_at = utc_now()
        db.add(subscriber)
        await db.commit()
        await db.refresh(subscriber)
        logger.info("Subscriber %s reactivated", email)
        return subscriber, False

    subscriber = Subscriber(email=email, sports=sports_json, is_active=True)
    db.add(subscriber)
    await db.commit()
    await db.refresh(subscriber)
    logger.info("New subscriber %s", email)

    # Subscription stands even if the welcome email fails
    await send_welcome(mailer, email)

    await log_activity(
        db, **GUEST, user_name=email,
        action=ActivityAction.EMAIL_SUBSCRIBE,
        target=f"Subscribed with {email}",
        target_id=subscriber.id,
        details={"email": email, "sports": sports or []},
        request=request,
    )
    return subscriber, True


async def get_subscriber(db: AsyncSession, email: Optional[str]) -> Subscriber:
    subscriber = await find_subscriber(db, (email or "").strip().lower())
    if not subscriber:
        raise NotFoundError("Subscriber not found")
    return subscriber


async def list_subscribers(db: AsyncSession) -> List[Subscriber]:
    result = await db.execute(select(Subscriber).order_by(Subscriber.created_at.desc()))
    return list(result.scalars().all())


async def unsubscribe(db: AsyncSession, email: Optional[str], request: Optional[Request] = None) -> Subscriber:
    """Soft delete: the row stays, flagged inactive."""
    if not email or not email.strip():
        raise ValidationError("Email is required")
    subscriber = await get_subscriber(db, email)

    subscriber.is_active = False
    subscriber.updated_at = utc_now()
    db.add(subscriber)
    await db.commit()
    await db.refresh(subscriber)

    await log_activity(
        db, **GUEST, user_name=subscriber.email,
        action=ActivityAction.EMAIL_UNSUBSCRIBE,
        target=f"Unsubscribed {subscriber.email}",
        target_id=subscriber.id,
        request=request,
    )
    return subscriber
