# ensport_backend/services/notification_service.py
# Fan-out of match emails to subscribers. Every send here is best effort:
# failures are caught, logged and reported in the outcome, never raised.

import asyncio
import logging
from dataclasses import dataclass, asdict
from functools import partial
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ensport_backend.core.clock import as_bangkok, utc_now
from ensport_backend.core.errors import NotificationError
from ensport_backend.models.match_model import Match, MatchStatus
from ensport_backend.models.subscriber_model import Subscriber
from ensport_backend.services import email_service
from ensport_backend.services.match_status import is_due_for_reminder

logger = logging.getLogger(__name__)


@dataclass
class NotificationOutcome:
    success: bool
    sent_to: int = 0
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


async def active_subscriber_emails(db: AsyncSession) -> List[str]:
    result = await db.execute(
        select(Subscriber.email).where(Subscriber.is_active == True).order_by(Subscriber.created_at)  # noqa: E712
    )
    return list(result.scalars().all())


async def _deliver(mailer, recipients: List[str], build: Callable[[], Dict[str, str]],
                   what: str) -> NotificationOutcome:
    """
    Build and send one message in a worker thread (the HTTP client blocks).
    Any failure is logged and reported in the outcome; callers have already committed.
    """
    if not recipients:
        logger.info("No active subscribers, skipping %s", what)
        return NotificationOutcome(success=True, sent_to=0)
    try:
        message = build()
        await asyncio.to_thread(mailer.send, recipients, message["subject"], message["html"])
    except NotificationError as e:
        logger.error("Error sending %s (%d delivered): %s", what, e.delivered, e)
        return NotificationOutcome(success=False, sent_to=e.delivered, error=str(e))
    except Exception as e:
        logger.exception("Unexpected error sending %s", what)
        return NotificationOutcome(success=False, sent_to=0, error=str(e))

    logger.info("Sent %s to %d subscribers", what, len(recipients))
    return NotificationOutcome(success=True, sent_to=len(recipients))


async def send_welcome(mailer, email: str) -> NotificationOutcome:
    return await _deliver(mailer, [email], email_service.build_welcome_email, f"welcome email to {email}")


async def notify_match_result(db: AsyncSession, mailer, match: Match) -> NotificationOutcome:
    """Send the final score of a COMPLETED match to all active subscribers."""
    recipients = await active_subscriber_emails(db)
    return await _deliver(
        mailer, recipients, partial(email_service.build_match_result, match),
        f"match result for {match.team1} vs {match.team2} ({match.id})",
    )


async def send_match_reminder(db: AsyncSession, mailer, match: Match) -> NotificationOutcome:
    """
    Send the 24-hour reminder for one match.
    Once any subscriber has been reached the match is stamped with reminder_sent_at,
    so the sweep never mails the same batch twice.
    """
    recipients = await active_subscriber_emails(db)
    outcome = await _deliver(
        mailer, recipients, partial(email_service.build_24hour_reminder, match),
        f"24-hour reminder for {match.team1} vs {match.team2} ({match.id})",
    )
    if outcome.sent_to > 0:
        match.reminder_sent_at = utc_now()
        db.add(match)
        await db.commit()
    return outcome


async def find_due_reminders(db: AsyncSession, now: datetime) -> List[Match]:
    """SCHEDULED matches starting 24h (+/- tolerance) after `now` that have no reminder yet."""
    today = as_bangkok(now).date()
    result = await db.execute(
        select(Match).where(
            Match.status == MatchStatus.SCHEDULED,
            Match.reminder_sent_at == None,  # noqa: E711
            Match.time_start != None,  # noqa: E711
            Match.date >= today,
            Match.date <= today + timedelta(days=2),
        ).order_by(Match.date, Match.time_start)
    )
    return [match for match in result.scalars().all() if is_due_for_reminder(match, now)]


async def run_reminder_sweep(db: AsyncSession, mailer, now: datetime) -> dict:
    """
    One pass of the 24-hour reminder sweep.
    Returns a summary with the per-match outcome; failed sends stay unmarked and are retried
    by the next sweep that still falls inside the tolerance window.
    """
    local_now = as_bangkok(now)
    matches = await find_due_reminders(db, now)
    logger.info("Reminder sweep at %s: %d matches due", local_now.strftime("%Y-%m-%d %H:%M"), len(matches))

    results = []
    for match in matches:
        outcome = await send_match_reminder(db, mailer, match)
        results.append({
            "match_id": match.id,
            "sport": match.sport_type,
            "teams": f"{match.team1} vs {match.team2}",
            **outcome.to_dict(),
        })

    return {
        "current_time": local_now.strftime("%Y-%m-%d %H:%M"),
        "total_matches": len(matches),
        "successful_notifications": sum(1 for r in results if r["success"]),
        "total_emails_sent": sum(r["sent_to"] for r in results),
        "results": results,
    }


async def send_sample_email(mailer, email_type: str, to: str) -> NotificationOutcome:
    """Send one sample email to `to`. Unknown types raise ValidationError before any send."""
    message = email_service.build_sample_email(email_type)
    return await _deliver(mailer, [to], lambda: message, f"sample {email_type} email to {to}")
