# ensport_backend/services/match_service.py
# Match CRUD, the result recorder, the status sweep and manual notifications

import logging
from datetime import datetime
from typing import Any, List, Optional

from fastapi import Request
from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ensport_backend.core.clock import parse_hhmm, utc_now
from ensport_backend.core.errors import (
    ValidationError, NotFoundError, ForbiddenError, InvalidStateError
)
from ensport_backend.core.security import Operator
from ensport_backend.models.activity_log_model import ActivityAction
from ensport_backend.models.match_model import (
    Match, MatchStatus, Winner, MatchCreate, MatchUpdate
)
from ensport_backend.services.activity_logger import log_activity, log_operator_activity, SYSTEM_USER
from ensport_backend.services.match_status import evaluate_status
from ensport_backend.services.notification_service import (
    NotificationOutcome, notify_match_result, send_match_reminder
)

logger = logging.getLogger(__name__)

RESULT_STATUSES = (MatchStatus.PENDING_RESULT, MatchStatus.COMPLETED)
REQUIRED_CREATE_FIELDS = ("date", "time_start", "time_end", "location", "maps_link", "team1", "team2", "sport")


# ---------------------------------------------
# Helpers
# ---------------------------------------------

def normalize_hhmm(value: str, field: str) -> str:
    """Validate a "HH:MM" string and return it zero-padded ("9:05" -> "09:05")."""
    try:
        parsed = parse_hhmm(value)
    except (ValueError, AttributeError):
        raise ValidationError(f"{field} must be a 24-hour time in HH:MM format")
    return parsed.strftime("%H:%M")


def check_time_order(time_start: Optional[str], time_end: Optional[str]):
    # Zero-padded HH:MM strings compare in time order
    if time_start and time_end and time_end < time_start:
        raise ValidationError("time_end must not be earlier than time_start")


def ensure_can_manage(operator: Operator, sport_type: str):
    if not operator.can_manage_sport(sport_type):
        raise ForbiddenError("You can only manage your own sport")


def match_label(match: Match) -> str:
    return f"{match.team1} vs {match.team2} ({match.sport_type})"


def format_public_match(match: Match) -> dict:
    """Row of the public schedule (home page)."""
    return {
        "id": match.id,
        "date": match.date.isoformat(),
        "time": f"{match.time_start or ''} - {match.time_end or ''}",
        "sport": match.sport_type,
        "match": f"{match.team1} vs {match.team2}",
        "team1": match.team1,
        "team2": match.team2,
        "location": match.location,
        "url": match.maps_link or "#",
        "status": MatchStatus(match.status).value,
        "home_score": match.home_score,
        "away_score": match.away_score,
        "winner": match.winner,
        "raw_time": match.time_start or "",
    }


# ---------------------------------------------
# Reads
# ---------------------------------------------

async def get_match(db: AsyncSession, match_id: str) -> Match:
    match = await db.get(Match, match_id)
    if not match:
        raise NotFoundError("Match not found")
    return match


async def list_matches_for_sport(db: AsyncSession, sport: Optional[str],
                                 status: Optional[MatchStatus] = None) -> List[Match]:
    if not sport:
        raise ValidationError("Sport parameter required")
    query = select(Match).where(Match.sport_type == sport)
    if status is not None:
        query = query.where(Match.status == status)
    result = await db.execute(query.order_by(Match.date, Match.time_start))
    return list(result.scalars().all())


async def list_public_matches(db: AsyncSession, limit: int = 50, search: str = "") -> List[Match]:
    if limit < 1:
        raise ValidationError("limit must be positive")
    query = select(Match)
    if search:
        pattern = f"%{search}%"
        query = query.where(or_(
            Match.sport_type.ilike(pattern),
            Match.team1.ilike(pattern),
            Match.team2.ilike(pattern),
            Match.location.ilike(pattern),
        ))
    result = await db.execute(query.order_by(Match.date, Match.time_start).limit(limit))
    return list(result.scalars().all())


# ---------------------------------------------
# Create / update / delete
# ---------------------------------------------

async def create_match(db: AsyncSession, operator: Operator, data: MatchCreate,
                       request: Optional[Request] = None) -> Match:
    values = data.model_dump()
    missing = [f for f in REQUIRED_CREATE_FIELDS
               if values.get(f) is None or (isinstance(values[f], str) and not values[f].strip())]
    if missing:
        raise ValidationError(f"All fields are required (missing: {', '.join(missing)})")

    sport = data.sport.strip()
    ensure_can_manage(operator, sport)

    time_start = normalize_hhmm(data.time_start, "time_start")
    time_end = normalize_hhmm(data.time_end, "time_end")
    check_time_order(time_start, time_end)

    match = Match(
        sport_type=sport,
        team1=data.team1.strip(),
        team2=data.team2.strip(),
        date=data.date,
        time_start=time_start,
        time_end=time_end,
        location=data.location.strip(),
        maps_link=data.maps_link.strip(),
        status=MatchStatus.SCHEDULED,
    )
    db.add(match)
    await db.commit()
    await db.refresh(match)
    logger.info("Match %s created by %s", match.id, operator.username)

    await log_operator_activity(
        db, operator, ActivityAction.CREATE_MATCH, match_label(match),
        target_id=match.id,
        details={"date": match.date, "time_start": time_start, "time_end": time_end,
                 "location": match.location},
        request=request,
    )
    return match


async def update_match(db: AsyncSession, operator: Operator, match_id: str, data: MatchUpdate,
                       request: Optional[Request] = None) -> Match:
    """
    Edit schedule, venue and teams. Status, scores and winner are not editable here.
    Rescheduling clears the reminder marker so the new start time gets its own reminder.
    """
    match = await get_match(db, match_id)
    ensure_can_manage(operator, match.sport_type)

    changes = {}
    for field in ("team1", "team2", "location", "maps_link"):
        value = getattr(data, field)
        if value is not None and value.strip():
            changes[field] = value.strip()
    for field in ("time_start", "time_end"):
        value = getattr(data, field)
        if value is not None and value.strip():
            changes[field] = normalize_hhmm(value, field)
    if data.date is not None:
        changes["date"] = data.date

    check_time_order(changes.get("time_start", match.time_start), changes.get("time_end", match.time_end))

    rescheduled = any(
        field in changes and changes[field] != getattr(match, field)
        for field in ("date", "time_start")
    )
    for field, value in changes.items():
        setattr(match, field, value)
    if rescheduled:
        match.reminder_sent_at = None
    match.updated_at = utc_now()

    db.add(match)
    await db.commit()
    await db.refresh(match)

    await log_operator_activity(
        db, operator, ActivityAction.UPDATE_MATCH, match_label(match),
        target_id=match.id, details=changes, request=request,
    )
    return match


async def delete_match(db: AsyncSession, operator: Operator, match_id: str,
                       request: Optional[Request] = None) -> None:
    match = await get_match(db, match_id)
    ensure_can_manage(operator, match.sport_type)

    label = match_label(match)
    await db.delete(match)
    await db.commit()
    logger.info("Match %s deleted by %s", match_id, operator.username)

    await log_operator_activity(
        db, operator, ActivityAction.DELETE_MATCH, label, target_id=match_id, request=request,
    )


# ---------------------------------------------
# Result recorder
# ---------------------------------------------

def _coerce_score(value: Any, field: str) -> int:
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{field} is required and must be a whole number")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(f"{field} must be a whole number")
        value = int(value)
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            raise ValidationError(f"{field} must be a whole number")
    if not isinstance(value, int):
        raise ValidationError(f"{field} must be a whole number")
    if value < 0:
        raise ValidationError("Scores must not be negative")
    return value


def validate_result(home_score: Any, away_score: Any, winner: Any):
    """Return (home, away, Winner) or raise ValidationError."""
    home = _coerce_score(home_score, "home_score")
    away = _coerce_score(away_score, "away_score")
    try:
        parsed_winner = Winner(winner)
    except ValueError:
        raise ValidationError("winner must be one of: team1, team2, draw")
    return home, away, parsed_winner


async def record_result(db: AsyncSession, operator: Operator, match_id: str,
                        home_score: Any, away_score: Any, winner: Any,
                        mailer=None, request: Optional[Request] = None) -> Match:
    """
    Commit the final score of a finished match and force it to COMPLETED.

    Checks, in order: the match exists, the operator may manage its sport, the match is
    PENDING_RESULT or COMPLETED (re-edit), and the score/winner are valid. Nothing is written
    unless all pass. The subscriber notification afterwards is best effort.
    """
    match = await get_match(db, match_id)
    ensure_can_manage(operator, match.sport_type)

    previous_status = MatchStatus(match.status)
    if previous_status not in RESULT_STATUSES:
        raise InvalidStateError("A result can only be recorded once the match has finished")

    home, away, parsed_winner = validate_result(home_score, away_score, winner)

    match.home_score = home
    match.away_score = away
    match.winner = parsed_winner
    match.status = MatchStatus.COMPLETED
    match.updated_at = utc_now()
    db.add(match)
    await db.commit()
    await db.refresh(match)
    logger.info("Result recorded for match %s: %d-%d (%s)", match.id, home, away, parsed_winner.value)

    if mailer is not None:
        await notify_match_result(db, mailer, match)

    await log_operator_activity(
        db, operator, ActivityAction.UPDATE_MATCH_SCORE, match_label(match),
        target_id=match.id,
        details={
            "home_score": home,
            "away_score": away,
            "winner": parsed_winner.value,
            "previous_status": previous_status.value,
            "new_status": MatchStatus.COMPLETED.value,
        },
        request=request,
    )
    return match


# ---------------------------------------------
# Status sweep
# ---------------------------------------------

async def sync_statuses(db: AsyncSession, now: datetime) -> List[dict]:
    """
    Evaluate every non-completed match at `now` and persist the ones whose status changed.
    Returns [{"match_id", "from", "to"}, ...].
    """
    result = await db.execute(select(Match).where(Match.status != MatchStatus.COMPLETED))
    matches = result.scalars().all()

    changes = []
    for match in matches:
        current = MatchStatus(match.status)
        expected = evaluate_status(match, now)
        if expected == current:
            continue
        match.status = expected
        match.updated_at = utc_now()
        db.add(match)
        changes.append({"match_id": match.id, "label": match_label(match),
                        "from": current.value, "to": expected.value})

    if not changes:
        return []

    await db.commit()
    logger.info("Status sweep updated %d matches", len(changes))

    for change in changes:
        await log_activity(
            db, **SYSTEM_USER,
            action=ActivityAction.UPDATE_MATCH_STATUS,
            target=change["label"],
            target_id=change["match_id"],
            details={"previous_status": change["from"], "new_status": change["to"]},
        )
    return [{"match_id": c["match_id"], "from": c["from"], "to": c["to"]} for c in changes]


# ---------------------------------------------
# Manual notification triggers
# ---------------------------------------------

async def _managed_match(db: AsyncSession, operator: Operator, match_id: Optional[str]) -> Match:
    if not match_id:
        raise ValidationError("match_id is required")
    match = await get_match(db, match_id)
    ensure_can_manage(operator, match.sport_type)
    return match


async def trigger_reminder(db: AsyncSession, mailer, operator: Operator, match_id: Optional[str],
                           request: Optional[Request] = None) -> NotificationOutcome:
    """Send the 24-hour reminder now, whatever the sweep already did."""
    match = await _managed_match(db, operator, match_id)
    outcome = await send_match_reminder(db, mailer, match)

    await log_operator_activity(
        db, operator, ActivityAction.SEND_24H_REMINDER, match_label(match),
        target_id=match.id, details=outcome.to_dict(), request=request,
    )
    return outcome


async def trigger_result_notification(db: AsyncSession, mailer, operator: Operator,
                                      match_id: Optional[str],
                                      request: Optional[Request] = None) -> NotificationOutcome:
    match = await _managed_match(db, operator, match_id)
    if MatchStatus(match.status) != MatchStatus.COMPLETED or match.home_score is None \
            or match.away_score is None:
        raise InvalidStateError("Match has no recorded result yet")

    outcome = await notify_match_result(db, mailer, match)

    await log_operator_activity(
        db, operator, ActivityAction.SEND_MATCH_RESULT, match_label(match),
        target_id=match.id, details=outcome.to_dict(), request=request,
    )
    return outcome
