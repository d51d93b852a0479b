# ensport_backend/routes/match_routes.py

from typing import Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ensport_backend.core.auth import get_current_operator
from ensport_backend.core.clock import get_clock
from ensport_backend.core.database import get_db
from ensport_backend.core.security import Operator
from ensport_backend.models.match_model import (
    MatchStatus, MatchCreate, MatchUpdate, MatchResultUpdate, MatchRead
)
from ensport_backend.services import match_service
from ensport_backend.services.email_service import get_mailer

router = APIRouter()


@router.get("")
async def list_matches(sport: Optional[str] = None, status: Optional[MatchStatus] = None,
                       db: AsyncSession = Depends(get_db),
                       operator: Operator = Depends(get_current_operator)):
    """Matches of one sport for the back office, ordered by date and start time."""
    matches = await match_service.list_matches_for_sport(db, sport, status)
    return [MatchRead.model_validate(m) for m in matches]


@router.get("/all")
async def list_all_matches(limit: int = 50, search: str = "", db: AsyncSession = Depends(get_db)):
    """
    Public schedule for the home page.
    Each row carries a display "time" string ("09:00 - 10:00") and the stored status.
    """
    matches = await match_service.list_public_matches(db, limit=limit, search=search.strip())
    return [match_service.format_public_match(m) for m in matches]


@router.post("/sync-status")
async def sync_match_statuses(db: AsyncSession = Depends(get_db), clock=Depends(get_clock),
                              operator: Operator = Depends(get_current_operator)):
    changes = await match_service.sync_statuses(db, clock())
    return {"updated": len(changes), "changes": changes}


@router.get("/{match_id}")
async def get_match(match_id: str, db: AsyncSession = Depends(get_db)):
    match = await match_service.get_match(db, match_id)
    return MatchRead.model_validate(match)


@router.post("", status_code=201)
async def create_match(payload: MatchCreate, request: Request, db: AsyncSession = Depends(get_db),
                       operator: Operator = Depends(get_current_operator)):
    match = await match_service.create_match(db, operator, payload, request=request)
    return MatchRead.model_validate(match)


@router.put("/{match_id}")
async def update_match(match_id: str, payload: MatchUpdate, request: Request,
                       db: AsyncSession = Depends(get_db),
                       operator: Operator = Depends(get_current_operator)):
    match = await match_service.update_match(db, operator, match_id, payload, request=request)
    return MatchRead.model_validate(match)


@router.delete("/{match_id}")
async def delete_match(match_id: str, request: Request, db: AsyncSession = Depends(get_db),
                       operator: Operator = Depends(get_current_operator)):
    await match_service.delete_match(db, operator, match_id, request=request)
    return {"message": "Match deleted"}


@router.put("/{match_id}/result")
async def record_match_result(match_id: str, payload: MatchResultUpdate, request: Request,
                              db: AsyncSession = Depends(get_db), mailer=Depends(get_mailer),
                              operator: Operator = Depends(get_current_operator)):
    """
    Record (or correct) the final score. The match must be PENDING_RESULT or COMPLETED.
    Subscribers are emailed the result; a failed email does not fail the request.
    """
    match = await match_service.record_result(
        db, operator, match_id,
        payload.home_score, payload.away_score, payload.winner,
        mailer=mailer, request=request,
    )
    return MatchRead.model_validate(match)
