# ensport_backend/models/match_model.py
# Defines the Match model (fixtures and results) and its request/response schemas

import uuid
import datetime as dt
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel
from sqlmodel import SQLModel, Field

from ensport_backend.core.clock import utc_now


class MatchStatus(str, Enum):
    """Lifecycle of a fixture. Only ever moves forward (see STATUS_ORDER)."""
    SCHEDULED = "SCHEDULED"            # Before timeStart
    ONGOING = "ONGOING"                # Between timeStart and timeEnd
    PENDING_RESULT = "PENDING_RESULT"  # Finished, waiting for an operator to enter the score
    COMPLETED = "COMPLETED"            # Score and winner recorded


STATUS_ORDER = {
    MatchStatus.SCHEDULED: 0,
    MatchStatus.ONGOING: 1,
    MatchStatus.PENDING_RESULT: 2,
    MatchStatus.COMPLETED: 3,
}


class Winner(str, Enum):
    TEAM1 = "team1"
    TEAM2 = "team2"
    DRAW = "draw"


class Match(SQLModel, table=True):
    """
    A single fixture between two free-text teams of one sport.
    Scores and winner are all-or-nothing and only set once status is COMPLETED.
    """
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)

    # Fixture details
    sport_type: str = Field(index=True)        # Denormalized sport label, not a foreign key
    team1: str
    team2: str
    date: dt.date                              # Local (Asia/Bangkok) calendar date
    time_start: Optional[str] = None           # "HH:MM"
    time_end: Optional[str] = None             # "HH:MM"
    location: str
    maps_link: str

    status: MatchStatus = Field(default=MatchStatus.SCHEDULED)

    # Results (populated by the result recorder only)
    home_score: Optional[int] = None
    away_score: Optional[int] = None
    winner: Optional[Winner] = None

    # Set when the 24-hour reminder went out, so the sweep does not resend it
    reminder_sent_at: Optional[dt.datetime] = None

    created_at: dt.datetime = Field(default_factory=utc_now)
    updated_at: dt.datetime = Field(default_factory=utc_now)


# -------------------------------
# Pydantic schemas for API requests/responses
# -------------------------------

class MatchCreate(BaseModel):
    """Every field is required; checked by the match service so errors read the same everywhere."""
    date: Optional[dt.date] = None
    time_start: Optional[str] = None
    time_end: Optional[str] = None
    location: Optional[str] = None
    maps_link: Optional[str] = None
    team1: Optional[str] = None
    team2: Optional[str] = None
    sport: Optional[str] = None


class MatchUpdate(BaseModel):
    """Partial update. Missing or blank values keep the stored value."""
    date: Optional[dt.date] = None
    time_start: Optional[str] = None
    time_end: Optional[str] = None
    location: Optional[str] = None
    maps_link: Optional[str] = None
    team1: Optional[str] = None
    team2: Optional[str] = None


class MatchResultUpdate(BaseModel):
    """Loosely typed on purpose: range and token checks raise ValidationError in the service."""
    home_score: Optional[Any] = None
    away_score: Optional[Any] = None
    winner: Optional[Any] = None


class MatchRead(BaseModel):
    id: str
    sport_type: str
    team1: str
    team2: str
    date: dt.date
    time_start: Optional[str] = None
    time_end: Optional[str] = None
    location: str
    maps_link: str
    status: MatchStatus
    home_score: Optional[int] = None
    away_score: Optional[int] = None
    winner: Optional[Winner] = None
    reminder_sent_at: Optional[dt.datetime] = None
    created_at: dt.datetime
    updated_at: dt.datetime

    class Config:
        from_attributes = True


class MatchNotificationRequest(BaseModel):
    match_id: Optional[str] = None


class SampleEmailRequest(BaseModel):
    """Admin email check: which template to send and where."""
    email_type: Optional[str] = None
    test_email: Optional[str] = None
