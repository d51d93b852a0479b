# ensport_backend/services/match_status.py
# Pure time-based rules for matches: expected status and 24-hour reminder window.
# Nothing here touches the database; callers diff and persist.

from datetime import datetime, timedelta
from typing import Optional, Tuple

from ensport_backend.core.clock import as_bangkok, local_instant
from ensport_backend.core.config import REMINDER_LEAD_MINUTES, REMINDER_TOLERANCE_MINUTES
from ensport_backend.models.match_model import Match, MatchStatus, STATUS_ORDER

REMINDER_LEAD = timedelta(minutes=REMINDER_LEAD_MINUTES)
REMINDER_TOLERANCE = timedelta(minutes=REMINDER_TOLERANCE_MINUTES)


def match_window(match: Match) -> Optional[Tuple[datetime, datetime]]:
    """
    (start, end) of the fixture as aware Bangkok datetimes.
    None when a time is missing or unparseable: such matches are never evaluated automatically.
    """
    if not match.time_start or not match.time_end:
        return None
    try:
        return local_instant(match.date, match.time_start), local_instant(match.date, match.time_end)
    except ValueError:
        return None


def evaluate_status(match: Match, now: datetime) -> MatchStatus:
    """
    Return the status `match` should have at `now` (naive = Bangkok wall-clock).

    Rules:
    - COMPLETED is terminal.
    - Before start: SCHEDULED. Between start and end (inclusive): ONGOING. After end: PENDING_RESULT.
      A fixture whose day has passed while still SCHEDULED goes straight to PENDING_RESULT.
    - timeStart == timeEnd is a zero-length window: ONGOING only at that exact instant.
    - Missing times: the stored status is kept.
    - Never returns a status earlier than the stored one.
    """
    current = MatchStatus(match.status)
    if current == MatchStatus.COMPLETED:
        return MatchStatus.COMPLETED

    window = match_window(match)
    if window is None:
        return current

    start, end = window
    now = as_bangkok(now)

    if now < start:
        expected = MatchStatus.SCHEDULED
    elif now <= end:
        expected = MatchStatus.ONGOING
    else:
        expected = MatchStatus.PENDING_RESULT

    # Forward-only: an edited date/time never sends a match back
    if STATUS_ORDER[expected] < STATUS_ORDER[current]:
        return current
    return expected


def time_until_start(match: Match, now: datetime) -> Optional[timedelta]:
    if not match.time_start:
        return None
    try:
        start = local_instant(match.date, match.time_start)
    except ValueError:
        return None
    return start - as_bangkok(now)


def is_due_for_reminder(match: Match, now: datetime) -> bool:
    """
    True when a SCHEDULED match starts 24h from `now`, give or take the tolerance
    (23h55m..24h05m inclusive) and has not had its reminder yet.
    """
    if MatchStatus(match.status) != MatchStatus.SCHEDULED:
        return False
    if match.reminder_sent_at is not None:
        return False

    delta = time_until_start(match, now)
    if delta is None:
        return False
    return REMINDER_LEAD - REMINDER_TOLERANCE <= delta <= REMINDER_LEAD + REMINDER_TOLERANCE
