import datetime as dt

import pytest
import pytz

from ensport_backend.models.match_model import Match, MatchStatus
from ensport_backend.services.match_status import evaluate_status, is_due_for_reminder, match_window
from tests.conftest import bangkok


def make_match(**overrides):
    values = {
        "sport_type": "Football",
        "team1": "Engineering",
        "team2": "Science",
        "date": dt.date(2025, 12, 26),
        "time_start": "09:00",
        "time_end": "10:00",
        "location": "KKU Main Stadium",
        "maps_link": "https://maps.example/kku-stadium",
        "status": MatchStatus.SCHEDULED,
    }
    values.update(overrides)
    return Match(**values)


@pytest.mark.parametrize("now, expected", [
    (bangkok(2025, 12, 25, 23, 59), MatchStatus.SCHEDULED),
    (bangkok(2025, 12, 26, 8, 59), MatchStatus.SCHEDULED),
    (bangkok(2025, 12, 26, 9, 0), MatchStatus.ONGOING),
    (bangkok(2025, 12, 26, 9, 30), MatchStatus.ONGOING),
    (bangkok(2025, 12, 26, 10, 0), MatchStatus.ONGOING),
    (bangkok(2025, 12, 26, 10, 1), MatchStatus.PENDING_RESULT),
])
def test_status_follows_the_match_window(now, expected):
    assert evaluate_status(make_match(), now) == expected


def test_scheduled_match_on_a_past_day_goes_straight_to_pending_result():
    match = make_match(status=MatchStatus.SCHEDULED)
    assert evaluate_status(match, bangkok(2025, 12, 28, 12, 0)) == MatchStatus.PENDING_RESULT


def test_zero_length_window_is_ongoing_only_at_that_instant():
    match = make_match(time_start="09:00", time_end="09:00")
    assert evaluate_status(match, bangkok(2025, 12, 26, 8, 59)) == MatchStatus.SCHEDULED
    assert evaluate_status(match, bangkok(2025, 12, 26, 9, 0)) == MatchStatus.ONGOING
    assert evaluate_status(match, bangkok(2025, 12, 26, 9, 1)) == MatchStatus.PENDING_RESULT


@pytest.mark.parametrize("field", ["time_start", "time_end"])
def test_missing_time_keeps_stored_status(field):
    match = make_match(status=MatchStatus.ONGOING, **{field: None})
    assert match_window(match) is None
    assert evaluate_status(match, bangkok(2025, 12, 30, 12, 0)) == MatchStatus.ONGOING


def test_unparseable_time_keeps_stored_status():
    match = make_match(time_start="nine")
    assert evaluate_status(match, bangkok(2025, 12, 26, 9, 30)) == MatchStatus.SCHEDULED


def test_completed_is_terminal():
    match = make_match(status=MatchStatus.COMPLETED)
    assert evaluate_status(match, bangkok(2025, 12, 25, 8, 0)) == MatchStatus.COMPLETED
    assert evaluate_status(match, bangkok(2025, 12, 26, 9, 30)) == MatchStatus.COMPLETED


def test_status_never_moves_backwards():
    # An ONGOING match rescheduled to next week stays ONGOING
    match = make_match(status=MatchStatus.ONGOING, date=dt.date(2026, 1, 2))
    assert evaluate_status(match, bangkok(2025, 12, 26, 9, 30)) == MatchStatus.ONGOING

    match = make_match(status=MatchStatus.PENDING_RESULT)
    assert evaluate_status(match, bangkok(2025, 12, 26, 9, 30)) == MatchStatus.PENDING_RESULT


def test_naive_now_is_bangkok_wall_clock():
    assert evaluate_status(make_match(), dt.datetime(2025, 12, 26, 9, 30)) == MatchStatus.ONGOING


def test_aware_now_in_another_zone_is_converted():
    utc_now = pytz.utc.localize(dt.datetime(2025, 12, 26, 2, 30))  # 09:30 in Bangkok
    assert evaluate_status(make_match(), utc_now) == MatchStatus.ONGOING


# ---------------------------------------------
# Reminder window
# ---------------------------------------------

@pytest.mark.parametrize("now, due", [
    (bangkok(2025, 12, 25, 8, 54), False),   # 24h06m ahead
    (bangkok(2025, 12, 25, 8, 55), True),    # 24h05m, inclusive
    (bangkok(2025, 12, 25, 9, 2), True),
    (bangkok(2025, 12, 25, 9, 5), True),     # 23h55m, inclusive
    (bangkok(2025, 12, 25, 9, 6), False),
    (bangkok(2025, 12, 25, 9, 20), False),
])
def test_reminder_window(now, due):
    assert is_due_for_reminder(make_match(), now) is due


def test_reminder_not_due_once_sent():
    match = make_match(reminder_sent_at=dt.datetime(2025, 12, 25, 2, 0, tzinfo=dt.timezone.utc))
    assert is_due_for_reminder(match, bangkok(2025, 12, 25, 9, 2)) is False


def test_reminder_only_for_scheduled_matches():
    match = make_match(status=MatchStatus.ONGOING)
    assert is_due_for_reminder(match, bangkok(2025, 12, 25, 9, 2)) is False
