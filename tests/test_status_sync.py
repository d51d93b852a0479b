import json

from sqlmodel import select

from ensport_backend.models.activity_log_model import ActivityLog, ActivityAction
from ensport_backend.models.match_model import MatchStatus
from ensport_backend.services.match_service import sync_statuses
from tests.conftest import bangkok


async def test_sync_persists_changed_statuses(db, create_match):
    ongoing = await create_match()
    later = await create_match(time_start="15:00", time_end="16:00")
    done = await create_match(status=MatchStatus.COMPLETED, home_score=1, away_score=0)

    changes = await sync_statuses(db, bangkok(2025, 12, 26, 9, 30))

    assert changes == [{"match_id": ongoing.id, "from": "SCHEDULED", "to": "ONGOING"}]
    for match in (ongoing, later, done):
        await db.refresh(match)
    assert ongoing.status == MatchStatus.ONGOING
    assert later.status == MatchStatus.SCHEDULED
    assert done.status == MatchStatus.COMPLETED


async def test_sync_logs_system_entries(db, create_match):
    match = await create_match()

    await sync_statuses(db, bangkok(2025, 12, 26, 11, 0))

    entries = (await db.execute(select(ActivityLog))).scalars().all()
    assert len(entries) == 1
    assert entries[0].action == ActivityAction.UPDATE_MATCH_STATUS.value
    assert entries[0].user_name == "scheduler"
    assert entries[0].target_id == match.id
    assert json.loads(entries[0].details) == {"previous_status": "SCHEDULED", "new_status": "PENDING_RESULT"}


async def test_sync_is_idempotent(db, create_match):
    await create_match()

    first = await sync_statuses(db, bangkok(2025, 12, 26, 9, 30))
    second = await sync_statuses(db, bangkok(2025, 12, 26, 9, 31))

    assert len(first) == 1
    assert second == []
