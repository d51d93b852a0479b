from ensport_backend.main import app
from ensport_backend.models.match_model import MatchStatus
from ensport_backend.routes.scheduler_routes import get_scheduler_secret
from tests.conftest import bangkok


async def test_check_reminders(client, mailer, create_match, create_subscriber):
    await create_subscriber()
    match = await create_match()

    response = await client.get("/scheduler/check-reminders")

    assert response.status_code == 200
    body = response.json()
    assert body["current_time"] == "2025-12-25 09:02"
    assert body["total_matches"] == 1
    assert body["results"][0]["match_id"] == match.id

    again = await client.post("/scheduler/check-reminders")
    assert again.json()["total_matches"] == 0
    assert again.json()["message"] == "No matches need reminders"
    assert len(mailer.sent) == 1


async def test_tick_updates_statuses_before_reminders(client, clock, db, mailer, create_match, create_subscriber):
    await create_subscriber()
    finished = await create_match(date=bangkok(2025, 12, 24).date())
    tomorrow = await create_match(date=bangkok(2025, 12, 27).date(), time_start="18:00", time_end="19:00")
    clock.now = bangkok(2025, 12, 26, 18, 0)

    body = (await client.post("/scheduler/tick")).json()

    assert body["status_changes"] == [{"match_id": finished.id, "from": "SCHEDULED", "to": "PENDING_RESULT"}]
    assert [r["match_id"] for r in body["reminders"]["results"]] == [tomorrow.id]
    await db.refresh(finished)
    assert finished.status == MatchStatus.PENDING_RESULT


async def test_update_statuses(client, clock, create_match):
    await create_match()
    clock.now = bangkok(2025, 12, 26, 9, 45)

    body = (await client.post("/scheduler/update-statuses")).json()
    assert body["updated"] == 1


async def test_scheduler_secret(client):
    app.dependency_overrides[get_scheduler_secret] = lambda: "cron-secret"

    assert (await client.post("/scheduler/tick")).status_code == 401
    assert (await client.post("/scheduler/tick", headers={"X-Scheduler-Token": "wrong"})).status_code == 401
    assert (await client.post("/scheduler/tick", headers={"X-Scheduler-Token": "cron-secret"})).status_code == 200
