from ensport_backend.models.activity_log_model import ActivityAction
from ensport_backend.models.user_model import UserRole
from ensport_backend.services.activity_logger import log_activity


async def seed_logs(db):
    entries = [
        ("admin", "ADMIN", ActivityAction.LOGIN, "admin logged in"),
        ("admin", "ADMIN", ActivityAction.UPLOAD_BANNER, "banner.png"),
        ("fb", "SPORT_MANAGER", ActivityAction.CREATE_MATCH, "Engineering vs Science (Football)"),
        ("fb", "SPORT_MANAGER", ActivityAction.UPDATE_MATCH_SCORE, "Engineering vs Science (Football)"),
        ("fan@kku.ac.th", "GUEST", ActivityAction.EMAIL_SUBSCRIBE, "Subscribed with fan@kku.ac.th"),
    ]
    for user_name, role, action, target in entries:
        await log_activity(db, user_id=user_name, user_name=user_name, user_role=role, action=action, target=target)


async def test_logs_listing_and_filters(client, db, create_user, auth_headers):
    headers = auth_headers(await create_user())
    await seed_logs(db)

    everything = (await client.get("/logs", headers=headers)).json()
    assert everything["total"] == 5
    assert everything["logs"][0]["action"] == "EMAIL_SUBSCRIBE"

    matches = (await client.get("/logs", params={"filter": "match"}, headers=headers)).json()
    assert {e["action"] for e in matches["logs"]} == {"CREATE_MATCH", "UPDATE_MATCH_SCORE"}

    searched = (await client.get("/logs", params={"search": "BANNER"}, headers=headers)).json()
    assert [e["target"] for e in searched["logs"]] == ["banner.png"]

    by_role = (await client.get("/logs", params={"search": "sport_manager"}, headers=headers)).json()
    assert by_role["total"] == 2


async def test_logs_pagination(client, db, create_user, auth_headers):
    headers = auth_headers(await create_user())
    await seed_logs(db)

    page_one = (await client.get("/logs", params={"page": 1, "limit": 2}, headers=headers)).json()
    page_three = (await client.get("/logs", params={"page": 3, "limit": 2}, headers=headers)).json()

    assert (page_one["total_pages"], page_one["has_more"], len(page_one["logs"])) == (3, True, 2)
    assert (page_three["has_more"], len(page_three["logs"])) == (False, 1)


async def test_logs_errors(client, create_user, auth_headers):
    admin_headers = auth_headers(await create_user())
    editor = await create_user("editor", role=UserRole.EDITOR)

    assert (await client.get("/logs", params={"filter": "unknown"}, headers=admin_headers)).status_code == 400
    assert (await client.get("/logs", params={"page": 0}, headers=admin_headers)).status_code == 400
    assert (await client.get("/logs", headers=auth_headers(editor))).status_code == 403
