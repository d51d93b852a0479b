from ensport_backend.models.user_model import UserRole


async def test_admin_creates_and_lists_users(client, create_user, auth_headers):
    headers = auth_headers(await create_user())

    response = await client.post(
        "/admin/users",
        json={"username": "fb", "password": "pw123456", "role": "SPORT_MANAGER", "sport_type": "Football"},
        headers=headers,
    )
    assert response.status_code == 201
    user = response.json()["user"]
    assert user["role"] == "SPORT_MANAGER"
    assert "password_hash" not in user

    default_role = await client.post("/admin/users", json={"username": "plain", "password": "pw"}, headers=headers)
    assert default_role.json()["user"]["role"] == "USER"

    listing = await client.get("/admin/users", headers=headers)
    assert {u["username"] for u in listing.json()["users"]} == {"admin", "fb", "plain"}

    login = await client.post("/auth/login", json={"username": "fb", "password": "pw123456"})
    assert login.status_code == 200


async def test_create_user_validation(client, create_user, auth_headers):
    headers = auth_headers(await create_user())

    assert (await client.post("/admin/users", json={"username": "x"}, headers=headers)).status_code == 400
    duplicate = await client.post("/admin/users", json={"username": "admin", "password": "pw"}, headers=headers)
    assert duplicate.status_code == 400


async def test_update_user(client, create_user, auth_headers):
    headers = auth_headers(await create_user())
    target = await create_user("editor", role=UserRole.EDITOR)
    await create_user("taken", role=UserRole.USER)

    clash = await client.put(f"/admin/users/{target.id}", json={"username": "taken"}, headers=headers)
    assert clash.status_code == 400

    response = await client.put(
        f"/admin/users/{target.id}",
        json={"password": "new-password", "role": "SPORT_MANAGER", "sport_type": "Chess", "is_active": True},
        headers=headers,
    )
    assert response.status_code == 200
    assert response.json()["user"]["sport_type"] == "Chess"

    old = await client.post("/auth/login", json={"username": "editor", "password": "password123"})
    new = await client.post("/auth/login", json={"username": "editor", "password": "new-password"})
    assert old.status_code == 401
    assert new.status_code == 200


async def test_delete_user(client, create_user, auth_headers):
    admin = await create_user()
    headers = auth_headers(await create_user("second-admin"))
    target = await create_user("editor", role=UserRole.EDITOR)

    assert (await client.delete(f"/admin/users/{target.id}", headers=headers)).status_code == 200
    assert (await client.get(f"/admin/users/{target.id}", headers=headers)).status_code == 404

    protected = await client.delete(f"/admin/users/{admin.id}", headers=headers)
    assert protected.status_code == 403


async def test_user_admin_is_admin_only(client, create_user, auth_headers):
    manager = await create_user("fb", role=UserRole.SPORT_MANAGER, sport_type="Football")
    assert (await client.get("/admin/users", headers=auth_headers(manager))).status_code == 403
    assert (await client.get("/admin/users")).status_code == 401
