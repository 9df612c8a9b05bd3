from datetime import datetime, timedelta, timezone

from portal.db.models import Member


def register(client, email="new@memberportal.org", password="Passw0rd!"):
    return client.post(
        "/auth/register",
        json={
            "name": "New Member",
            "email": email,
            "password": password,
            "confirm_password": password,
            "agency_name": "Acme Agency",
        },
    )


def login(client, email="new@memberportal.org", password="Passw0rd!"):
    return client.post("/auth/login", json={"email": email, "password": password})


def test_register_starts_at_free_member(client):
    response = register(client)

    assert response.status_code == 201
    assert response.json()["tier"] == "Free Member"


def test_register_rejects_duplicates_and_weak_passwords(client):
    assert register(client).status_code == 201
    assert register(client).status_code == 400
    assert register(client, email="weak@memberportal.org", password="password").status_code == 422


def test_login_and_me(client):
    register(client)
    token = login(client).json()["access_token"]

    response = client.get("/me/", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json()["tier"] == "Free Member"
    assert response.json()["agency_name"] == "Acme Agency"


def test_login_is_enumeration_safe(client):
    register(client)
    assert login(client, password="Wrong0ne!").status_code == 400
    assert login(client, email="nobody@memberportal.org").status_code == 400


def test_login_rate_limited(client):
    register(client)
    codes = [login(client, password="Wrong0ne!").status_code for _ in range(6)]
    assert codes[:5] == [400] * 5
    assert codes[5] == 429


def test_me_reports_canonical_tier(client, auth_headers):
    response = client.get("/me/", headers=auth_headers("gold member (tier 3)"))
    assert response.json()["tier"] == "Gold Member"


def test_me_update_does_not_touch_tier(client, auth_headers):
    headers = auth_headers("Associate Member")

    response = client.patch("/me/", json={"name": "  Renamed  ", "country": "Kenya"}, headers=headers)

    assert response.status_code == 200
    assert response.json()["name"] == "Renamed"
    assert response.json()["country"] == "Kenya"
    assert response.json()["tier"] == "Associate Member"


def test_upgrade_options(client, auth_headers):
    body = client.get("/me/upgrade-options", headers=auth_headers("Free Member")).json()
    assert body == {
        "current_tier": "Free Member",
        "upgrade_options": ["Associate Member", "Full Member", "Gold Member"],
    }

    body = client.get("/me/upgrade-options", headers=auth_headers("Gold Member")).json()
    assert body["upgrade_options"] == []


def test_change_password(client):
    register(client)
    headers = {"Authorization": f"Bearer {login(client).json()['access_token']}"}

    bad = client.post(
        "/me/change-password",
        json={"old_password": "nope", "new_password": "N3wpass!!"},
        headers=headers,
    )
    assert bad.status_code == 400

    ok = client.post(
        "/me/change-password",
        json={"old_password": "Passw0rd!", "new_password": "N3wpass!!"},
        headers=headers,
    )
    assert ok.status_code == 200
    assert login(client, password="N3wpass!!").status_code == 200


def test_password_reset_flow(client, db):
    register(client)

    assert client.post("/auth/request-password-reset", json={"email": "new@memberportal.org"}).json() == {"status": "ok"}
    assert client.post("/auth/request-password-reset", json={"email": "ghost@memberportal.org"}).json() == {"status": "ok"}

    member = db.query(Member).filter(Member.email == "new@memberportal.org").one()
    code = member.password_reset_code
    assert code and len(code) == 6

    wrong = client.post(
        "/auth/reset-password",
        json={"email": "new@memberportal.org", "code": "xxxxxx", "new_password": "R3set!pass"},
    )
    assert wrong.status_code == 400

    ok = client.post(
        "/auth/reset-password",
        json={"email": "new@memberportal.org", "code": code, "new_password": "R3set!pass"},
    )
    assert ok.status_code == 200
    assert login(client, password="R3set!pass").status_code == 200


def test_expired_reset_code(client, db):
    register(client)
    member = db.query(Member).filter(Member.email == "new@memberportal.org").one()
    member.password_reset_code = "123456"
    member.password_reset_expires = datetime.now(timezone.utc) - timedelta(minutes=1)
    db.commit()

    response = client.post(
        "/auth/reset-password",
        json={"email": "new@memberportal.org", "code": "123456", "new_password": "R3set!pass"},
    )
    assert response.status_code == 400


def test_admin_token_cannot_read_member_routes(client, admin_headers):
    response = client.get("/me/", headers=admin_headers)
    assert response.status_code == 403


def test_garbage_token(client):
    response = client.get("/me/", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
