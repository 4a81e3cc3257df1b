"""
Tests for registration, login and the role home redirect
"""
import pytest


REGISTRATION = {
    "name": "New Citizen",
    "email": "New.Citizen@Example.org",
    "password": "pw-123456",
    "confirm_password": "pw-123456",
    "national_id": "NID-1",
    "dob": "1990-04-01",
    "contact_info": "555-0100",
}


def register(client, **overrides):
    return client.post("/auth/register", json={**REGISTRATION, **overrides})


def test_register_creates_citizen(client, db):
    res = register(client)

    assert res.status_code == 200
    body = res.json()
    assert body["outcome"]["kind"] == "success"
    assert body["redirect"] == "/auth/login"
    assert body["data"]["role"] == "citizen"
    assert body["data"]["email"] == "new.citizen@example.org"
    assert "password_hash" not in body["data"]

    stored = [u for u in db["users"].docs if u["email"] == "new.citizen@example.org"][0]
    assert stored["password_hash"] and stored["password_hash"] != "pw-123456"


def test_register_rejects_mismatched_passwords(client):
    res = register(client, confirm_password="different")
    assert res.status_code == 400
    assert res.json()["outcome"]["message"] == "Passwords do not match"


def test_register_requires_name(client):
    res = register(client, name="   ")
    assert res.status_code == 400
    assert res.json()["redirect"] == "/auth/register"


def test_register_duplicate_email(client):
    assert register(client).status_code == 200
    res = register(client, email="new.citizen@example.org")
    assert res.status_code == 409
    assert res.json()["outcome"]["message"] == "Email already registered"


def test_login_returns_token_and_home(client):
    register(client)

    res = client.post("/auth/login", json={"email": "new.citizen@example.org", "password": "pw-123456"})

    assert res.status_code == 200
    body = res.json()
    assert body["redirect"] == "/citizen"
    assert body["data"]["home"] == "/citizen"
    assert body["data"]["user"]["name"] == "New Citizen"

    token = body["data"]["token"]
    dash = client.get("/dashboard", headers={"Authorization": f"Bearer {token}"})
    assert dash.status_code == 200
    assert dash.json()["redirect"] == "/citizen"


@pytest.mark.parametrize("email,password", [
    ("new.citizen@example.org", "wrong"),
    ("nobody@example.org", "pw-123456"),
])
def test_login_failure_is_unauthenticated(client, email, password):
    register(client)
    res = client.post("/auth/login", json={"email": email, "password": password})
    assert res.status_code == 401
    assert res.json()["outcome"]["message"] == "Invalid email or password"


def test_seeded_user_without_password_cannot_log_in(client):
    res = client.post("/auth/login", json={"email": "ada@example.org", "password": ""})
    assert res.status_code == 401


def test_guest_only_routes_reject_logged_in_users(client, auth, citizen):
    res = client.post("/auth/login", json={"email": "x@example.org", "password": "x"}, headers=auth(citizen))
    assert res.status_code == 409
    body = res.json()
    assert body["outcome"]["kind"] == "info"
    assert body["redirect"] == "/dashboard"

    assert register(client).status_code == 200
    again = client.post("/auth/register", json=REGISTRATION, headers=auth(citizen))
    assert again.status_code == 409


@pytest.mark.parametrize("fixture_name,home", [
    ("citizen", "/citizen"),
    ("officer", "/dashboard/officer"),
    ("head", "/dashboard/officer"),
    ("admin", "/admin"),
])
def test_dashboard_redirects_to_role_home(client, auth, request, fixture_name, home):
    principal = request.getfixturevalue(fixture_name)
    res = client.get("/dashboard", headers=auth(principal))
    assert res.status_code == 200
    assert res.json()["redirect"] == home
    assert res.json()["data"]["user"]["id"] == principal.id


def test_dashboard_requires_login(client):
    res = client.get("/dashboard")
    assert res.status_code == 401
    assert res.json()["redirect"] == "/auth/login"


def test_invalid_token_counts_as_anonymous(client):
    res = client.get("/dashboard", headers={"Authorization": "Bearer garbage"})
    assert res.status_code == 401


def test_logout(client, auth, admin):
    res = client.post("/auth/logout", headers=auth(admin))
    assert res.status_code == 200
    assert res.json()["redirect"] == "/auth/login"
