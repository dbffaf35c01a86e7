from datetime import timedelta

from coursehub.core.security import create_access_token


def test_register_login_me(client):
    r = client.post(
        "/auth/register",
        json={"email": "New.User@Example.com", "password": "supersecret", "full_name": "New User"},
    )
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["email"] == "new.user@example.com"
    assert body["role"] == "student"
    assert "hashed_password" not in body

    r = client.post("/auth/login", json={"email": "new.user@example.com", "password": "supersecret"})
    assert r.status_code == 200, r.text
    token = r.json()["access_token"]
    assert r.json()["token_type"] == "bearer"

    r = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200
    assert r.json()["email"] == "new.user@example.com"


def test_register_instructor(client):
    r = client.post(
        "/auth/register",
        json={"email": "prof@example.com", "password": "supersecret", "role": "instructor"},
    )
    assert r.status_code == 201
    assert r.json()["role"] == "instructor"


def test_register_rejects_unknown_role(client):
    r = client.post(
        "/auth/register",
        json={"email": "root@example.com", "password": "supersecret", "role": "admin"},
    )
    assert r.status_code == 422


def test_register_duplicate_email(client):
    r = client.post(
        "/auth/register",
        json={"email": "STUDENT1@example.com", "password": "supersecret"},
    )
    assert r.status_code == 400
    assert r.json()["detail"] == "Email already registered"


def test_login_wrong_password(client):
    r = client.post("/auth/login", json={"email": "student1@example.com", "password": "nope-nope"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid email or password"


def test_login_unknown_email(client):
    r = client.post("/auth/login", json={"email": "ghost@example.com", "password": "password123"})
    assert r.status_code == 401


def test_me_requires_token(client):
    assert client.get("/auth/me").status_code == 401


def test_garbage_token_is_rejected(client):
    r = client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401


def test_expired_token_is_rejected(client, seed):
    token = create_access_token({"sub": str(seed["student1"])}, expires_delta=timedelta(seconds=-5))
    r = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Token has expired"


def test_token_for_deleted_user_is_rejected(client):
    token = create_access_token({"sub": "999999"})
    r = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401


def test_protected_routes_require_auth(client, seed):
    assert client.get("/courses/").status_code == 401
    assert client.get(f"/courses/{seed['cs101']}/gradebook").status_code == 401


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
