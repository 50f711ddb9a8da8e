import logging
from datetime import timedelta

from eth_utils import is_checksum_address

from datavault.core.limits import SimpleRateLimiter, login_key
from datavault.utils.auth import create_access_token


def test_registration_is_case_insensitive(client):
    payload = {"name": "Test", "email": "TEST1@TEST.COM", "password": "strongpass"}
    r = client.post("/api/auth/register", json=payload)
    assert r.status_code == 200
    assert r.json()["token_type"] == "bearer"

    me = client.get("/api/auth/user", headers={"Authorization": f"Bearer {r.json()['access_token']}"})
    assert me.json()["email"] == "test1@test.com"

    r2 = client.post(
        "/api/auth/register",
        json={"name": "Test", "email": "test1@test.com", "password": "strongpass"},
    )
    assert r2.status_code == 400
    assert r2.json()["error"]["message"] == "User already exists"


def test_login_is_case_insensitive(client, register):
    register("test1@test.com")

    r = client.post("/api/auth/login", data={"username": "TEST1@TEST.COM", "password": "strongpass"})
    assert r.status_code == 200
    assert "access_token" in r.json()

    r = client.post("/api/auth/login", data={"username": "test1@test.com", "password": "wrongpass"})
    assert r.status_code == 401


def test_register_validation(client):
    assert client.post(
        "/api/auth/register", json={"name": "A", "email": "a@test.com", "password": "123"}
    ).status_code == 400
    assert client.post(
        "/api/auth/register", json={"email": "a@test.com", "password": "strongpass"}
    ).status_code == 400
    assert client.post(
        "/api/auth/register",
        json={"name": "A", "email": "a@test.com", "password": "strongpass", "walletAddress": "0x123"},
    ).status_code == 400


def test_password_limit_counts_utf8_bytes(client):
    # 40 characters but 80 bytes, past what bcrypt accepts
    r = client.post(
        "/api/auth/register",
        json={"name": "Z", "email": "z@test.com", "password": "\u017e" * 40},
    )
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "validation_error"

    r = client.post(
        "/api/auth/register",
        json={"name": "Z", "email": "z@test.com", "password": "\u017e" * 36},
    )
    assert r.status_code == 200

    token = r.json()["access_token"]
    r = client.put(
        "/api/users/password",
        json={"currentPassword": "\u017e" * 36, "newPassword": "\u00e9" * 40},
        headers={"Authorization": f"Bearer {token}"},
    )
    assert r.status_code == 400


def test_wallet_address_generated_or_kept(client, register):
    headers, _ = register("gen@test.com")
    generated = client.get("/api/users/me", headers=headers).json()["walletAddress"]
    assert is_checksum_address(generated)

    wallet = "0x52908400098527886E0F7030069857D2E4169EE7"
    r = client.post(
        "/api/auth/register",
        json={"name": "B", "email": "b@test.com", "password": "strongpass", "walletAddress": wallet},
    )
    me = client.get("/api/auth/user", headers={"Authorization": f"Bearer {r.json()['access_token']}"})
    assert me.json()["walletAddress"] == wallet
    assert "password_hash" not in me.json()


def test_expired_or_foreign_tokens_rejected(client, register):
    _, user_id = register("a@test.com")

    expired = create_access_token({"sub": user_id}, expires_delta=timedelta(minutes=-1))
    r = client.get("/api/auth/user", headers={"Authorization": f"Bearer {expired}"})
    assert r.status_code == 401

    unknown = create_access_token({"sub": "6f1c8a4e-0000-4000-8000-000000000000"})
    r = client.get("/api/auth/user", headers={"Authorization": f"Bearer {unknown}"})
    assert r.status_code == 401


def test_update_profile_and_password(client, register):
    headers, _ = register("a@test.com", name="Before")

    r = client.put("/api/users/profile", json={"name": "After"}, headers=headers)
    assert r.status_code == 200
    assert r.json()["name"] == "After"

    r = client.put("/api/users/profile", json={"walletAddress": "nope"}, headers=headers)
    assert r.status_code == 400

    r = client.put(
        "/api/users/password",
        json={"currentPassword": "wrongpass", "newPassword": "newstrongpass"},
        headers=headers,
    )
    assert r.status_code == 400

    r = client.put(
        "/api/users/password",
        json={"currentPassword": "strongpass", "newPassword": "newstrongpass"},
        headers=headers,
    )
    assert r.status_code == 200

    r = client.post("/api/auth/login", data={"username": "a@test.com", "password": "newstrongpass"})
    assert r.status_code == 200


def test_login_rate_limited(client, register, monkeypatch):
    from datavault.routes import auth

    register("a@test.com")
    monkeypatch.setattr(auth, "login_limiter", SimpleRateLimiter(limit=2, window_seconds=60))

    for _ in range(2):
        r = client.post("/api/auth/login", data={"username": "a@test.com", "password": "bad"})
        assert r.status_code == 401
    r = client.post("/api/auth/login", data={"username": "a@test.com", "password": "strongpass"})
    assert r.status_code == 429
    assert r.json()["error"]["code"] == "rate_limited"


def test_rate_limiter_window(monkeypatch):
    import time

    clock = [1000.0]
    monkeypatch.setattr(time, "time", lambda: clock[0])
    limiter = SimpleRateLimiter(limit=2, window_seconds=60)
    key = login_key("127.0.0.1", "A@Test.com")

    assert key == ("127.0.0.1", "a@test.com")
    assert limiter.allow(key)
    assert limiter.allow(key)
    assert not limiter.allow(key)
    assert limiter.allow(login_key("10.0.0.1", "a@test.com"))

    clock[0] += 61
    assert limiter.allow(key)


def test_health(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"
    assert r.json()["database"] == "connected"


def test_lifespan_logs_start_and_stop(caplog):
    from fastapi.testclient import TestClient

    from datavault.main import app

    caplog.set_level(logging.INFO, logger="datavault.main")
    with TestClient(app):
        pass
    messages = [r.getMessage() for r in caplog.records if r.name == "datavault.main"]
    assert any("starting up" in m for m in messages)
    assert any("shutting down" in m for m in messages)
