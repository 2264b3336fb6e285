"""Tests for POST/GET/DELETE /admin/auth."""
import pytest
from sqlalchemy.exc import OperationalError

from conftest import ADMIN_PASSWORD, ADMIN_USERNAME
from core.clock import utcnow
from database import SessionLocal
from models.admin_log import AdminLog
from models.admin_user import AdminUser
from models.rate_limit import RateLimitEntry


def _login(client, password=ADMIN_PASSWORD, username=ADMIN_USERNAME, ip="1.2.3.4"):
    return client.post(
        "/admin/auth",
        json={"username": username, "password": password},
        headers={"X-Forwarded-For": ip},
    )


def _actions():
    with SessionLocal() as session:
        return [row.action for row in session.query(AdminLog).order_by(AdminLog.id)]


@pytest.mark.asyncio
async def test_health(client):
    r = await client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_login_success_sets_cookie_and_returns_summary(client, admin_user):
    r = await _login(client)
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["user"]["id"] == admin_user.id
    assert body["user"]["username"] == ADMIN_USERNAME
    assert body["user"]["last_login"] is None  # previous login; this is the first
    assert "password_hash" not in body["user"]
    assert "salt" not in body["user"]

    token = client.cookies.get("admin_session")
    assert token is not None and len(token) == 64
    int(token, 16)

    set_cookie = r.headers["set-cookie"]
    assert "HttpOnly" in set_cookie
    assert "SameSite=strict" in set_cookie


@pytest.mark.asyncio
async def test_login_updates_last_login_and_audits(client, admin_user):
    await _login(client)
    with SessionLocal() as session:
        assert session.get(AdminUser, admin_user.id).last_login is not None
    assert _actions() == ["admin_login"]

    r = await _login(client)
    assert r.json()["user"]["last_login"] is not None


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [
    {},
    {"username": "admin"},
    {"password": "Sup3rSecret!"},
    {"username": "", "password": "Sup3rSecret!"},
])
async def test_login_missing_fields(client, payload):
    r = await client.post("/admin/auth", json=payload)
    assert r.status_code == 400
    assert r.json() == {"error": "Username and password are required"}


@pytest.mark.asyncio
async def test_login_malformed_body(client):
    r = await client.post(
        "/admin/auth",
        content=b"not json",
        headers={"Content-Type": "application/json"},
    )
    assert r.status_code == 400
    assert "error" in r.json()


@pytest.mark.asyncio
async def test_unknown_user_and_wrong_password_look_identical(client, admin_user):
    a = await _login(client, username="nobody")
    b = await _login(client, password="wrong-password")
    assert a.status_code == b.status_code == 401
    assert a.json() == b.json() == {"error": "Invalid credentials"}


@pytest.mark.asyncio
async def test_failed_login_is_not_audited(client, admin_user):
    await _login(client, password="wrong-password")
    assert _actions() == []


@pytest.mark.asyncio
async def test_inactive_user_cannot_log_in(client, admin_user):
    with SessionLocal() as session:
        session.get(AdminUser, admin_user.id).is_active = False
        session.commit()
    r = await _login(client)
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_lockout_after_five_failures(client, admin_user):
    for _ in range(5):
        r = await _login(client, password="wrong-password", ip="1.2.3.4")
        assert r.status_code == 401

    r = await _login(client, password="wrong-password", ip="1.2.3.4")
    assert r.status_code == 429
    assert r.json() == {"error": "Too many failed attempts. Try again in 15 minutes."}

    # correct credentials do not bypass the lock
    r = await _login(client, ip="1.2.3.4")
    assert r.status_code == 429

    # another address is unaffected
    r = await _login(client, password="wrong-password", ip="5.6.7.8")
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_login_succeeds_after_lock_window(client, admin_user):
    for _ in range(5):
        await _login(client, password="wrong-password")

    with SessionLocal() as session:
        entry = session.get(RateLimitEntry, "1.2.3.4")
        entry.locked_until = utcnow()
        session.commit()

    r = await _login(client)
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_success_resets_counter(client, admin_user):
    for _ in range(3):
        await _login(client, password="wrong-password")
    assert (await _login(client)).status_code == 200

    with SessionLocal() as session:
        assert session.get(RateLimitEntry, "1.2.3.4") is None

    await _login(client, password="wrong-password")
    with SessionLocal() as session:
        assert session.get(RateLimitEntry, "1.2.3.4").failed_attempts == 1


@pytest.mark.asyncio
async def test_session_check_without_cookie(client):
    r = await client.get("/admin/auth")
    assert r.status_code == 200
    assert r.json() == {"authenticated": False}


@pytest.mark.asyncio
async def test_session_check_rejects_forged_token(client, admin_user):
    client.cookies.set("admin_session", "ab" * 32)
    r = await client.get("/admin/auth")
    assert r.json() == {"authenticated": False}


@pytest.mark.asyncio
async def test_login_check_logout_scenario(client, admin_user):
    """Login → authenticated, logout → not authenticated."""
    r = await _login(client)
    assert r.status_code == 200

    r = await client.get("/admin/auth")
    assert r.json() == {"authenticated": True}

    r = await client.delete("/admin/auth")
    assert r.status_code == 200
    assert r.json() == {"success": True, "message": "Logged out successfully"}
    assert "Max-Age=0" in r.headers["set-cookie"]

    r = await client.get("/admin/auth")
    assert r.json() == {"authenticated": False}
    assert _actions() == ["admin_login", "admin_logout"]


@pytest.mark.asyncio
async def test_logged_out_token_stays_dead(client, admin_user):
    await _login(client)
    token = client.cookies.get("admin_session")
    await client.delete("/admin/auth")

    client.cookies.set("admin_session", token)
    r = await client.get("/admin/auth")
    assert r.json() == {"authenticated": False}


@pytest.mark.asyncio
async def test_logout_survives_audit_failure(client, admin_user, monkeypatch):
    """Audit is best-effort: a failing write must not block clearing the cookie."""
    def broken_add(self, instance, _warn=True):
        raise RuntimeError("disk full")

    await _login(client)
    monkeypatch.setattr("sqlalchemy.orm.Session.add", broken_add)

    r = await client.delete("/admin/auth")
    assert r.status_code == 200
    assert "Max-Age=0" in r.headers["set-cookie"]


def _store_down(self, *args, **kwargs):
    raise OperationalError("SELECT 1", {}, Exception("connection refused"))


@pytest.mark.asyncio
async def test_login_reports_unavailable_store(client, admin_user, monkeypatch):
    monkeypatch.setattr("sqlalchemy.orm.Session.execute", _store_down)
    monkeypatch.setattr("sqlalchemy.orm.Session.get", _store_down)

    r = await _login(client)
    assert r.status_code == 503
    assert r.json() == {"error": "Database not available"}
    assert client.cookies.get("admin_session") is None


@pytest.mark.asyncio
async def test_session_check_falls_back_when_store_fails(client, admin_user, monkeypatch):
    assert (await _login(client)).status_code == 200
    monkeypatch.setattr("sqlalchemy.orm.Session.execute", _store_down)

    r = await client.get("/admin/auth")
    assert r.status_code == 200
    assert r.json() == {"authenticated": False}
