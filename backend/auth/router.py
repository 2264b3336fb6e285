# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261018v1
# ---------------------------------------------------------------------------
"""
Admin auth endpoints – login, session check, logout, first-run setup.

Security notes
--------------
* Login returns the *same* error message whether the username doesn't exist
  or the password is wrong, and both paths run the full key derivation, so
  neither the body nor the latency reveals which one happened.
* Only wrong passwords for a real account count towards the per-address
  lockout; unknown usernames are rejected without touching the counter.
* The session check never fails towards the caller: any problem while
  resolving the cookie is reported as ``authenticated: false``.
* Audit writes are best-effort and never fail the request.
"""

import secrets

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from database import get_db
from core import audit, rate_limit
from core.config import settings
from core.credentials import count_active, create_admin_user, get_active_user, mark_login
from core.errors import AuthError, RateLimited, ServiceUnavailable, ValidationError, translate_errors
from core.logger import logger
from core.security import authenticate, get_client_ip
from core.session import SESSION_COOKIE, attach, clear, end_session, resolve_session, start_session
from auth.schemas import (
    CreatedUser,
    LoginRequest,
    LoginResponse,
    LogoutResponse,
    SessionStatusResponse,
    SetupRequest,
    SetupResponse,
    SetupStatusResponse,
    UserSummary,
)

router = APIRouter(prefix="/admin", tags=["auth"])

# Generic message used for both "no such user" and "wrong password"
_LOGIN_FAIL = "Invalid credentials"


# ---------------------------------------------------------------------------
# POST /admin/auth  – log in
# ---------------------------------------------------------------------------


@router.post("/auth", response_model=LoginResponse)
def login(
    body: LoginRequest,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
):
    """Authenticate the operator and set the ``admin_session`` cookie."""
    with translate_errors("Authentication failed"):
        if not body.username or not body.password:
            raise ValidationError("Username and password are required")

        client_ip = get_client_ip(request)

        decision = rate_limit.check(db, client_ip)
        if not decision.allowed:
            logger.warning("Login refused for locked-out address %s", client_ip)
            raise RateLimited(decision.retry_after_minutes)

        user = get_active_user(db, body.username)

        # Unified failure path – the hash runs even when the user is missing
        if not authenticate(user, body.password):
            if user is not None:
                rate_limit.record_failure(db, client_ip)
            logger.warning("Failed admin login from %s", client_ip)
            raise AuthError(_LOGIN_FAIL)

        previous_login = user.last_login

        rate_limit.reset(db, client_ip)
        mark_login(db, user)
        token = start_session(db, user)
        attach(response, token)

        audit.record(db, request, "admin_login", {"username": user.username})
        logger.info("Admin '%s' logged in from %s", user.username, client_ip)

        return LoginResponse(
            user=UserSummary(id=user.id, username=user.username, last_login=previous_login),
        )


# ---------------------------------------------------------------------------
# GET /admin/auth  – session check
# ---------------------------------------------------------------------------


@router.get("/auth", response_model=SessionStatusResponse)
def session_status(request: Request, db: Session = Depends(get_db)):
    """Report whether the request carries a live admin session."""
    try:
        user = resolve_session(db, request.cookies.get(SESSION_COOKIE))
    except Exception:
        logger.warning("Session check failed; reporting unauthenticated", exc_info=True)
        return SessionStatusResponse(authenticated=False)
    return SessionStatusResponse(authenticated=user is not None)


# ---------------------------------------------------------------------------
# DELETE /admin/auth  – log out
# ---------------------------------------------------------------------------


@router.delete("/auth", response_model=LogoutResponse)
def logout(request: Request, response: Response, db: Session = Depends(get_db)):
    """Revoke the current session (if any) and expire the cookie."""
    with translate_errors("Logout failed"):
        try:
            end_session(db, request.cookies.get(SESSION_COOKIE))
        except Exception:
            db.rollback()
            logger.error("Could not revoke session row during logout", exc_info=True)

        audit.record(db, request, "admin_logout", {})
        clear(response)
        return LogoutResponse()


# ---------------------------------------------------------------------------
# POST /admin/setup  – create an admin account with the operator's setup key
# ---------------------------------------------------------------------------


@router.post("/setup", response_model=SetupResponse)
def setup(body: SetupRequest, request: Request, db: Session = Depends(get_db)):
    """
    Create an admin user.  Permanently disabled while ``ADMIN_SETUP_KEY`` is
    unset; otherwise the supplied ``setupKey`` must match it exactly.
    """
    with translate_errors("Failed to create admin user"):
        if not settings.admin_setup_key:
            raise ServiceUnavailable("Admin setup is disabled - no setup key configured")

        supplied = (body.setup_key or "").encode("utf-8")
        if not secrets.compare_digest(supplied, settings.admin_setup_key.encode("utf-8")):
            logger.warning("Admin setup attempted with a bad key from %s", get_client_ip(request))
            raise AuthError("Invalid setup key")

        if not body.username or not body.password:
            raise ValidationError("Username and password are required")

        user = create_admin_user(db, body.username, body.password)

        audit.record(db, request, "admin_user_created", {"username": user.username})
        logger.info("Admin user '%s' created via setup", user.username)

        return SetupResponse(user=CreatedUser(username=user.username))


# ---------------------------------------------------------------------------
# GET /admin/setup  – does any admin exist yet?
# ---------------------------------------------------------------------------


@router.get("/setup", response_model=SetupStatusResponse)
def setup_status(db: Session = Depends(get_db)):
    with translate_errors("Failed to check admin users"):
        count = count_active(db)
        return SetupStatusResponse(has_admin_user=count > 0, admin_count=count)
