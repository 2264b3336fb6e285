# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261018v1
# ---------------------------------------------------------------------------
"""
Session issuer.

Tokens are 256 random bits, hex-encoded, carried in the ``admin_session``
cookie.  Each issued token is also recorded (as its SHA-256) in
``admin_sessions`` so that the session check can reject tokens that were
never handed out, or have expired, or were logged out.
"""

import hashlib
import re
import secrets
from datetime import datetime, timedelta
from typing import Optional

from fastapi import Response
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from core.clock import as_utc, utcnow
from core.config import settings
from models.admin_session import AdminSession
from models.admin_user import AdminUser

SESSION_COOKIE = "admin_session"
SESSION_TTL = timedelta(hours=24)
TOKEN_BYTES = 32

_TOKEN_RE = re.compile(r"[0-9a-fA-F]{64}")


def issue_token() -> str:
    return secrets.token_hex(TOKEN_BYTES)


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("ascii")).hexdigest()


def is_well_formed(token: Optional[str]) -> bool:
    """Present and exactly 64 hex characters."""
    return bool(token) and _TOKEN_RE.fullmatch(token) is not None


def attach(response: Response, token: str) -> None:
    response.set_cookie(
        SESSION_COOKIE,
        token,
        max_age=int(SESSION_TTL.total_seconds()),
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
    )


def clear(response: Response) -> None:
    response.set_cookie(
        SESSION_COOKIE,
        "",
        max_age=0,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
    )


# -- Server-side records -----------------------------------------------------


def start_session(db: Session, user: AdminUser, now: Optional[datetime] = None) -> str:
    """Mint a token for *user*, persist its hash, and return the raw token."""
    now = now or utcnow()
    token = issue_token()
    db.add(AdminSession(
        token_hash=hash_token(token),
        user_id=user.id,
        created_at=now,
        expires_at=now + SESSION_TTL,
    ))
    db.commit()
    return token


def resolve_session(
    db: Session,
    token: Optional[str],
    now: Optional[datetime] = None,
) -> Optional[AdminUser]:
    """
    Return the active AdminUser behind *token*, or None.

    An expired row is deleted on the way out; there is no background sweep.
    """
    if not is_well_formed(token):
        return None

    row = db.execute(
        select(AdminSession).where(AdminSession.token_hash == hash_token(token))
    ).scalar_one_or_none()
    if row is None:
        return None

    if as_utc(row.expires_at) <= (now or utcnow()):
        db.delete(row)
        db.commit()
        return None

    user = db.get(AdminUser, row.user_id)
    if user is None or not user.is_active:
        return None
    return user


def end_session(db: Session, token: Optional[str]) -> None:
    if not is_well_formed(token):
        return
    db.execute(delete(AdminSession).where(AdminSession.token_hash == hash_token(token)))
    db.commit()
