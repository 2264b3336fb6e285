# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261018v1
# ---------------------------------------------------------------------------
"""
Credential store – every read and write of ``admin_users`` goes through here.

Shared by the HTTP setup endpoint and bin/seed_admin.py so both enforce the
same password policy and uniqueness rule.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.clock import utcnow
from core.errors import Conflict, ValidationError
from core.security import generate_salt, hash_password
from models.admin_user import AdminUser

MIN_PASSWORD_LENGTH = 8


def get_active_user(db: Session, username: str) -> Optional[AdminUser]:
    return db.execute(
        select(AdminUser).where(
            AdminUser.username == username,
            AdminUser.is_active.is_(True),
        )
    ).scalar_one_or_none()


def username_exists(db: Session, username: str) -> bool:
    count = db.execute(
        select(func.count()).select_from(AdminUser).where(AdminUser.username == username)
    ).scalar_one()
    return count > 0


def count_active(db: Session) -> int:
    return db.execute(
        select(func.count()).select_from(AdminUser).where(AdminUser.is_active.is_(True))
    ).scalar_one()


def validate_new_password(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
        )


def create_admin_user(db: Session, username: str, password: str) -> AdminUser:
    """
    Insert a new active admin with a fresh salt.

    Raises ValidationError for a short password and Conflict when the
    username is taken (active or not).
    """
    validate_new_password(password)

    if username_exists(db, username):
        raise Conflict("Admin user already exists")

    salt = generate_salt()
    user = AdminUser(
        username=username,
        password_hash=hash_password(password, salt),
        salt=salt,
        created_at=utcnow(),
        is_active=True,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        # A concurrent setup won the unique index
        db.rollback()
        raise Conflict("Admin user already exists") from exc
    db.refresh(user)
    return user


def mark_login(db: Session, user: AdminUser, now: Optional[datetime] = None) -> None:
    user.last_login = now or utcnow()
    db.commit()


def deactivate(db: Session, username: str) -> bool:
    """Flip ``is_active`` off.  Returns False if there is no such user."""
    user = db.execute(
        select(AdminUser).where(AdminUser.username == username)
    ).scalar_one_or_none()
    if user is None:
        return False
    user.is_active = False
    db.commit()
    return True
