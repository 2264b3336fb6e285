# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261018v1
# ---------------------------------------------------------------------------
"""AdminUser ORM model – the operator identity behind admin mode."""

from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.sql import func

from database import Base


class AdminUser(Base):
    __tablename__ = "admin_users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), unique=True, nullable=False, index=True)
    # hex( PBKDF2-HMAC-SHA512(password, salt) ), 128 characters
    password_hash = Column(String(128), nullable=False)
    # hex( 32 random bytes ); the hex text itself is the KDF salt
    salt = Column(String(64), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    last_login = Column(DateTime(timezone=True), nullable=True)
    # Deactivation is the only teardown – rows are never deleted.
    is_active = Column(Boolean, nullable=False, default=True)
