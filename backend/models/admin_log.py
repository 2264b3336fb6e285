# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261018v1
# ---------------------------------------------------------------------------
"""AdminLog ORM model – append-only trail of security-relevant events."""

from sqlalchemy import Column, Integer, String, JSON, DateTime
from sqlalchemy.sql import func

from database import Base


class AdminLog(Base):
    __tablename__ = "admin_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    action = Column(String(64), nullable=False, index=True)   # e.g. "admin_login"
    data = Column(JSON, nullable=True)                         # free-form payload
    ip_address = Column(String(255), nullable=True)            # as supplied by the proxy headers
    user_agent = Column(String(512), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
