# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261018v1
# ---------------------------------------------------------------------------
"""RateLimitEntry ORM model – one failed-login counter per client address."""

from sqlalchemy import Column, Integer, String, DateTime

from database import Base


class RateLimitEntry(Base):
    __tablename__ = "admin_rate_limit"

    ip_address = Column(String(255), primary_key=True)
    failed_attempts = Column(Integer, nullable=False, default=0)
    locked_until = Column(DateTime(timezone=True), nullable=True)
    last_attempt = Column(DateTime(timezone=True), nullable=True)
