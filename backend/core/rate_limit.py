# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261018v1
# ---------------------------------------------------------------------------
"""
Per-address login lockout backed by ``admin_rate_limit``.

State lives in the database rather than process memory so that every worker
(and every instance) sees the same counters.

Behaviour notes
---------------
* The counter never decays with time.  It is only removed by a successful
  login from the same address, so a fifth failure locks the address even if
  the previous four were days ago.
* Once ``failed_attempts`` has reached the threshold, every further failure
  after the lock expires re-arms a full lockout.
* The failure write takes a row lock (``SELECT … FOR UPDATE``) where the
  backend supports it, and retries once if a concurrent first failure from
  the same address inserted the row under us.  SQLite ignores the row lock;
  its writer lock serialises the commits instead, but two readers can still
  race and undercount by one.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.clock import as_utc, utcnow
from core.logger import logger
from models.rate_limit import RateLimitEntry

MAX_FAILED_ATTEMPTS = 5
LOCKOUT_DURATION = timedelta(minutes=15)


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    retry_after_minutes: Optional[int] = None


def check(db: Session, address: str, now: Optional[datetime] = None) -> RateLimitDecision:
    """
    Decide whether a login attempt from *address* may proceed.

    Locked only while ``locked_until`` is strictly in the future; the wait is
    reported in whole minutes, rounded up.
    """
    entry = db.get(RateLimitEntry, address)
    if entry is None or entry.locked_until is None:
        return RateLimitDecision(allowed=True)

    now = now or utcnow()
    locked_until = as_utc(entry.locked_until)
    if now < locked_until:
        remaining = (locked_until - now).total_seconds() / 60
        return RateLimitDecision(allowed=False, retry_after_minutes=math.ceil(remaining))
    return RateLimitDecision(allowed=True)


def record_failure(db: Session, address: str, now: Optional[datetime] = None) -> RateLimitEntry:
    """Count one failed attempt for *address*, arming the lockout at the threshold."""
    now = now or utcnow()

    for attempt in (1, 2):
        try:
            entry = db.get(RateLimitEntry, address, with_for_update=True)
            if entry is None:
                entry = RateLimitEntry(ip_address=address, failed_attempts=0)
                db.add(entry)

            entry.failed_attempts = (entry.failed_attempts or 0) + 1
            entry.last_attempt = now
            if entry.failed_attempts >= MAX_FAILED_ATTEMPTS:
                entry.locked_until = now + LOCKOUT_DURATION
            else:
                entry.locked_until = None
            db.commit()
            break
        except IntegrityError:
            # Lost the race to insert the first row for this address.
            db.rollback()
            if attempt == 2:
                raise

    if entry.locked_until is not None:
        logger.warning(
            "Address %s locked out after %d failed login attempts",
            address,
            entry.failed_attempts,
        )
    return entry


def reset(db: Session, address: str) -> None:
    """Forget every failure recorded for *address*."""
    db.execute(delete(RateLimitEntry).where(RateLimitEntry.ip_address == address))
    db.commit()
