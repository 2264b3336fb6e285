# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261018v1
# ---------------------------------------------------------------------------
"""
Audit logger.  Appends rows to ``admin_logs``; nothing in the application
updates or deletes them.

Writes are best-effort: a failure is logged and rolled back, and never
propagates into the operation being audited.  Callers must therefore commit
their own work *before* recording the event.
"""

from typing import Optional

from fastapi import Request
from sqlalchemy.orm import Session

from core.logger import logger
from core.security import get_client_ip, get_user_agent
from models.admin_log import AdminLog


def record_event(
    db: Session,
    action: str,
    data: Optional[dict] = None,
    ip_address: str = "unknown",
    user_agent: str = "unknown",
) -> bool:
    """Append one audit row.  Returns False if the write failed."""
    try:
        db.add(AdminLog(
            action=action,
            data=data or {},
            ip_address=ip_address,
            user_agent=user_agent,
        ))
        db.commit()
    except Exception:
        db.rollback()
        logger.warning("Audit log write failed for action=%s", action, exc_info=True)
        return False
    return True


def record(db: Session, request: Request, action: str, data: Optional[dict] = None) -> bool:
    """:func:`record_event` with address and user agent taken from *request*."""
    return record_event(
        db,
        action,
        data,
        ip_address=get_client_ip(request),
        user_agent=get_user_agent(request),
    )
