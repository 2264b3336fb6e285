# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261018v1
# ---------------------------------------------------------------------------
"""Pydantic response models for the audit-log endpoints."""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel


class AdminLogRow(BaseModel):
    id: int
    action: str
    data: Optional[Any] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class AdminLogListResponse(BaseModel):
    logs: List[AdminLogRow]
