# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261018v1
# ---------------------------------------------------------------------------
"""
Audit trail review.

Read-only: the trail is append-only and nothing here can alter it.  Every
endpoint is guarded by ``require_admin``.
"""

import io
import json
from datetime import datetime

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy import select
from sqlalchemy.orm import Session
from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side

from database import get_db
from core.errors import translate_errors
from core.security import require_admin
from models.admin_log import AdminLog
from models.admin_user import AdminUser
from admin.schemas import AdminLogListResponse, AdminLogRow

router = APIRouter(prefix="/admin", tags=["admin"])


def _filtered(action, since, until):
    stmt = select(AdminLog)
    if action:
        stmt = stmt.where(AdminLog.action == action)
    if since:
        stmt = stmt.where(AdminLog.created_at >= since)
    if until:
        stmt = stmt.where(AdminLog.created_at <= until)
    return stmt.order_by(AdminLog.created_at.desc(), AdminLog.id.desc())


# ---------------------------------------------------------------------------
# GET /admin/logs  – newest-first audit trail with optional filters
# ---------------------------------------------------------------------------


@router.get("/logs", response_model=AdminLogListResponse)
def list_logs(
    action: str | None = Query(None, description="Exact action name, e.g. admin_login"),
    since: datetime | None = Query(None, description="ISO-8601 start of time window"),
    until: datetime | None = Query(None, description="ISO-8601 end of time window"),
    limit: int = Query(200, ge=1, le=1000),
    admin: AdminUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Return audit rows newest-first.

    * ``action`` – exact action name.
    * ``since`` / ``until`` – ISO-8601 bounds on ``created_at``.
    * ``limit`` – max rows returned (default 200, cap 1000).
    """
    with translate_errors("Failed to load audit logs"):
        rows = db.execute(_filtered(action, since, until).limit(limit)).scalars().all()
        return AdminLogListResponse(logs=[AdminLogRow.model_validate(r) for r in rows])


# ---------------------------------------------------------------------------
# GET /admin/logs/export  – download the audit trail as Excel
# ---------------------------------------------------------------------------

_HEADER_FONT  = Font(name="Calibri", size=11, bold=True, color="FFFFFF")
_HEADER_FILL  = PatternFill(start_color="00B140", end_color="00B140", fill_type="solid")
_HEADER_ALIGN = Alignment(horizontal="center", vertical="center")
_THIN_BORDER  = Border(
    left=Side(style="thin", color="CCCCCC"),
    right=Side(style="thin", color="CCCCCC"),
    top=Side(style="thin", color="CCCCCC"),
    bottom=Side(style="thin", color="CCCCCC"),
)

_EXPORT_HEADERS = ["ID", "Time", "Action", "Client IP", "User Agent", "Data"]
_EXPORT_WIDTHS  = [8, 20, 22, 18, 40, 50]

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def build_workbook(rows) -> bytes:
    """Render audit rows into an .xlsx document."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Audit Logs"

    ws.append(_EXPORT_HEADERS)
    for cell in ws[1]:
        cell.font = _HEADER_FONT
        cell.fill = _HEADER_FILL
        cell.alignment = _HEADER_ALIGN
        cell.border = _THIN_BORDER

    for row in rows:
        ws.append([
            row.id,
            row.created_at.strftime("%Y-%m-%d %H:%M:%S") if row.created_at else "",
            row.action,
            row.ip_address or "",
            row.user_agent or "",
            json.dumps(row.data, sort_keys=True) if row.data else "",
        ])
        for col_idx in range(1, len(_EXPORT_HEADERS) + 1):
            ws.cell(row=ws.max_row, column=col_idx).border = _THIN_BORDER

    for col_idx, width in enumerate(_EXPORT_WIDTHS, start=1):
        ws.column_dimensions[chr(64 + col_idx)].width = width

    buf = io.BytesIO()
    wb.save(buf)
    wb.close()
    return buf.getvalue()


@router.get("/logs/export")
def export_logs(
    admin: AdminUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    with translate_errors("Failed to export audit logs"):
        rows = db.execute(_filtered(None, None, None)).scalars().all()
        payload = build_workbook(rows)

    return StreamingResponse(
        io.BytesIO(payload),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": 'attachment; filename="audit-logs.xlsx"'},
    )
