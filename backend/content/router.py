# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261018v1
# ---------------------------------------------------------------------------
"""
Public catalog endpoints – THM rooms and per-platform profile stats.

Reads are public.  Every write is guarded by ``require_admin`` and leaves a
best-effort audit row.
"""

import re
from datetime import date

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy import select
from sqlalchemy.orm import Session

from database import get_db
from core import audit
from core.clock import utcnow
from core.errors import Conflict, NotFound, ValidationError, translate_errors
from core.logger import logger
from core.security import require_admin
from models.admin_user import AdminUser
from models.platform_stats import HTBStats, THMStats
from models.room import THMRoom
from content.schemas import (
    HTBStatsIn,
    HTBStatsOut,
    RoomCreate,
    RoomEnvelope,
    RoomListEnvelope,
    RoomOut,
    RoomUpdate,
    THMStatsIn,
    THMStatsOut,
)

router = APIRouter(prefix="/admin", tags=["content"])

COMPLETED = "Completed"


def slugify(text: str) -> str:
    """'Blue (Windows)' → 'blue-windows'"""
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")


def _slug_taken(db: Session, slug: str, exclude_id: int | None = None) -> bool:
    stmt = select(THMRoom.id).where(THMRoom.slug == slug)
    if exclude_id is not None:
        stmt = stmt.where(THMRoom.id != exclude_id)
    return db.execute(stmt).first() is not None


def _apply_completion(room: THMRoom) -> None:
    # A completed room always carries a date; anything else never does.
    if room.status == COMPLETED:
        if room.date_completed is None:
            room.date_completed = date.today()
    else:
        room.date_completed = None


# ---------------------------------------------------------------------------
# /admin/thm-rooms
# ---------------------------------------------------------------------------


@router.get("/thm-rooms", response_model=RoomListEnvelope)
def list_rooms(
    slug: str | None = Query(None),
    status: str | None = Query(None),
    difficulty: str | None = Query(None),
    db: Session = Depends(get_db),
):
    """List rooms, newest first.  ``slug`` narrows to a single room page."""
    with translate_errors("Failed to fetch rooms"):
        stmt = select(THMRoom)
        if slug:
            stmt = stmt.where(THMRoom.slug == slug)
        if status:
            stmt = stmt.where(THMRoom.status == status)
        if difficulty:
            stmt = stmt.where(THMRoom.difficulty == difficulty)
        rooms = db.execute(stmt.order_by(THMRoom.id.desc())).scalars().all()
        return RoomListEnvelope(rooms=[RoomOut.model_validate(r) for r in rooms])


@router.post("/thm-rooms", response_model=RoomEnvelope)
def create_room(
    body: RoomCreate,
    request: Request,
    admin: AdminUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    with translate_errors("Failed to add room"):
        if not body.title or not body.title.strip():
            raise ValidationError("Title is required")

        slug = slugify(body.slug or body.title)
        if not slug:
            raise ValidationError("Slug must contain letters or digits")
        if _slug_taken(db, slug):
            raise Conflict("A room with this slug already exists")

        room = THMRoom(
            title=body.title.strip(),
            slug=slug,
            difficulty=body.difficulty,
            status=body.status,
            tags=body.tags,
            writeup=body.writeup,
            url=body.url,
            room_code=body.room_code,
            points=body.points,
            date_completed=body.date_completed,
        )
        _apply_completion(room)
        db.add(room)
        db.commit()
        db.refresh(room)

        audit.record(db, request, "room_created", {"id": room.id, "slug": room.slug})
        logger.info("Room '%s' created by %s", room.slug, admin.username)
        return RoomEnvelope(room=RoomOut.model_validate(room))


@router.put("/thm-rooms", response_model=RoomEnvelope)
def update_room(
    body: RoomUpdate,
    request: Request,
    admin: AdminUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Apply the fields present in the body to the room identified by ``id``."""
    with translate_errors("Failed to update room"):
        room = db.get(THMRoom, body.id)
        if room is None:
            raise NotFound("Room not found")

        changes = body.model_dump(exclude_unset=True, exclude={"id"})

        if "title" in changes and not (changes["title"] or "").strip():
            raise ValidationError("Title is required")
        if "slug" in changes:
            changes["slug"] = slugify(changes["slug"] or room.title)
            if not changes["slug"]:
                raise ValidationError("Slug must contain letters or digits")
            if _slug_taken(db, changes["slug"], exclude_id=room.id):
                raise Conflict("A room with this slug already exists")

        for field, value in changes.items():
            if value is None and field not in ("writeup", "date_completed"):
                continue
            setattr(room, field, value)
        _apply_completion(room)
        db.commit()
        db.refresh(room)

        audit.record(db, request, "room_updated", {"id": room.id, "fields": sorted(changes)})
        return RoomEnvelope(room=RoomOut.model_validate(room))


@router.delete("/thm-rooms")
def delete_room(
    request: Request,
    id: int = Query(...),
    admin: AdminUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    with translate_errors("Failed to delete room"):
        room = db.get(THMRoom, id)
        if room is None:
            raise NotFound("Room not found")
        slug = room.slug
        db.delete(room)
        db.commit()

        audit.record(db, request, "room_deleted", {"id": id, "slug": slug})
        return {"success": True}


# ---------------------------------------------------------------------------
# /admin/htb-stats, /admin/thm-stats  – single-row profile numbers
# ---------------------------------------------------------------------------


def _single_row(db: Session, model):
    return db.execute(select(model).order_by(model.id).limit(1)).scalar_one_or_none()


def _upsert_stats(db: Session, model, values: dict):
    row = _single_row(db, model)
    if row is None:
        row = model()
        db.add(row)
    for field, value in values.items():
        setattr(row, field, value)
    row.last_updated = utcnow()
    db.commit()
    db.refresh(row)
    return row


@router.get("/htb-stats", response_model=HTBStatsOut)
def get_htb_stats(db: Session = Depends(get_db)):
    with translate_errors("Failed to fetch HTB stats"):
        row = _single_row(db, HTBStats)
        return HTBStatsOut.model_validate(row) if row else HTBStatsOut()


@router.post("/htb-stats", response_model=HTBStatsOut)
def save_htb_stats(
    body: HTBStatsIn,
    request: Request,
    admin: AdminUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    with translate_errors("Failed to save HTB stats"):
        row = _upsert_stats(db, HTBStats, body.model_dump())
        audit.record(db, request, "htb_stats_updated", body.model_dump())
        return HTBStatsOut.model_validate(row)


@router.get("/thm-stats", response_model=THMStatsOut)
def get_thm_stats(db: Session = Depends(get_db)):
    with translate_errors("Failed to fetch THM stats"):
        row = _single_row(db, THMStats)
        return THMStatsOut.model_validate(row) if row else THMStatsOut()


@router.post("/thm-stats", response_model=THMStatsOut)
def save_thm_stats(
    body: THMStatsIn,
    request: Request,
    admin: AdminUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    with translate_errors("Failed to save THM stats"):
        row = _upsert_stats(db, THMStats, body.model_dump())
        audit.record(db, request, "thm_stats_updated", body.model_dump())
        return THMStatsOut.model_validate(row)
