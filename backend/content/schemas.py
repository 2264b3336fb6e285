# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261018v1
# ---------------------------------------------------------------------------
"""
Pydantic models for the public catalog (rooms, platform stats).

The frontend speaks camelCase for rooms and HTB stats and snake_case for THM
stats; input models accept either spelling.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, field_validator
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }


def _split_tags(value):
    if value is None:
        return []
    if isinstance(value, str):
        return [t.strip() for t in value.split(",") if t.strip()]
    return value


def _date_only(value):
    # "2024-05-01T12:00:00.000Z" → "2024-05-01"
    if isinstance(value, str) and len(value) > 10:
        return value[:10]
    return value or None


# -- Rooms -----------------------------------------------------------------


class RoomCreate(_CamelModel):
    title: Optional[str] = None
    slug: Optional[str] = None
    difficulty: str = "Easy"
    status: str = "In Progress"
    tags: List[str] = []
    writeup: Optional[str] = None
    url: str = ""
    room_code: str = ""
    points: int = 0
    date_completed: Optional[date] = None

    @field_validator("tags", mode="before")
    @classmethod
    def normalize_tags(cls, value):
        return _split_tags(value)

    @field_validator("date_completed", mode="before")
    @classmethod
    def normalize_date(cls, value):
        return _date_only(value)


class RoomUpdate(_CamelModel):
    """Partial update; only fields present in the body are applied."""
    id: int
    title: Optional[str] = None
    slug: Optional[str] = None
    difficulty: Optional[str] = None
    status: Optional[str] = None
    tags: Optional[List[str]] = None
    writeup: Optional[str] = None
    url: Optional[str] = None
    room_code: Optional[str] = None
    points: Optional[int] = None
    date_completed: Optional[date] = None

    @field_validator("tags", mode="before")
    @classmethod
    def normalize_tags(cls, value):
        return _split_tags(value)

    @field_validator("date_completed", mode="before")
    @classmethod
    def normalize_date(cls, value):
        return _date_only(value)


class RoomOut(_CamelModel):
    id: int
    title: str
    slug: str
    difficulty: str
    status: str
    tags: List[str]
    writeup: Optional[str] = None
    url: str
    room_code: str
    points: int
    date_completed: Optional[date] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RoomEnvelope(BaseModel):
    room: RoomOut


class RoomListEnvelope(BaseModel):
    rooms: List[RoomOut]


# -- Platform stats --------------------------------------------------------


class HTBStatsIn(_CamelModel):
    global_ranking: int = 0
    final_score: int = 0
    machines_pwned: int = 0


class HTBStatsOut(_CamelModel):
    global_ranking: int = 0
    final_score: int = 0
    machines_pwned: int = 0
    last_updated: Optional[datetime] = None


class THMStatsIn(BaseModel):
    global_ranking: int = 0
    total_points: int = 0
    rooms_completed: int = 0
    streak: int = 0
    badges: int = 0


class THMStatsOut(THMStatsIn):
    last_updated: Optional[datetime] = None

    model_config = {"from_attributes": True}
