# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261018v1
# ---------------------------------------------------------------------------
"""THMRoom ORM model – a completed (or in-progress) room with its write-up."""

from sqlalchemy import Column, Integer, String, Text, JSON, Date, DateTime
from sqlalchemy.sql import func

from database import Base


class THMRoom(Base):
    __tablename__ = "thm_rooms"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    slug = Column(String(255), unique=True, nullable=False, index=True)
    difficulty = Column(String(32), nullable=False, server_default="Easy")
    status = Column(String(32), nullable=False, server_default="In Progress")
    tags = Column(JSON, nullable=False, default=list)
    # Markdown source; rendering happens in the frontend.
    writeup = Column(Text, nullable=True)
    url = Column(String(2048), nullable=False, server_default="")
    room_code = Column(String(255), nullable=False, server_default="")
    points = Column(Integer, nullable=False, default=0)
    date_completed = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
