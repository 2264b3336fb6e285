# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261018v1
# ---------------------------------------------------------------------------
"""Single-row profile statistics for each training platform."""

from sqlalchemy import Column, Integer, DateTime

from database import Base


class HTBStats(Base):
    __tablename__ = "htb_stats"

    id = Column(Integer, primary_key=True, autoincrement=True)
    global_ranking = Column(Integer, nullable=False, default=0)
    final_score = Column(Integer, nullable=False, default=0)
    machines_pwned = Column(Integer, nullable=False, default=0)
    last_updated = Column(DateTime(timezone=True), nullable=True)


class THMStats(Base):
    __tablename__ = "thm_stats"

    id = Column(Integer, primary_key=True, autoincrement=True)
    global_ranking = Column(Integer, nullable=False, default=0)
    total_points = Column(Integer, nullable=False, default=0)
    rooms_completed = Column(Integer, nullable=False, default=0)
    streak = Column(Integer, nullable=False, default=0)
    badges = Column(Integer, nullable=False, default=0)
    last_updated = Column(DateTime(timezone=True), nullable=True)
