"""
Performance model.

A Performance is the judged unit derived from an Entry for its event. It is
never deleted: administrators withdraw it from judging (and may restore it),
which excludes it from rankings while keeping its scores.

Design Rationale:
- entry_id is unique: an entry maps to at most one performance
- item_number mirrors the entry's item number; ItemNumberService keeps
  the two in sync and repairs drift
- withdrawn_from_judging is independent of the scheduling status
"""

import enum
from datetime import datetime

from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, Numeric, ForeignKey
)
from sqlalchemy.orm import relationship

from backend.src.models import Base
from backend.src.models.mixins import GuidMixin
from backend.src.models.types import JSONBType


class PerformanceStatus(enum.Enum):
    """Performance scheduling status."""
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Allowed forward transitions; re-setting the current status is a no-op
PERFORMANCE_STATUS_TRANSITIONS = {
    PerformanceStatus.SCHEDULED.value: {
        PerformanceStatus.IN_PROGRESS.value,
        PerformanceStatus.CANCELLED.value,
    },
    PerformanceStatus.IN_PROGRESS.value: {
        PerformanceStatus.COMPLETED.value,
        PerformanceStatus.CANCELLED.value,
    },
    PerformanceStatus.COMPLETED.value: set(),
    PerformanceStatus.CANCELLED.value: set(),
}


class Performance(Base, GuidMixin):
    """
    Performance model.

    Attributes:
        id: Primary key (internal)
        uuid: UUIDv7 (GUID: prf_xxx)
        event_id: FK to events
        entry_id: FK to event_entries (unique)
        contestant_id: Owning contestant identifier (copied from entry)
        title: Item name
        participant_names: Dancer names at materialization time
        item_number: Copy of the entry's item number
        status: Scheduling status (see PerformanceStatus)
        withdrawn_from_judging: Excluded from scoring and rankings when True

    Relationships:
        event: Parent event
        entry: Source entry
        scores: Judge scores (retained across withdraw/restore)
    """

    __tablename__ = "performances"

    GUID_PREFIX = "prf"

    id = Column(Integer, primary_key=True, autoincrement=True)

    event_id = Column(
        Integer,
        ForeignKey("events.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    entry_id = Column(
        Integer,
        ForeignKey("event_entries.id", ondelete="RESTRICT"),
        nullable=False,
        unique=True,
        index=True,
    )
    contestant_id = Column(String(50), nullable=False)

    title = Column(String(255), nullable=False)
    participant_names = Column(JSONBType, default=list, nullable=False)
    duration = Column(Numeric(5, 2), nullable=True)
    choreographer = Column(String(255), nullable=True)
    mastery = Column(String(50), nullable=True)
    item_style = Column(String(100), nullable=True)

    item_number = Column(Integer, nullable=True)
    scheduled_time = Column(DateTime, nullable=True)
    status = Column(String(20), default=PerformanceStatus.SCHEDULED.value, nullable=False)
    withdrawn_from_judging = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False
    )

    event = relationship("Event", back_populates="performances", lazy="joined")
    entry = relationship("Entry", back_populates="performance", lazy="joined")
    scores = relationship(
        "Score",
        back_populates="performance",
        lazy="dynamic",
    )

    def __repr__(self) -> str:
        return (
            f"<Performance("
            f"id={self.id}, "
            f"entry_id={self.entry_id}, "
            f"item_number={self.item_number}, "
            f"withdrawn={self.withdrawn_from_judging}"
            f")>"
        )
