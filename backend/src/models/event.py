"""
Event model for competition events.

An Event is one competition session a dancer can enter, classified by
region, age category and performance type. Those three attributes form the
ranking scope key; they are not separate stored entities.

Design Rationale:
- region is free text matched case-insensitively (e.g. "Nationals", "Gauteng")
- performance_type "All" means the event accepts every type; entries then
  carry their own performance type
- Events own their entries, performances and judge assignments
"""

import enum
from datetime import datetime

from sqlalchemy import Column, Integer, String, Text, Date, DateTime, Numeric, Index
from sqlalchemy.orm import relationship

from backend.src.models import Base
from backend.src.models.mixins import GuidMixin


class EventStatus(enum.Enum):
    """Event lifecycle status."""
    UPCOMING = "upcoming"
    REGISTRATION_OPEN = "registration_open"
    REGISTRATION_CLOSED = "registration_closed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Event(Base, GuidMixin):
    """
    Competition event model.

    Attributes:
        id: Primary key (internal, never exposed)
        uuid: UUIDv7 for external identification (GUID: evt_xxx)
        name: Display name (e.g. "EODSA Nationals 2025 - Solo 13-14")
        region: Region the event belongs to
        age_category: Age bracket of the event
        performance_type: Solo, Duet, Trio, Group or All
        event_date: Day of competition
        status: Lifecycle status (see EventStatus)
        entry_fee: Advertised entry fee

    Relationships:
        entries: Entries submitted to this event
        performances: Performances scheduled for this event
        judge_assignments: Judges authorized to score this event (max 4)
    """

    __tablename__ = "events"

    GUID_PREFIX = "evt"

    id = Column(Integer, primary_key=True, autoincrement=True)

    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)

    # Ranking scope
    region = Column(String(100), nullable=False, index=True)
    age_category = Column(String(50), nullable=False)
    performance_type = Column(String(20), nullable=False)

    event_date = Column(Date, nullable=True)
    venue = Column(String(255), nullable=True)
    status = Column(String(50), default=EventStatus.UPCOMING.value, nullable=False)
    entry_fee = Column(Numeric(10, 2), default=0, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    entries = relationship(
        "Entry",
        back_populates="event",
        lazy="dynamic",
    )
    performances = relationship(
        "Performance",
        back_populates="event",
        lazy="dynamic",
    )
    judge_assignments = relationship(
        "JudgeEventAssignment",
        back_populates="event",
        lazy="dynamic",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("idx_events_scope", "region", "age_category", "performance_type"),
    )

    def __repr__(self) -> str:
        return (
            f"<Event("
            f"id={self.id}, "
            f"name='{self.name}', "
            f"region='{self.region}'"
            f")>"
        )

    def __str__(self) -> str:
        return self.name
