"""
Entry model for event entries.

An Entry is one contestant's (or group's) submission to an event. Once
approved it is materialized as a Performance, which carries a copy of the
entry's item number.

Constraints:
- Unique (event_id, item_number): an item number is held by at most one
  entry per event. NULL item numbers are not constrained.
"""

import enum
from datetime import datetime

from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, Numeric,
    ForeignKey, UniqueConstraint
)
from sqlalchemy.orm import relationship

from backend.src.models import Base
from backend.src.models.mixins import GuidMixin
from backend.src.models.types import JSONBType


class EntryType(enum.Enum):
    """How the entry is performed."""
    LIVE = "live"
    VIRTUAL = "virtual"


class PaymentStatus(enum.Enum):
    """Entry payment status."""
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"


class Entry(Base, GuidMixin):
    """
    Event entry model.

    Attributes:
        id: Primary key (internal)
        uuid: UUIDv7 (GUID: ent_xxx)
        event_id: FK to events
        contestant_id: Owning contestant identifier (external)
        participant_ids: Dancer eodsa ids for group entries
        entry_type: live or virtual (pre-recorded)
        item_number: Running order number, unique within the event once set
        approved: Whether the entry was approved by an administrator
        qualified_for_nationals: Qualification flag
        item_name, item_style, choreographer, mastery: Entry details
        age_category, performance_type: Optional overrides of the event values
        calculated_fee, payment_status: Invoicing fields
        music_file_url, video_file_url, video_external_url: Media assets

    Relationships:
        event: Parent event
        performance: Materialized performance (one-to-one, may be absent)
    """

    __tablename__ = "event_entries"

    GUID_PREFIX = "ent"

    id = Column(Integer, primary_key=True, autoincrement=True)

    event_id = Column(
        Integer,
        ForeignKey("events.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    contestant_id = Column(String(50), nullable=False, index=True)
    participant_ids = Column(JSONBType, default=list, nullable=False)

    entry_type = Column(String(20), default=EntryType.LIVE.value, nullable=False)
    item_number = Column(Integer, nullable=True)
    approved = Column(Boolean, default=False, nullable=False)
    qualified_for_nationals = Column(Boolean, default=False, nullable=False)

    item_name = Column(String(255), nullable=False)
    item_style = Column(String(100), nullable=True)
    choreographer = Column(String(255), nullable=True)
    mastery = Column(String(50), nullable=True)
    estimated_duration = Column(Numeric(5, 2), nullable=True)

    # NULL = inherit from event
    age_category = Column(String(50), nullable=True)
    performance_type = Column(String(20), nullable=True)

    calculated_fee = Column(Numeric(10, 2), default=0, nullable=False)
    payment_status = Column(String(20), default=PaymentStatus.PENDING.value, nullable=False)

    music_file_url = Column(String(1024), nullable=True)
    music_file_name = Column(String(255), nullable=True)
    video_file_url = Column(String(1024), nullable=True)
    video_external_url = Column(String(1024), nullable=True)

    submitted_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False
    )

    event = relationship("Event", back_populates="entries", lazy="joined")
    performance = relationship(
        "Performance",
        back_populates="entry",
        uselist=False,
        lazy="select",
    )

    __table_args__ = (
        UniqueConstraint("event_id", "item_number", name="uq_entries_event_item_number"),
    )

    @property
    def effective_age_category(self) -> str:
        """Age category used for ranking scope (entry override or event value)."""
        return self.age_category or self.event.age_category

    @property
    def effective_performance_type(self) -> str:
        """Performance type used for ranking scope (entry override or event value)."""
        return self.performance_type or self.event.performance_type

    def __repr__(self) -> str:
        return (
            f"<Entry("
            f"id={self.id}, "
            f"event_id={self.event_id}, "
            f"item_number={self.item_number}"
            f")>"
        )
