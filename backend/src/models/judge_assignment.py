"""
JudgeEventAssignment model for judge-event authorizations.

Junction table linking judges to the events they may score.

Design Rationale:
- Unique constraint prevents duplicate (judge, event) assignments at the
  store level, independent of the service-level check
- An event holds at most MAX_JUDGES_PER_EVENT assignments; enforced by
  JudgeAssignmentService under a row lock on the event
- CASCADE on event delete, RESTRICT on judge delete
"""

import enum
from datetime import datetime

from sqlalchemy import (
    Column, Integer, String, DateTime,
    ForeignKey, UniqueConstraint
)
from sqlalchemy.orm import relationship

from backend.src.models import Base
from backend.src.models.mixins import GuidMixin


MAX_JUDGES_PER_EVENT = 4


class AssignmentStatus(enum.Enum):
    """Assignment status."""
    ACTIVE = "active"
    INACTIVE = "inactive"


class JudgeEventAssignment(Base, GuidMixin):
    """
    Judge-Event junction model.

    Attributes:
        id: Primary key
        uuid: UUIDv7 (GUID: asg_xxx)
        judge_id: FK to judges (RESTRICT on delete)
        event_id: FK to events (CASCADE on delete)
        assigned_by: Identifier of the administrator who made the assignment
        assigned_at: When the assignment was made
        status: active or inactive

    Constraints:
        - Unique (judge_id, event_id)
    """

    __tablename__ = "judge_event_assignments"

    GUID_PREFIX = "asg"

    id = Column(Integer, primary_key=True, autoincrement=True)

    judge_id = Column(
        Integer,
        ForeignKey("judges.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    event_id = Column(
        Integer,
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    assigned_by = Column(String(100), nullable=False)
    assigned_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    status = Column(String(20), default=AssignmentStatus.ACTIVE.value, nullable=False)

    judge = relationship("Judge", back_populates="assignments", lazy="joined")
    event = relationship("Event", back_populates="judge_assignments", lazy="joined")

    __table_args__ = (
        UniqueConstraint("judge_id", "event_id", name="uq_judge_event_assignment"),
    )

    def __repr__(self) -> str:
        return (
            f"<JudgeEventAssignment("
            f"judge_id={self.judge_id}, "
            f"event_id={self.event_id}"
            f")>"
        )
