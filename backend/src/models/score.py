"""
Score model.

One score per (judge, performance). The judge who submits it cannot change
it afterwards; corrections go through the administrator path in
ScoreService.

Each of the five components is marked out of 20, so a judge's total is out
of 100.
"""

from datetime import datetime

from sqlalchemy import (
    Column, Integer, Float, Text, DateTime, ForeignKey, UniqueConstraint
)
from sqlalchemy.orm import relationship

from backend.src.models import Base
from backend.src.models.mixins import GuidMixin


SCORE_COMPONENT_MAX = 20.0

SCORE_COMPONENTS = (
    "technical_score",
    "musical_score",
    "performance_score",
    "styling_score",
    "overall_impression_score",
)


class Score(Base, GuidMixin):
    """
    Judge score for a performance.

    Attributes:
        id: Primary key (internal)
        uuid: UUIDv7 (GUID: scr_xxx)
        judge_id: FK to judges
        performance_id: FK to performances
        technical_score .. overall_impression_score: Components, 0-20 each
        comments: Judge comments
        submitted_at: When the judge submitted
        updated_at: Last administrator change

    Constraints:
        - Unique (judge_id, performance_id)
    """

    __tablename__ = "scores"

    GUID_PREFIX = "scr"

    id = Column(Integer, primary_key=True, autoincrement=True)

    judge_id = Column(
        Integer,
        ForeignKey("judges.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    performance_id = Column(
        Integer,
        ForeignKey("performances.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    technical_score = Column(Float, nullable=False)
    musical_score = Column(Float, nullable=False)
    performance_score = Column(Float, nullable=False)
    styling_score = Column(Float, nullable=False)
    overall_impression_score = Column(Float, nullable=False)
    comments = Column(Text, nullable=True)

    submitted_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False
    )

    judge = relationship("Judge", back_populates="scores", lazy="joined")
    performance = relationship("Performance", back_populates="scores", lazy="select")

    __table_args__ = (
        UniqueConstraint("judge_id", "performance_id", name="uq_scores_judge_performance"),
    )

    @property
    def total(self) -> float:
        """Sum of the five components (0-100)."""
        return sum(getattr(self, component) for component in SCORE_COMPONENTS)

    def __repr__(self) -> str:
        return (
            f"<Score("
            f"judge_id={self.judge_id}, "
            f"performance_id={self.performance_id}, "
            f"total={self.total}"
            f")>"
        )
