"""
Judge model.

Judges score performances of the events they are assigned to. A judge with
is_admin set is an administrator for every engine operation.
"""

from datetime import datetime

from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.orm import relationship

from backend.src.models import Base
from backend.src.models.mixins import GuidMixin


class Judge(Base, GuidMixin):
    """
    Judge model.

    Attributes:
        id: Primary key (internal)
        uuid: UUIDv7 (GUID: jdg_xxx)
        name: Display name
        email: Login email (unique)
        is_admin: Administrator flag

    Relationships:
        assignments: Event assignments
        scores: Submitted scores
    """

    __tablename__ = "judges"

    GUID_PREFIX = "jdg"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    is_admin = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    assignments = relationship(
        "JudgeEventAssignment",
        back_populates="judge",
        lazy="dynamic",
    )
    scores = relationship(
        "Score",
        back_populates="judge",
        lazy="dynamic",
    )

    def __repr__(self) -> str:
        return f"<Judge(id={self.id}, email='{self.email}', admin={self.is_admin})>"

    def __str__(self) -> str:
        return self.name
