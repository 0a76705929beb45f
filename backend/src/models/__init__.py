"""
SQLAlchemy models for the EODSA results engine.

This module provides the declarative base class and imports all models
to ensure they are registered with SQLAlchemy's metadata.
"""

from sqlalchemy.orm import declarative_base

# All models inherit from this Base class
Base = declarative_base()


# Import all models here so they are registered with Base.metadata
# This is required for Alembic autogenerate to detect models
from backend.src.models.event import Event, EventStatus
from backend.src.models.dancer import Dancer
from backend.src.models.entry import Entry, EntryType, PaymentStatus
from backend.src.models.performance import (
    Performance,
    PerformanceStatus,
    PERFORMANCE_STATUS_TRANSITIONS,
)
from backend.src.models.judge import Judge
from backend.src.models.score import Score, SCORE_COMPONENTS, SCORE_COMPONENT_MAX
from backend.src.models.judge_assignment import (
    JudgeEventAssignment,
    AssignmentStatus,
    MAX_JUDGES_PER_EVENT,
)

__all__ = [
    "Base",
    "Event",
    "EventStatus",
    "Dancer",
    "Entry",
    "EntryType",
    "PaymentStatus",
    "Performance",
    "PerformanceStatus",
    "PERFORMANCE_STATUS_TRANSITIONS",
    "Judge",
    "Score",
    "SCORE_COMPONENTS",
    "SCORE_COMPONENT_MAX",
    "JudgeEventAssignment",
    "AssignmentStatus",
    "MAX_JUDGES_PER_EVENT",
]
