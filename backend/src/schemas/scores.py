"""
Pydantic schemas for score endpoints.

Component ranges (0-20) are checked by ScoreService so the failure is
reported as a validation error like every other engine check.
"""

from datetime import datetime
from typing import Dict, Optional

from pydantic import Field, field_serializer

from backend.src.models import SCORE_COMPONENTS
from backend.src.schemas.common import CamelModel, to_utc_iso


class ScoreComponents(CamelModel):
    """The five score components, each marked out of 20."""

    technical_score: Optional[float] = None
    musical_score: Optional[float] = None
    performance_score: Optional[float] = None
    styling_score: Optional[float] = None
    overall_impression_score: Optional[float] = None

    def as_dict(self) -> Dict[str, float]:
        """Supplied components keyed by model column name."""
        return {
            name: getattr(self, name)
            for name in SCORE_COMPONENTS
            if getattr(self, name) is not None
        }


class ScoreSubmit(ScoreComponents):
    """
    Schema for submitting a score.

    Example:
        >>> ScoreSubmit(judgeId="jdg_...", performanceId="prf_...",
        ...             technicalScore=17, musicalScore=16, performanceScore=18,
        ...             stylingScore=17, overallImpressionScore=18)
    """

    judge_id: str = Field(..., min_length=1)
    performance_id: str = Field(..., min_length=1)
    comments: Optional[str] = Field(default=None, max_length=2000)


class ScoreUpdate(ScoreComponents):
    """Schema for an administrator correction; reason is required."""

    reason: str = Field(..., min_length=1, max_length=500)
    comments: Optional[str] = Field(default=None, max_length=2000)


class ScoreResponse(CamelModel):
    """Score with its derived total."""

    id: str = Field(..., description="External identifier (scr_xxx)")
    judge_id: str
    judge_name: str
    performance_id: str
    technical_score: float
    musical_score: float
    performance_score: float
    styling_score: float
    overall_impression_score: float
    total: float
    comments: Optional[str] = None
    submitted_at: datetime
    updated_at: datetime

    @field_serializer("submitted_at", "updated_at")
    @classmethod
    def serialize_datetime_utc(cls, v: datetime) -> str:
        """Serialize datetime as ISO 8601 with explicit UTC timezone (Z suffix)."""
        return to_utc_iso(v)

    @classmethod
    def from_model(cls, score, performance_guid: Optional[str] = None) -> "ScoreResponse":
        return cls(
            id=score.guid,
            judge_id=score.judge.guid,
            judge_name=score.judge.name,
            performance_id=performance_guid or score.performance.guid,
            technical_score=score.technical_score,
            musical_score=score.musical_score,
            performance_score=score.performance_score,
            styling_score=score.styling_score,
            overall_impression_score=score.overall_impression_score,
            total=score.total,
            comments=score.comments,
            submitted_at=score.submitted_at,
            updated_at=score.updated_at,
        )
