"""
Pydantic schemas for ranking endpoints.
"""

from datetime import date
from typing import List, Optional

from pydantic import Field

from backend.src.schemas.common import CamelModel


class RankingEntryResponse(CamelModel):
    """
    One ranked performance.

    total_score is the mean of the judges' totals (0-100); average_score is
    that mean per component (0-20).
    """

    rank: int
    performance_id: str
    event_id: str
    event_name: str
    region: str
    age_category: str
    performance_type: str
    title: str
    item_number: Optional[int] = None
    item_style: Optional[str] = None
    mastery: Optional[str] = None
    contestant_id: str
    participant_names: List[str] = Field(default_factory=list)
    judge_count: int
    total_score: float
    average_score: float
    percentage: float
    medal: str


class EventWithScoresResponse(CamelModel):
    """Event with at least one scored performance."""

    event_id: str
    name: str
    region: str
    age_category: str
    performance_type: str
    event_date: Optional[date] = None
    venue: Optional[str] = None
    performance_count: int
    score_count: int
