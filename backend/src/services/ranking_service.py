"""
Ranking service for score aggregation and rankings.

Rankings are computed within a scope of region, age category and
performance type, optionally restricted to an explicit set of events.

Design:
- Withdrawn performances and performances without scores are excluded
- A performance's aggregate is the mean of its judges' totals, so the
  number of judges does not bias the result
- Results are grouped by scope (region, effective age category, effective
  performance type) and ranks restart at 1 in every scope
- Within a scope: aggregate descending, then lower item number, then
  performances without an item number, then creation order; ranks are
  strictly increasing (no shared ranks)
- The medal follows the displayed (rounded) percentage
- Filters matching nothing yield an empty list
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from backend.src.models import Entry, Event, Performance, Score, SCORE_COMPONENTS
from backend.src.services.guid import GuidService
from backend.src.services.exceptions import ValidationError
from backend.src.utils.logging_config import get_logger


logger = get_logger("services")


# (minimum percentage, medal), highest first
MEDAL_TIERS = (
    (95.0, "elite"),
    (90.0, "opus"),
    (85.0, "legend"),
    (80.0, "gold"),
    (75.0, "silver_plus"),
    (70.0, "silver"),
)
DEFAULT_MEDAL = "bronze"

# Aggregates are compared at this precision so float noise cannot reorder ties
_SCORE_PRECISION = 6


def medal_for_percentage(percentage: float) -> str:
    """Map a percentage (0-100) to its medal tier."""
    for threshold, medal in MEDAL_TIERS:
        if percentage >= threshold:
            return medal
    return DEFAULT_MEDAL


@dataclass
class RankingEntry:
    """One ranked performance."""
    rank: int
    performance_id: str
    event_id: str
    event_name: str
    region: str
    age_category: str
    performance_type: str
    title: str
    item_number: Optional[int]
    item_style: Optional[str]
    mastery: Optional[str]
    contestant_id: str
    judge_count: int
    total_score: float
    average_score: float
    percentage: float
    medal: str
    participant_names: List[str] = field(default_factory=list)


@dataclass
class EventWithScores:
    """Event that has at least one scored, non-withdrawn performance."""
    event_id: str
    name: str
    region: str
    age_category: str
    performance_type: str
    event_date: Optional[object]
    venue: Optional[str]
    performance_count: int
    score_count: int


class RankingService:
    """
    Service computing rankings from stored scores.

    Usage:
        >>> service = RankingService(db_session)
        >>> rankings = service.calculate_rankings(region="Gauteng", performance_type="solo")
        >>> rankings[0].rank, rankings[0].medal
        (1, 'gold')
    """

    def __init__(self, db: Session):
        """
        Initialize ranking service.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    def calculate_rankings(
        self,
        region: Optional[str] = None,
        age_category: Optional[str] = None,
        performance_type: Optional[str] = None,
        event_ids: Optional[Sequence[str]] = None,
    ) -> List[RankingEntry]:
        """
        Rank the eligible performances of a scope.

        Args:
            region: Region filter (case-insensitive)
            age_category: Age category filter (case-insensitive, effective
                entry value)
            performance_type: Performance type filter (case-insensitive,
                effective entry value)
            event_ids: Explicit event GUIDs; intersected with the other filters

        Returns:
            RankingEntry list grouped by scope, in rank order within each scope

        Raises:
            ValidationError: If an event id is not an event GUID
        """
        query = (
            self.db.query(Performance)
            .join(Event, Performance.event_id == Event.id)
            .join(Entry, Performance.entry_id == Entry.id)
            .filter(Performance.withdrawn_from_judging == False)  # noqa: E712
        )

        if region:
            query = query.filter(func.lower(Event.region) == region.strip().lower())

        if event_ids is not None:
            uuids = [self._parse_event_id(event_id) for event_id in event_ids]
            if not uuids:
                return []
            query = query.filter(Event.uuid.in_(uuids))

        candidates = query.order_by(Performance.id).all()

        # Effective category/type can come from the entry, so these filter in Python
        if age_category:
            wanted = age_category.strip().lower()
            candidates = [
                p for p in candidates
                if (p.entry.effective_age_category or "").lower() == wanted
            ]
        if performance_type:
            wanted = performance_type.strip().lower()
            candidates = [
                p for p in candidates
                if (p.entry.effective_performance_type or "").lower() == wanted
            ]

        totals = self._judge_totals([p.id for p in candidates])

        scored = []
        for performance in candidates:
            judge_totals = totals.get(performance.id)
            if not judge_totals:
                continue
            aggregate = sum(judge_totals) / len(judge_totals)
            scored.append((performance, aggregate, len(judge_totals)))

        scored.sort(key=lambda item: (
            self._scope_key(item[0]),
            -round(item[1], _SCORE_PRECISION),
            item[0].item_number is None,
            item[0].item_number or 0,
            item[0].id,
        ))

        rankings = []
        scope = None
        rank = 0
        for performance, aggregate, judge_count in scored:
            key = self._scope_key(performance)
            if key != scope:
                scope = key
                rank = 0
            rank += 1
            rankings.append(self._to_entry(rank, performance, aggregate, judge_count))

        logger.debug(
            "Calculated rankings",
            extra={"extra_fields": {
                "region": region,
                "age_category": age_category,
                "performance_type": performance_type,
                "event_count": len(event_ids) if event_ids is not None else None,
                "ranked": len(rankings),
            }},
        )
        return rankings

    def events_with_scores(self) -> List[EventWithScores]:
        """List events having at least one scored, non-withdrawn performance."""
        rows = (
            self.db.query(
                Event,
                func.count(func.distinct(Performance.id)),
                func.count(func.distinct(Score.id)),
            )
            .join(Performance, Performance.event_id == Event.id)
            .join(Score, Score.performance_id == Performance.id)
            .filter(Performance.withdrawn_from_judging == False)  # noqa: E712
            .group_by(Event.id)
            .order_by(Event.event_date.desc(), Event.name)
            .all()
        )

        return [
            EventWithScores(
                event_id=event.guid,
                name=event.name,
                region=event.region,
                age_category=event.age_category,
                performance_type=event.performance_type,
                event_date=event.event_date,
                venue=event.venue,
                performance_count=performance_count,
                score_count=score_count,
            )
            for event, performance_count, score_count in rows
        ]

    def _judge_totals(self, performance_ids: List[int]) -> Dict[int, List[float]]:
        if not performance_ids:
            return {}

        total_expr = sum(getattr(Score, component) for component in SCORE_COMPONENTS)
        rows = (
            self.db.query(Score.performance_id, total_expr)
            .filter(Score.performance_id.in_(performance_ids))
            .all()
        )

        totals: Dict[int, List[float]] = {}
        for performance_id, total in rows:
            totals.setdefault(performance_id, []).append(float(total))
        return totals

    @staticmethod
    def _parse_event_id(event_id: str):
        try:
            return GuidService.parse_guid(event_id, Event.GUID_PREFIX)
        except ValueError:
            raise ValidationError(f"Invalid event id: {event_id}", field="eventIds")

    @staticmethod
    def _scope_key(performance: Performance) -> Tuple[str, str, str]:
        entry = performance.entry
        return (
            (performance.event.region or "").lower(),
            (entry.effective_age_category or "").lower(),
            (entry.effective_performance_type or "").lower(),
        )

    @staticmethod
    def _to_entry(rank: int, performance: Performance, aggregate: float, judge_count: int) -> RankingEntry:
        entry = performance.entry
        event = performance.event
        total = round(aggregate, 2)
        percentage = round(aggregate, 1)
        return RankingEntry(
            rank=rank,
            performance_id=performance.guid,
            event_id=event.guid,
            event_name=event.name,
            region=event.region,
            age_category=entry.effective_age_category,
            performance_type=entry.effective_performance_type,
            title=performance.title,
            item_number=performance.item_number,
            item_style=performance.item_style,
            mastery=performance.mastery,
            contestant_id=performance.contestant_id,
            judge_count=judge_count,
            total_score=total,
            average_score=round(aggregate / len(SCORE_COMPONENTS), 2),
            percentage=percentage,
            medal=medal_for_percentage(percentage),
            participant_names=list(performance.participant_names or []),
        )
