"""
Rankings API endpoints.

Public read-only access to computed rankings and to the list of events
that have scores.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from backend.src.db.database import get_db
from backend.src.schemas.rankings import EventWithScoresResponse, RankingEntryResponse
from backend.src.services.exceptions import ValidationError
from backend.src.services.ranking_service import RankingService
from backend.src.utils.logging_config import get_logger


logger = get_logger("api")

router = APIRouter(
    prefix="/rankings",
    tags=["Rankings"],
)


def get_ranking_service(db: Session = Depends(get_db)) -> RankingService:
    """Create RankingService instance with database session."""
    return RankingService(db=db)


@router.get(
    "",
    response_model=List[RankingEntryResponse],
    summary="Get rankings",
    description="Rank scored, non-withdrawn performances within a scope",
)
async def get_rankings(
    region: Optional[str] = Query(None, description="Region (case-insensitive)"),
    age_category: Optional[str] = Query(None, alias="ageCategory"),
    performance_type: Optional[str] = Query(None, alias="performanceType"),
    event_ids: Optional[str] = Query(
        None,
        alias="eventIds",
        description="Comma-separated event GUIDs (evt_xxx)",
    ),
    service: RankingService = Depends(get_ranking_service),
) -> List[RankingEntryResponse]:
    """
    Get rankings.

    Filters combine as an intersection; filters matching nothing return [].

    Raises:
        400 Bad Request: If eventIds contains something other than event GUIDs

    Example:
        GET /api/rankings?region=Gauteng&performanceType=Solo
        GET /api/rankings?eventIds=evt_...,evt_...
    """
    parsed_ids = None
    if event_ids is not None:
        parsed_ids = [e.strip() for e in event_ids.split(",") if e.strip()]
        if not parsed_ids:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="eventIds must list at least one event id",
            )

    try:
        rankings = service.calculate_rankings(
            region=region,
            age_category=age_category,
            performance_type=performance_type,
            event_ids=parsed_ids,
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )

    logger.info(
        f"Computed {len(rankings)} rankings",
        extra={"extra_fields": {"region": region, "count": len(rankings)}},
    )
    return [RankingEntryResponse(**vars(r)) for r in rankings]


@router.get(
    "/events-with-scores",
    response_model=List[EventWithScoresResponse],
    summary="List events with scores",
)
async def get_events_with_scores(
    service: RankingService = Depends(get_ranking_service),
) -> List[EventWithScoresResponse]:
    """List events with at least one scored, non-withdrawn performance."""
    return [EventWithScoresResponse(**vars(e)) for e in service.events_with_scores()]
