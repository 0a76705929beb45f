"""
Scores API endpoints.

Provides:
- Score submission by the assigned judge
- Score listing per performance
- Administrator correction and deletion (with a logged reason)
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from backend.src.db.database import get_db
from backend.src.middleware.auth import ActorContext, require_admin, require_auth
from backend.src.schemas.common import OkResponse
from backend.src.schemas.scores import ScoreResponse, ScoreSubmit, ScoreUpdate
from backend.src.services.exceptions import (
    ConflictError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from backend.src.services.score_service import ScoreService
from backend.src.utils.logging_config import get_logger


logger = get_logger("api")

router = APIRouter(
    prefix="/scores",
    tags=["Scores"],
)


def get_score_service(db: Session = Depends(get_db)) -> ScoreService:
    """Create ScoreService instance with database session."""
    return ScoreService(db=db)


@router.post(
    "",
    response_model=ScoreResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit score",
)
async def submit_score(
    request: ScoreSubmit,
    ctx: ActorContext = Depends(require_auth),
    service: ScoreService = Depends(get_score_service),
) -> ScoreResponse:
    """
    Submit a judge's score.

    Raises:
        400 Bad Request: If a component is out of range, the performance is
            withdrawn, or the judge already scored it
        403 Forbidden: If the actor is not the judge or the judge is not
            assigned to the event
        404 Not Found: If the judge or performance doesn't exist
    """
    try:
        score = service.submit_score(
            ctx,
            request.judge_id,
            request.performance_id,
            request.as_dict(),
            comments=request.comments,
        )
        return ScoreResponse.from_model(score, request.performance_id)

    except UnauthorizedError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=e.message,
        )

    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )

    except (ValidationError, ConflictError) as e:
        logger.warning(f"Score rejected: {e.message}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )


@router.get(
    "/performance/{performance_id}",
    response_model=List[ScoreResponse],
    summary="List scores of a performance",
)
async def get_performance_scores(
    performance_id: str,
    ctx: ActorContext = Depends(require_auth),
    service: ScoreService = Depends(get_score_service),
) -> List[ScoreResponse]:
    """List all scores of a performance, withdrawn or not."""
    try:
        scores = service.get_performance_scores(performance_id)
        return [ScoreResponse.from_model(s, performance_id) for s in scores]

    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Performance not found: {performance_id}",
        )


@router.put(
    "/{performance_id}/{judge_id}",
    response_model=ScoreResponse,
    summary="Correct a score (admin)",
)
async def update_score(
    performance_id: str,
    judge_id: str,
    request: ScoreUpdate,
    ctx: ActorContext = Depends(require_admin),
    service: ScoreService = Depends(get_score_service),
) -> ScoreResponse:
    """
    Overwrite score components.

    Raises:
        400 Bad Request: If a component is out of range
        404 Not Found: If the score doesn't exist
    """
    try:
        score = service.admin_update_score(
            ctx,
            performance_id,
            judge_id,
            request.as_dict(),
            reason=request.reason,
            comments=request.comments,
        )
        return ScoreResponse.from_model(score, performance_id)

    except UnauthorizedError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=e.message,
        )

    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )

    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )


@router.delete(
    "/{performance_id}/{judge_id}",
    response_model=OkResponse,
    summary="Delete a score (admin)",
)
async def delete_score(
    performance_id: str,
    judge_id: str,
    reason: str = Query(..., min_length=1, description="Reason for the deletion"),
    ctx: ActorContext = Depends(require_admin),
    service: ScoreService = Depends(get_score_service),
) -> OkResponse:
    """
    Delete a score.

    Raises:
        404 Not Found: If the score doesn't exist
    """
    try:
        service.admin_delete_score(ctx, performance_id, judge_id, reason=reason)
        return OkResponse(message="Score deleted")

    except UnauthorizedError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=e.message,
        )

    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )

    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )
