"""
Judge assignments API endpoints.

Provides:
- Single judge-to-event assignment (max 4 judges per event)
- Regional bulk assignment
- Idempotent removal
- Listings by event and by judge

Design:
- Mutations require administrator rights; listings require authentication
- Duplicate and capacity failures are reported as 400
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.src.db.database import get_db
from backend.src.middleware.auth import ActorContext, require_admin, require_auth
from backend.src.schemas.judge_assignments import (
    AssignmentCreate,
    AssignmentRemovedResponse,
    AssignmentResponse,
    RegionAssignmentRequest,
    RegionAssignmentResponse,
)
from backend.src.services.exceptions import (
    CapacityError,
    ConflictError,
    NotFoundError,
    RegionAssignmentError,
    ValidationError,
)
from backend.src.services.judge_assignment_service import JudgeAssignmentService
from backend.src.utils.logging_config import get_logger


logger = get_logger("api")

router = APIRouter(
    prefix="/judge-assignments",
    tags=["Judge Assignments"],
)


def get_judge_assignment_service(db: Session = Depends(get_db)) -> JudgeAssignmentService:
    """Create JudgeAssignmentService instance with database session."""
    return JudgeAssignmentService(db=db)


@router.post(
    "",
    response_model=AssignmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Assign judge to event",
)
async def assign_judge(
    request: AssignmentCreate,
    ctx: ActorContext = Depends(require_admin),
    service: JudgeAssignmentService = Depends(get_judge_assignment_service),
) -> AssignmentResponse:
    """
    Assign a judge to an event.

    Raises:
        400 Bad Request: If the judge is already assigned or the event is full
        404 Not Found: If the judge or event doesn't exist
    """
    try:
        assignment = service.assign_judge_to_event(
            request.judge_id,
            request.event_id,
            request.assigned_by or ctx.judge_guid,
        )
        return AssignmentResponse.from_model(assignment)

    except NotFoundError as e:
        logger.warning(f"Judge assignment target missing: {e}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )

    except (ConflictError, CapacityError) as e:
        logger.warning(f"Judge assignment rejected: {e.message}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )


@router.post(
    "/region",
    response_model=RegionAssignmentResponse,
    summary="Assign judge to every event of a region",
)
async def assign_judge_to_region(
    request: RegionAssignmentRequest,
    ctx: ActorContext = Depends(require_admin),
    service: JudgeAssignmentService = Depends(get_judge_assignment_service),
) -> RegionAssignmentResponse:
    """
    Assign a judge across a region (e.g. Nationals).

    Events already including the judge count as skipped.

    Raises:
        400 Bad Request: If the region has no events, or an assignment failed
            (assignments made before the failure are kept)
        404 Not Found: If the judge doesn't exist
    """
    try:
        result = service.assign_judge_to_region(
            request.judge_id,
            request.region,
            request.assigned_by or ctx.judge_guid,
        )
        return RegionAssignmentResponse(**vars(result))

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

    except RegionAssignmentError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "message": e.message,
                "eventId": e.event_id,
                "assignedCount": e.assigned_count,
                "skippedCount": e.skipped_count,
            },
        )


@router.delete(
    "/{assignment_id}",
    response_model=AssignmentRemovedResponse,
    summary="Remove judge assignment",
    description="Idempotent: removing an absent assignment succeeds",
)
async def remove_assignment(
    assignment_id: str,
    ctx: ActorContext = Depends(require_admin),
    service: JudgeAssignmentService = Depends(get_judge_assignment_service),
) -> AssignmentRemovedResponse:
    """Remove an assignment."""
    deleted = service.remove_assignment(assignment_id)
    return AssignmentRemovedResponse(deleted=deleted)


@router.get(
    "/event/{event_id}",
    response_model=List[AssignmentResponse],
    summary="List judges of an event",
)
async def list_event_assignments(
    event_id: str,
    ctx: ActorContext = Depends(require_auth),
    service: JudgeAssignmentService = Depends(get_judge_assignment_service),
) -> List[AssignmentResponse]:
    """List the assignments of an event."""
    try:
        return [AssignmentResponse.from_model(a) for a in service.list_event_assignments(event_id)]

    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Event not found: {event_id}",
        )


@router.get(
    "/judge/{judge_id}",
    response_model=List[AssignmentResponse],
    summary="List events of a judge",
)
async def list_judge_assignments(
    judge_id: str,
    ctx: ActorContext = Depends(require_auth),
    service: JudgeAssignmentService = Depends(get_judge_assignment_service),
) -> List[AssignmentResponse]:
    """List the assignments of a judge. Judges may only list their own."""
    if not ctx.acts_as(judge_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Judges may only list their own assignments",
        )

    try:
        return [AssignmentResponse.from_model(a) for a in service.list_judge_assignments(judge_id)]

    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Judge not found: {judge_id}",
        )
