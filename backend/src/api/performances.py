"""
Performances API endpoints.

Provides:
- Bulk reordering of an event's running order
- Item number reconciliation sweep
- Withdrawal / restore from judging
- Scheduling status transitions

Design:
- All endpoints require administrator rights
- Bulk operations answer 200 with a report even when some items failed
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.src.db.database import get_db
from backend.src.middleware.auth import ActorContext, require_admin
from backend.src.schemas.performances import (
    PerformanceResponse,
    ReorderRequest,
    ReorderResponse,
    StatusUpdateRequest,
    SyncResponse,
    WithdrawalRequest,
)
from backend.src.services.exceptions import ConflictError, NotFoundError, ValidationError
from backend.src.services.item_number_service import ItemNumberService
from backend.src.services.performance_service import PerformanceService
from backend.src.utils.logging_config import get_logger


logger = get_logger("api")

router = APIRouter(
    prefix="/performances",
    tags=["Performances"],
)


def get_item_number_service(db: Session = Depends(get_db)) -> ItemNumberService:
    """Create ItemNumberService instance with database session."""
    return ItemNumberService(db=db)


def get_performance_service(db: Session = Depends(get_db)) -> PerformanceService:
    """Create PerformanceService instance with database session."""
    return PerformanceService(db=db)


@router.put(
    "/reorder",
    response_model=ReorderResponse,
    summary="Reorder performances",
    description="Assign item numbers to many entries/performances of one event",
)
async def reorder_performances(
    request: ReorderRequest,
    ctx: ActorContext = Depends(require_admin),
    service: ItemNumberService = Depends(get_item_number_service),
) -> ReorderResponse:
    """
    Apply a running-order batch.

    Items that cannot be applied are listed in ``failed`` and keep their
    current number; the rest are applied.

    Raises:
        400 Bad Request: If a concurrent change interfered with the batch
        404 Not Found: If the event doesn't exist

    Example:
        PUT /api/performances/reorder
        {"eventId": "evt_...", "performances": [{"id": "prf_...", "itemNumber": 1}]}
    """
    try:
        report = service.reorder_performances(
            request.event_id,
            [(item.id, item.item_number) for item in request.performances],
        )
        return ReorderResponse.from_report(report)

    except NotFoundError:
        logger.warning(f"Event not found for reorder: {request.event_id}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Event not found: {request.event_id}",
        )

    except ConflictError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )


@router.post(
    "/sync-item-numbers",
    response_model=SyncResponse,
    summary="Reconcile item numbers",
    description="Copy every entry's item number onto its performance where they differ",
)
async def sync_item_numbers(
    ctx: ActorContext = Depends(require_admin),
    service: ItemNumberService = Depends(get_item_number_service),
) -> SyncResponse:
    """Run the idempotent reconciliation sweep."""
    report = service.sync_all_item_numbers()
    return SyncResponse.from_report(report)


@router.post(
    "/{performance_id}/withdrawal",
    response_model=PerformanceResponse,
    summary="Withdraw or restore a performance",
)
async def set_withdrawal(
    performance_id: str,
    request: WithdrawalRequest,
    ctx: ActorContext = Depends(require_admin),
    service: PerformanceService = Depends(get_performance_service),
) -> PerformanceResponse:
    """
    Withdraw a performance from judging, or restore it.

    Scores are kept either way.

    Raises:
        400 Bad Request: If the action is not withdraw/restore
        404 Not Found: If the performance doesn't exist

    Example:
        POST /api/performances/prf_.../withdrawal
        {"action": "withdraw"}
    """
    try:
        performance = service.set_withdrawal(performance_id, request.action)
        return PerformanceResponse.from_model(performance)

    except NotFoundError:
        logger.warning(f"Performance not found: {performance_id}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Performance not found: {performance_id}",
        )

    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )


@router.put(
    "/{performance_id}/status",
    response_model=PerformanceResponse,
    summary="Update performance status",
)
async def update_status(
    performance_id: str,
    request: StatusUpdateRequest,
    ctx: ActorContext = Depends(require_admin),
    service: PerformanceService = Depends(get_performance_service),
) -> PerformanceResponse:
    """
    Move a performance along scheduled -> in_progress -> completed.

    Raises:
        400 Bad Request: If the status is unknown or the transition not allowed
        404 Not Found: If the performance doesn't exist
    """
    try:
        performance = service.update_status(performance_id, request.status)
        return PerformanceResponse.from_model(performance)

    except NotFoundError:
        logger.warning(f"Performance not found: {performance_id}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Performance not found: {performance_id}",
        )

    except (ValidationError, ConflictError) as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )
