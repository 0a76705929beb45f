"""
Entries API endpoints for entry administration.

Provides:
- Item number assignment (mirrored onto the entry's performance)
- Nationals qualification
- Performance materialization for approved entries

Design:
- All endpoints require administrator rights
- All endpoints use GUID format (ent_xxx) for identifiers
- Item number conflicts are reported as 400 with the holding entry
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.src.db.database import get_db
from backend.src.middleware.auth import ActorContext, require_admin
from backend.src.schemas.entries import (
    EntryResponse,
    ItemNumberRequest,
    ItemNumberResponse,
    QualificationRequest,
)
from backend.src.schemas.performances import PerformanceResponse
from backend.src.services.exceptions import (
    ItemNumberConflictError,
    NotFoundError,
    ValidationError,
)
from backend.src.services.item_number_service import ItemNumberService
from backend.src.services.performance_service import PerformanceService
from backend.src.utils.logging_config import get_logger


logger = get_logger("api")

router = APIRouter(
    prefix="/entries",
    tags=["Entries"],
)


# ============================================================================
# Dependencies
# ============================================================================


def get_item_number_service(db: Session = Depends(get_db)) -> ItemNumberService:
    """Create ItemNumberService instance with database session."""
    return ItemNumberService(db=db)


def get_performance_service(db: Session = Depends(get_db)) -> PerformanceService:
    """Create PerformanceService instance with database session."""
    return PerformanceService(db=db)


# ============================================================================
# API Endpoints
# ============================================================================


@router.put(
    "/{entry_id}/item-number",
    response_model=ItemNumberResponse,
    summary="Assign item number",
    description="Assign a running-order number to an entry and its performance",
)
async def assign_item_number(
    entry_id: str,
    request: ItemNumberRequest,
    ctx: ActorContext = Depends(require_admin),
    service: ItemNumberService = Depends(get_item_number_service),
) -> ItemNumberResponse:
    """
    Assign an item number.

    Raises:
        400 Bad Request: If the number is invalid or held by another entry
        404 Not Found: If the entry doesn't exist

    Example:
        PUT /api/entries/ent_01hgw2bbg0000000000000001/item-number
        {"itemNumber": 12}
    """
    try:
        result = service.assign_item_number(entry_id, request.item_number)
        return ItemNumberResponse.from_result(result)

    except NotFoundError:
        logger.warning(f"Entry not found: {entry_id}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Entry not found: {entry_id}",
        )

    except ItemNumberConflictError as e:
        logger.warning(f"Item number conflict for {entry_id}: {e.message}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": e.message, "existingEntryId": e.existing_entry_id},
        )

    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )


@router.put(
    "/{entry_id}/qualification",
    response_model=EntryResponse,
    summary="Set nationals qualification",
)
async def set_qualification(
    entry_id: str,
    request: QualificationRequest,
    ctx: ActorContext = Depends(require_admin),
    service: PerformanceService = Depends(get_performance_service),
) -> EntryResponse:
    """
    Set or clear an entry's nationals qualification.

    Raises:
        404 Not Found: If the entry doesn't exist
    """
    try:
        entry = service.set_qualification(entry_id, request.qualified_for_nationals)
        return EntryResponse.from_model(entry)

    except NotFoundError:
        logger.warning(f"Entry not found: {entry_id}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Entry not found: {entry_id}",
        )


@router.post(
    "/{entry_id}/performance",
    response_model=PerformanceResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create performance from entry",
    description="Materialize the performance of an approved entry (idempotent)",
)
async def create_performance(
    entry_id: str,
    ctx: ActorContext = Depends(require_admin),
    service: PerformanceService = Depends(get_performance_service),
) -> PerformanceResponse:
    """
    Create the performance for an approved entry.

    Returns the existing performance when there already is one.

    Raises:
        400 Bad Request: If the entry is not approved
        404 Not Found: If the entry doesn't exist
    """
    try:
        performance = service.create_performance_from_entry(entry_id)
        return PerformanceResponse.from_model(performance)

    except NotFoundError:
        logger.warning(f"Entry not found: {entry_id}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Entry not found: {entry_id}",
        )

    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )
