"""
Fees API endpoints.

Provides:
- Regular entry fee lookup (public)
- Nationals fee breakdown (public)
- Registration fee status (public) and payment recording (admin)
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from backend.src.db.database import get_db
from backend.src.middleware.auth import ActorContext, require_admin
from backend.src.schemas.fees import (
    FeeBreakdownResponse,
    FeeResponse,
    NationalsFeeRequest,
    RegistrationPaidRequest,
    RegistrationPaidResponse,
    RegistrationPaidResult,
    RegistrationStatusRequest,
    RegistrationStatusResponse,
)
from backend.src.services.exceptions import ValidationError
from backend.src.services.fee_service import FeeService
from backend.src.utils.logging_config import get_logger


logger = get_logger("api")

router = APIRouter(
    prefix="/fees",
    tags=["Fees"],
)


def get_fee_service(db: Session = Depends(get_db)) -> FeeService:
    """Create FeeService instance with database session."""
    return FeeService(db=db)


@router.get(
    "",
    response_model=FeeResponse,
    summary="Look up entry fee",
)
async def get_fee(
    age_category: str = Query(..., alias="ageCategory"),
    performance_type: str = Query(..., alias="performanceType"),
) -> FeeResponse:
    """
    Look up the regular entry fee.

    Raises:
        400 Bad Request: If the age category or performance type is unknown

    Example:
        GET /api/fees?ageCategory=Teen&performanceType=Solo
    """
    try:
        fee = FeeService.calculate_fee(age_category, performance_type)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )
    return FeeResponse(age_category=age_category, performance_type=performance_type, fee=fee)


@router.post(
    "/nationals",
    response_model=FeeBreakdownResponse,
    summary="Calculate nationals fee",
)
async def calculate_nationals_fee(
    request: NationalsFeeRequest,
    service: FeeService = Depends(get_fee_service),
) -> FeeBreakdownResponse:
    """
    Calculate a nationals fee breakdown.

    Raises:
        400 Bad Request: If the performance type is unknown or a count is below 1
    """
    try:
        breakdown = service.calculate_nationals_fee(
            performance_type=request.performance_type,
            solo_count=request.solo_count,
            participant_count=request.participant_count,
            participant_ids=request.participant_ids,
            mastery_level=request.mastery_level,
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )
    return FeeBreakdownResponse(**vars(breakdown))


@router.post(
    "/registration-status",
    response_model=RegistrationStatusResponse,
    summary="Check registration fee status",
)
async def check_registration_status(
    request: RegistrationStatusRequest,
    service: FeeService = Depends(get_fee_service),
) -> RegistrationStatusResponse:
    """Report which dancers still owe the registration fee."""
    result = service.check_registration_status(request.dancer_ids, request.mastery_level)
    return RegistrationStatusResponse(**vars(result))


@router.post(
    "/registration-paid",
    response_model=RegistrationPaidResponse,
    summary="Record registration fee payment",
)
async def mark_registration_paid(
    request: RegistrationPaidRequest,
    ctx: ActorContext = Depends(require_admin),
    service: FeeService = Depends(get_fee_service),
) -> RegistrationPaidResponse:
    """
    Record the registration fee as paid.

    Unknown dancers are reported per item, not as an error.
    """
    try:
        results = service.mark_registration_fee_paid(request.dancer_ids, request.mastery_level)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )

    return RegistrationPaidResponse(
        results=[RegistrationPaidResult(**r) for r in results],
        recorded_count=sum(1 for r in results if r["success"]),
    )
