"""
Pydantic schemas for fee endpoints.

Provides validation and serialization for:
- Regular fee lookups
- Nationals fee breakdowns
- Registration fee status and payment recording
"""

from typing import List, Optional

from pydantic import Field

from backend.src.schemas.common import CamelModel


class FeeResponse(CamelModel):
    """Regular entry fee lookup result."""

    age_category: str
    performance_type: str
    fee: int


class NationalsFeeRequest(CamelModel):
    """
    Schema for a nationals fee calculation.

    Counts are range-checked by FeeService.

    Example:
        >>> NationalsFeeRequest(performanceType="Group", participantCount=5,
        ...                     participantIds=["E1", "E2", "E3", "E4", "E5"])
    """

    performance_type: str = Field(..., min_length=1)
    solo_count: int = Field(default=1)
    participant_count: int = Field(default=1)
    participant_ids: List[str] = Field(default_factory=list)
    mastery_level: Optional[str] = None

    model_config = {
        "json_schema_extra": {
            "example": {
                "performanceType": "Group",
                "soloCount": 0,
                "participantCount": 5,
                "participantIds": ["E100001", "E100002", "E100003", "E100004", "E100005"],
                "masteryLevel": "Water (Competitive)",
            }
        }
    }


class FeeBreakdownResponse(CamelModel):
    """Nationals fee breakdown."""

    performance_type: str
    solo_count: int
    participant_count: int
    base_fee: int
    per_participant_rate: Optional[int] = None
    registration_fee_per_dancer: int
    participants_needing_registration: int
    registration_fee: int
    total_fee: int
    paid_participant_ids: List[str] = Field(default_factory=list)
    unpaid_participant_ids: List[str] = Field(default_factory=list)
    description: str


class RegistrationStatusRequest(CamelModel):
    """Schema for checking registration fee status."""

    dancer_ids: List[str] = Field(..., min_length=1)
    mastery_level: Optional[str] = None


class RegistrationStatusResponse(CamelModel):
    """Registration fee status of a set of dancers."""

    total_dancers: int
    dancers_needing_registration: List[str]
    dancers_already_paid: List[str]
    registration_fee_required: int


class RegistrationPaidRequest(CamelModel):
    """Schema for recording registration fee payment."""

    dancer_ids: List[str] = Field(..., min_length=1)
    mastery_level: str = Field(..., min_length=1)


class RegistrationPaidResult(CamelModel):
    """Per-dancer outcome of recording a registration payment."""

    dancer_id: str
    success: bool
    error: Optional[str] = None


class RegistrationPaidResponse(CamelModel):
    """Outcome of recording registration payments."""

    results: List[RegistrationPaidResult]
    recorded_count: int
