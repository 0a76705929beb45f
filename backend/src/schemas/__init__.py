"""
Pydantic schemas for API request/response validation.

This module exports all schema classes for use in API endpoints.
"""

from backend.src.schemas.common import CamelModel, OkResponse
from backend.src.schemas.entries import (
    ItemNumberRequest,
    ItemNumberResponse,
    QualificationRequest,
    EntryResponse,
)
from backend.src.schemas.performances import (
    ReorderItem,
    ReorderRequest,
    WithdrawalRequest,
    StatusUpdateRequest,
    ItemFailureResponse,
    ReorderResponse,
    SyncResponse,
    PerformanceResponse,
)
from backend.src.schemas.judge_assignments import (
    AssignmentCreate,
    RegionAssignmentRequest,
    AssignmentResponse,
    RegionAssignmentResponse,
    AssignmentRemovedResponse,
)
from backend.src.schemas.rankings import RankingEntryResponse, EventWithScoresResponse
from backend.src.schemas.fees import (
    FeeResponse,
    NationalsFeeRequest,
    FeeBreakdownResponse,
    RegistrationStatusRequest,
    RegistrationStatusResponse,
    RegistrationPaidRequest,
    RegistrationPaidResult,
    RegistrationPaidResponse,
)
from backend.src.schemas.scores import (
    ScoreComponents,
    ScoreSubmit,
    ScoreUpdate,
    ScoreResponse,
)

__all__ = [
    "CamelModel",
    "OkResponse",
    # Entries
    "ItemNumberRequest",
    "ItemNumberResponse",
    "QualificationRequest",
    "EntryResponse",
    # Performances
    "ReorderItem",
    "ReorderRequest",
    "WithdrawalRequest",
    "StatusUpdateRequest",
    "ItemFailureResponse",
    "ReorderResponse",
    "SyncResponse",
    "PerformanceResponse",
    # Judge assignments
    "AssignmentCreate",
    "RegionAssignmentRequest",
    "AssignmentResponse",
    "RegionAssignmentResponse",
    "AssignmentRemovedResponse",
    # Rankings
    "RankingEntryResponse",
    "EventWithScoresResponse",
    # Fees
    "FeeResponse",
    "NationalsFeeRequest",
    "FeeBreakdownResponse",
    "RegistrationStatusRequest",
    "RegistrationStatusResponse",
    "RegistrationPaidRequest",
    "RegistrationPaidResult",
    "RegistrationPaidResponse",
    # Scores
    "ScoreComponents",
    "ScoreSubmit",
    "ScoreUpdate",
    "ScoreResponse",
]
