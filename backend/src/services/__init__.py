"""
Service layer for business logic.

This module exports all service classes for use in API endpoints.
"""

from backend.src.services.exceptions import (
    ServiceError,
    NotFoundError,
    ConflictError,
    ValidationError,
    UnknownCategoryError,
    ItemNumberConflictError,
    DuplicateAssignmentError,
    CapacityError,
    UnauthorizedError,
    RegionAssignmentError,
)
from backend.src.services.guid import GuidService
from backend.src.services.fee_service import FeeService, FeeBreakdown, RegistrationStatus
from backend.src.services.item_number_service import (
    ItemNumberService,
    ItemNumberAssignment,
    ItemFailure,
    ReorderReport,
    SyncReport,
)
from backend.src.services.judge_assignment_service import (
    JudgeAssignmentService,
    RegionAssignmentResult,
)
from backend.src.services.ranking_service import (
    RankingService,
    RankingEntry,
    EventWithScores,
    medal_for_percentage,
)
from backend.src.services.score_service import ScoreService
from backend.src.services.performance_service import PerformanceService
from backend.src.services.token_service import TokenService

__all__ = [
    "ServiceError",
    "NotFoundError",
    "ConflictError",
    "ValidationError",
    "UnknownCategoryError",
    "ItemNumberConflictError",
    "DuplicateAssignmentError",
    "CapacityError",
    "UnauthorizedError",
    "RegionAssignmentError",
    "GuidService",
    # Fee Calculator
    "FeeService",
    "FeeBreakdown",
    "RegistrationStatus",
    # Item-Number Synchronizer
    "ItemNumberService",
    "ItemNumberAssignment",
    "ItemFailure",
    "ReorderReport",
    "SyncReport",
    # Judge Assignment Allocator
    "JudgeAssignmentService",
    "RegionAssignmentResult",
    # Ranking Calculator
    "RankingService",
    "RankingEntry",
    "EventWithScores",
    "medal_for_percentage",
    # Scoring and lifecycle
    "ScoreService",
    "PerformanceService",
    "TokenService",
]
