"""
Pydantic schemas for performance endpoints.

Provides validation and serialization for:
- Bulk reordering and item number reconciliation reports
- Withdrawal and status changes
- Performance responses
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_serializer

from backend.src.schemas.common import CamelModel, to_utc_iso


# ============================================================================
# Request Schemas
# ============================================================================


class ReorderItem(CamelModel):
    """One (id, item number) pair; id is an entry or performance GUID."""

    id: str = Field(..., min_length=1, description="ent_xxx or prf_xxx")
    item_number: int


class ReorderRequest(CamelModel):
    """
    Schema for reordering the performances of an event.

    Example:
        >>> ReorderRequest(eventId="evt_...", performances=[{"id": "prf_...", "itemNumber": 1}])
    """

    event_id: str = Field(..., min_length=1)
    performances: List[ReorderItem] = Field(..., min_length=1)

    model_config = {
        "json_schema_extra": {
            "example": {
                "eventId": "evt_01hgw2bbg0000000000000001",
                "performances": [
                    {"id": "prf_01hgw2bbg0000000000000002", "itemNumber": 1},
                    {"id": "prf_01hgw2bbg0000000000000003", "itemNumber": 2},
                ],
            }
        }
    }


class WithdrawalRequest(CamelModel):
    """Schema for withdrawing or restoring a performance."""

    action: str = Field(..., description="withdraw or restore")


class StatusUpdateRequest(CamelModel):
    """Schema for changing a performance's scheduling status."""

    status: str = Field(..., description="scheduled, in_progress, completed or cancelled")


# ============================================================================
# Response Schemas
# ============================================================================


class ItemFailureResponse(CamelModel):
    """One failed item of a bulk operation."""

    id: str
    item_number: Optional[int] = None
    reason: str


class ReorderResponse(CamelModel):
    """Report of a reorder batch."""

    updated_count: int
    failed: List[ItemFailureResponse] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)

    @classmethod
    def from_report(cls, report) -> "ReorderResponse":
        return cls(
            updated_count=report.updated_count,
            failed=[ItemFailureResponse(**vars(f)) for f in report.failed],
            warnings=report.warnings,
        )


class SyncResponse(CamelModel):
    """Report of an item number reconciliation sweep."""

    checked_count: int
    synced_count: int
    failed: List[ItemFailureResponse] = Field(default_factory=list)

    @classmethod
    def from_report(cls, report) -> "SyncResponse":
        return cls(
            checked_count=report.checked_count,
            synced_count=report.synced_count,
            failed=[ItemFailureResponse(**vars(f)) for f in report.failed],
        )


class PerformanceResponse(CamelModel):
    """Performance returned by lifecycle endpoints."""

    id: str = Field(..., description="External identifier (prf_xxx)")
    event_id: str
    entry_id: str
    contestant_id: str
    title: str
    participant_names: List[str] = Field(default_factory=list)
    item_number: Optional[int] = None
    status: str
    withdrawn_from_judging: bool
    mastery: Optional[str] = None
    item_style: Optional[str] = None
    created_at: datetime

    @field_serializer("created_at")
    @classmethod
    def serialize_datetime_utc(cls, v: datetime) -> str:
        """Serialize datetime as ISO 8601 with explicit UTC timezone (Z suffix)."""
        return to_utc_iso(v)

    @classmethod
    def from_model(cls, performance) -> "PerformanceResponse":
        return cls(
            id=performance.guid,
            event_id=performance.event.guid,
            entry_id=performance.entry.guid,
            contestant_id=performance.contestant_id,
            title=performance.title,
            participant_names=list(performance.participant_names or []),
            item_number=performance.item_number,
            status=performance.status,
            withdrawn_from_judging=performance.withdrawn_from_judging,
            mastery=performance.mastery,
            item_style=performance.item_style,
            created_at=performance.created_at,
        )
