"""
Pydantic schemas for entry administration endpoints.

Provides validation and serialization for:
- Item number assignment
- Nationals qualification
"""

from typing import List, Optional

from pydantic import Field

from backend.src.schemas.common import CamelModel


class ItemNumberRequest(CamelModel):
    """
    Schema for assigning an item number to an entry.

    The range check happens in ItemNumberService so that a non-positive
    number is reported like every other validation failure.

    Example:
        >>> ItemNumberRequest(itemNumber=12)
    """

    item_number: int = Field(..., description="Running order number (>= 1)")

    model_config = {
        "json_schema_extra": {"example": {"itemNumber": 12}}
    }


class ItemNumberResponse(CamelModel):
    """
    Result of an item number assignment.

    performance_synced is False when the entry has no performance yet.
    """

    ok: bool = True
    entry_id: str
    item_number: int
    performance_id: Optional[str] = None
    performance_synced: bool
    warnings: List[str] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result) -> "ItemNumberResponse":
        return cls(
            entry_id=result.entry_id,
            item_number=result.item_number,
            performance_id=result.performance_id,
            performance_synced=result.performance_synced,
            warnings=result.warnings,
        )


class QualificationRequest(CamelModel):
    """Schema for setting nationals qualification."""

    qualified_for_nationals: bool


class EntryResponse(CamelModel):
    """Entry summary returned by entry administration endpoints."""

    id: str = Field(..., description="External identifier (ent_xxx)")
    event_id: str
    contestant_id: str
    item_name: str
    item_number: Optional[int] = None
    entry_type: str
    approved: bool
    qualified_for_nationals: bool
    participant_ids: List[str] = Field(default_factory=list)

    @classmethod
    def from_model(cls, entry) -> "EntryResponse":
        return cls(
            id=entry.guid,
            event_id=entry.event.guid,
            contestant_id=entry.contestant_id,
            item_name=entry.item_name,
            item_number=entry.item_number,
            entry_type=entry.entry_type,
            approved=entry.approved,
            qualified_for_nationals=entry.qualified_for_nationals,
            participant_ids=list(entry.participant_ids or []),
        )
