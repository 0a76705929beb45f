"""
Pydantic schemas for judge assignment endpoints.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_serializer

from backend.src.schemas.common import CamelModel, to_utc_iso


class AssignmentCreate(CamelModel):
    """
    Schema for assigning a judge to an event.

    assigned_by defaults to the acting administrator.
    """

    judge_id: str = Field(..., min_length=1)
    event_id: str = Field(..., min_length=1)
    assigned_by: Optional[str] = None


class RegionAssignmentRequest(CamelModel):
    """Schema for assigning a judge to every event of a region."""

    judge_id: str = Field(..., min_length=1)
    region: str = Field(..., min_length=1)
    assigned_by: Optional[str] = None

    model_config = {
        "json_schema_extra": {
            "example": {
                "judgeId": "jdg_01hgw2bbg0000000000000001",
                "region": "Nationals",
            }
        }
    }


class AssignmentResponse(CamelModel):
    """Judge assignment."""

    id: str = Field(..., description="External identifier (asg_xxx)")
    judge_id: str
    judge_name: str
    event_id: str
    event_name: str
    region: str
    assigned_by: str
    assigned_at: datetime
    status: str

    @field_serializer("assigned_at")
    @classmethod
    def serialize_datetime_utc(cls, v: datetime) -> str:
        """Serialize datetime as ISO 8601 with explicit UTC timezone (Z suffix)."""
        return to_utc_iso(v)

    @classmethod
    def from_model(cls, assignment) -> "AssignmentResponse":
        return cls(
            id=assignment.guid,
            judge_id=assignment.judge.guid,
            judge_name=assignment.judge.name,
            event_id=assignment.event.guid,
            event_name=assignment.event.name,
            region=assignment.event.region,
            assigned_by=assignment.assigned_by,
            assigned_at=assignment.assigned_at,
            status=assignment.status,
        )


class RegionAssignmentResponse(CamelModel):
    """Outcome of a regional assignment."""

    region: str
    total_events: int
    assigned_count: int
    skipped_count: int


class AssignmentRemovedResponse(CamelModel):
    """Outcome of an assignment removal; deleted is False if it was already gone."""

    ok: bool = True
    deleted: bool
