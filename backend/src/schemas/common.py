"""
Shared schema base classes.

Payloads use camelCase on the wire (itemNumber, eventId, ...). Requests also
accept the snake_case field names.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serializing fields as camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


def to_utc_iso(value: Optional[datetime]) -> Optional[str]:
    """Serialize a naive UTC datetime as ISO 8601 with a Z suffix."""
    return value.isoformat() + "Z" if value else None


class OkResponse(CamelModel):
    """Acknowledgement for operations without a richer result."""

    ok: bool = Field(default=True)
    message: Optional[str] = None
