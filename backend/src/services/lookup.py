"""
GUID lookups shared by the engine services.

Every externally addressed model carries a GUID_PREFIX and a uuid column;
these helpers turn a GUID into a row or a NotFoundError.
"""

from typing import Optional, Type, TypeVar

from sqlalchemy.orm import Session

from backend.src.services.exceptions import NotFoundError
from backend.src.services.guid import GuidService


ModelT = TypeVar("ModelT")


def find_by_guid(db: Session, model: Type[ModelT], guid: str) -> Optional[ModelT]:
    """
    Find a row by GUID.

    Returns:
        The row, or None if the GUID is malformed, has another entity's
        prefix, or matches nothing
    """
    if not GuidService.validate_guid(guid, model.GUID_PREFIX):
        return None

    try:
        uuid_value = GuidService.parse_guid(guid, model.GUID_PREFIX)
    except ValueError:
        return None

    return db.query(model).filter(model.uuid == uuid_value).first()


def get_by_guid(db: Session, model: Type[ModelT], guid: str) -> ModelT:
    """
    Get a row by GUID.

    Raises:
        NotFoundError: If no row matches
    """
    row = find_by_guid(db, model, guid)
    if row is None:
        raise NotFoundError(model.__name__, guid)
    return row
