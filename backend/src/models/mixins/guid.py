"""
GUID columns for the engine's externally addressed rows.

Integer primary keys stay internal. Events, dancers, entries, performances,
judges, scores and judge assignments are addressed over the API by
``{prefix}_{26 lowercase Crockford Base32 chars}`` built from a UUIDv7,
for example ``ent_01jr8m3k7f0000000000000001``.
"""

import uuid as uuid_module
from typing import ClassVar

import base32_crockford
from sqlalchemy import Column, TypeDecorator, LargeBinary
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from uuid_extensions import uuid7


class UUIDType(TypeDecorator):
    """UUID column: native UUID on PostgreSQL, 16 raw bytes on SQLite; reads back as uuid.UUID."""

    impl = LargeBinary
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'postgresql':
            return dialect.type_descriptor(PG_UUID(as_uuid=True))
        else:
            return dialect.type_descriptor(LargeBinary(16))

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        if dialect.name == 'postgresql':
            return value if isinstance(value, uuid_module.UUID) else uuid_module.UUID(bytes=value)
        else:
            if isinstance(value, uuid_module.UUID):
                return value.bytes
            elif isinstance(value, bytes):
                return value
            else:
                return uuid_module.UUID(str(value)).bytes

    def process_result_value(self, value, dialect):
        if value is None:
            return value
        if isinstance(value, uuid_module.UUID):
            return value
        elif isinstance(value, bytes):
            return uuid_module.UUID(bytes=value)
        else:
            return uuid_module.UUID(str(value))


class GuidMixin:
    """
    Adds the ``uuid`` column and the ``guid`` property to a model.

    Each model sets GUID_PREFIX; services.guid.ENTITY_PREFIXES maps the
    prefixes back to entity names:
        evt Event, dnc Dancer, ent Entry, prf Performance,
        jdg Judge, scr Score, asg JudgeEventAssignment
    """

    GUID_PREFIX: ClassVar[str]

    uuid = Column(
        UUIDType(),
        nullable=False,
        unique=True,
        index=True,
        default=uuid7,
    )

    @property
    def guid(self) -> str:
        """Prefixed GUID, or None before the row is flushed."""
        if self.uuid is None:
            return None

        if isinstance(self.uuid, bytes):
            uuid_bytes = self.uuid
        else:
            uuid_bytes = self.uuid.bytes

        encoded = base32_crockford.encode(int.from_bytes(uuid_bytes, "big"))
        encoded = encoded.zfill(26)
        return f"{self.GUID_PREFIX}_{encoded.lower()}"
