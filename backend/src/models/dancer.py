"""
Dancer model.

Dancers are the participants listed on entries. The registration fee is a
one-time charge per dancer and mastery level, so the paid flag is tracked
here together with the mastery level it was paid for.
"""

from datetime import datetime

from sqlalchemy import Column, Integer, String, Boolean, DateTime

from backend.src.models import Base
from backend.src.models.mixins import GuidMixin


class Dancer(Base, GuidMixin):
    """
    Dancer model.

    Attributes:
        id: Primary key (internal)
        uuid: UUIDv7 (GUID: dnc_xxx)
        eodsa_id: Participant identifier used on entries (e.g. "E123456")
        name: Full name
        registration_fee_paid: Whether the registration fee has been paid
        registration_fee_paid_at: When it was paid
        registration_fee_mastery_level: Mastery level the fee was paid for
    """

    __tablename__ = "dancers"

    GUID_PREFIX = "dnc"

    id = Column(Integer, primary_key=True, autoincrement=True)
    eodsa_id = Column(String(20), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)

    registration_fee_paid = Column(Boolean, default=False, nullable=False)
    registration_fee_paid_at = Column(DateTime, nullable=True)
    registration_fee_mastery_level = Column(String(50), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def has_paid_registration(self, mastery_level: str = None) -> bool:
        """
        Check whether this dancer's registration fee covers a mastery level.

        A fee paid without a recorded mastery level covers every level.

        Args:
            mastery_level: Mastery level of the entry, or None for any level
        """
        if not self.registration_fee_paid:
            return False
        if mastery_level is None or self.registration_fee_mastery_level is None:
            return True
        return self.registration_fee_mastery_level == mastery_level

    def __repr__(self) -> str:
        return f"<Dancer(id={self.id}, eodsa_id='{self.eodsa_id}')>"
