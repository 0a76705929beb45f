"""
Fee service for entry and nationals fee calculation.

Provides table-driven fee lookups plus the nationals fee breakdown, which
adds a one-time registration fee for every participant that has not yet
paid it for the requested mastery level.

Design:
- Regular fees are a pure, case-insensitive lookup in FEE_SCHEDULE
- Nationals tiers come from config.fee_schedule; no randomness or
  clock dependence, so identical inputs give identical breakdowns
- Registration payment flags live on Dancer rows (matched by eodsa_id)
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from backend.src.config.fee_schedule import (
    FEE_SCHEDULE,
    REGISTRATION_FEE_PER_DANCER,
    SOLO_PACKAGES,
    SOLO_PACKAGE_MAX,
    ADDITIONAL_SOLO_FEE,
    DUET_TRIO_FEE_PER_DANCER,
    SMALL_GROUP_FEE_PER_DANCER,
    LARGE_GROUP_FEE_PER_DANCER,
    LARGE_GROUP_MIN_DANCERS,
)
from backend.src.models import Dancer
from backend.src.services.exceptions import UnknownCategoryError, ValidationError
from backend.src.utils.logging_config import get_logger


logger = get_logger("services")


# Lower-cased view of FEE_SCHEDULE for case-insensitive lookups
_FEE_INDEX: Dict[str, Dict[str, int]] = {
    age.lower(): {ptype.lower(): fee for ptype, fee in fees.items()}
    for age, fees in FEE_SCHEDULE.items()
}

_NATIONALS_TYPES = ("solo", "duet", "trio", "group")


@dataclass
class FeeBreakdown:
    """
    Computed (non-persisted) nationals fee.

    Attributes:
        performance_type: Normalized performance type (Solo, Duet, Trio, Group)
        solo_count: Number of solos in the package (solo only)
        participant_count: Dancers in the item
        base_fee: Performance fee for the tier
        per_participant_rate: Per-dancer rate (None for solo packages)
        registration_fee_per_dancer: One-time registration fee
        participants_needing_registration: Dancers charged the registration fee
        registration_fee: Registration component of the total
        total_fee: base_fee + registration_fee
        paid_participant_ids: Dancers whose registration is already covered
        unpaid_participant_ids: Dancers charged the registration fee
        description: Human-readable summary for invoices
    """
    performance_type: str
    solo_count: int
    participant_count: int
    base_fee: int
    per_participant_rate: Optional[int]
    registration_fee_per_dancer: int
    participants_needing_registration: int
    registration_fee: int
    total_fee: int
    paid_participant_ids: List[str] = field(default_factory=list)
    unpaid_participant_ids: List[str] = field(default_factory=list)
    description: str = ""


@dataclass
class RegistrationStatus:
    """Registration fee status for a set of dancers."""
    total_dancers: int
    dancers_needing_registration: List[str]
    dancers_already_paid: List[str]
    registration_fee_required: int


class FeeService:
    """
    Service for fee calculation.

    calculate_fee() needs no session; the nationals calculation and the
    registration helpers read and write Dancer rows.

    Usage:
        >>> service = FeeService(db_session)
        >>> service.calculate_fee("Teen", "Solo")
        400
        >>> breakdown = service.calculate_nationals_fee(
        ...     "Group", solo_count=0, participant_count=5,
        ...     participant_ids=["E1", "E2", "E3", "E4", "E5"],
        ... )
        >>> breakdown.total_fee
        2600
    """

    def __init__(self, db: Optional[Session] = None):
        """
        Initialize fee service.

        Args:
            db: SQLAlchemy database session (needed for registration lookups)
        """
        self.db = db

    @staticmethod
    def calculate_fee(age_category: str, performance_type: str) -> int:
        """
        Look up the regular entry fee.

        Args:
            age_category: Age category (case-insensitive)
            performance_type: Performance type (case-insensitive)

        Returns:
            Fee amount

        Raises:
            UnknownCategoryError: If either key has no table entry
        """
        fees = _FEE_INDEX.get((age_category or "").strip().lower())
        if fees is None:
            raise UnknownCategoryError(age_category, performance_type)

        fee = fees.get((performance_type or "").strip().lower())
        if fee is None:
            raise UnknownCategoryError(age_category, performance_type)

        return fee

    @staticmethod
    def base_performance_fee(
        performance_type: str,
        solo_count: int,
        participant_count: int,
    ) -> tuple[int, Optional[int]]:
        """
        Compute the nationals performance fee for a tier.

        Returns:
            Tuple of (base fee, per-participant rate or None for solos)

        Raises:
            ValidationError: If the type is unknown or a count is below 1
        """
        ptype = (performance_type or "").strip().lower()
        if ptype not in _NATIONALS_TYPES:
            raise ValidationError(
                f"Unknown performance type '{performance_type}'",
                field="performanceType",
            )

        if ptype == "solo":
            if solo_count is None or solo_count < 1:
                raise ValidationError("Solo count must be at least 1", field="soloCount")
            if solo_count <= SOLO_PACKAGE_MAX:
                return SOLO_PACKAGES[solo_count], None
            extra = solo_count - SOLO_PACKAGE_MAX
            return SOLO_PACKAGES[SOLO_PACKAGE_MAX] + extra * ADDITIONAL_SOLO_FEE, None

        if participant_count is None or participant_count < 1:
            raise ValidationError(
                "Participant count must be at least 1", field="participantCount"
            )

        if ptype in ("duet", "trio"):
            rate = DUET_TRIO_FEE_PER_DANCER
        elif participant_count >= LARGE_GROUP_MIN_DANCERS:
            rate = LARGE_GROUP_FEE_PER_DANCER
        else:
            rate = SMALL_GROUP_FEE_PER_DANCER

        return rate * participant_count, rate

    def calculate_nationals_fee(
        self,
        performance_type: str,
        solo_count: int,
        participant_count: int,
        participant_ids: Optional[List[str]] = None,
        mastery_level: Optional[str] = None,
    ) -> FeeBreakdown:
        """
        Compute the nationals fee breakdown.

        Args:
            performance_type: Solo, Duet, Trio or Group (case-insensitive)
            solo_count: Number of solos in the package (solo only)
            participant_count: Dancers in the item
            participant_ids: Dancer eodsa ids; registration is charged once per
                distinct id that has not paid for mastery_level
            mastery_level: Mastery level the registration must cover

        Returns:
            FeeBreakdown

        Raises:
            ValidationError: If the type is unknown or a count is below 1
        """
        ptype = (performance_type or "").strip().lower()
        if ptype == "solo" and not participant_count:
            participant_count = 1

        base_fee, rate = self.base_performance_fee(ptype, solo_count, participant_count)

        paid_ids: List[str] = []
        unpaid_ids: List[str] = []
        if participant_ids:
            paid_ids, unpaid_ids = self._partition_by_registration(
                participant_ids, mastery_level
            )
            needing = len(unpaid_ids)
        else:
            needing = participant_count

        registration_fee = needing * REGISTRATION_FEE_PER_DANCER
        total_fee = base_fee + registration_fee

        breakdown = FeeBreakdown(
            performance_type=ptype.capitalize(),
            solo_count=solo_count if ptype == "solo" else 0,
            participant_count=participant_count,
            base_fee=base_fee,
            per_participant_rate=rate,
            registration_fee_per_dancer=REGISTRATION_FEE_PER_DANCER,
            participants_needing_registration=needing,
            registration_fee=registration_fee,
            total_fee=total_fee,
            paid_participant_ids=paid_ids,
            unpaid_participant_ids=unpaid_ids,
            description=self._describe(ptype, solo_count, participant_count, base_fee, needing),
        )

        logger.debug(
            "Calculated nationals fee",
            extra={"extra_fields": {
                "performance_type": breakdown.performance_type,
                "participant_count": participant_count,
                "total_fee": total_fee,
            }},
        )
        return breakdown

    def check_registration_status(
        self,
        dancer_ids: List[str],
        mastery_level: Optional[str] = None,
    ) -> RegistrationStatus:
        """
        Report which dancers still owe the registration fee.

        Args:
            dancer_ids: Dancer eodsa ids (duplicates counted once)
            mastery_level: Mastery level the registration must cover
        """
        paid_ids, unpaid_ids = self._partition_by_registration(dancer_ids, mastery_level)
        return RegistrationStatus(
            total_dancers=len(paid_ids) + len(unpaid_ids),
            dancers_needing_registration=unpaid_ids,
            dancers_already_paid=paid_ids,
            registration_fee_required=len(unpaid_ids) * REGISTRATION_FEE_PER_DANCER,
        )

    def mark_registration_fee_paid(
        self,
        dancer_ids: List[str],
        mastery_level: str,
    ) -> List[Dict[str, Any]]:
        """
        Record the registration fee as paid for each dancer.

        Unknown dancers are reported in the result rather than raised.

        Args:
            dancer_ids: Dancer eodsa ids
            mastery_level: Mastery level the fee was paid for

        Returns:
            List of {"dancer_id", "success", "error"} dicts, one per distinct id
        """
        if not mastery_level:
            raise ValidationError("Mastery level is required", field="masteryLevel")

        self._require_session()
        results: List[Dict[str, Any]] = []
        now = datetime.utcnow()

        for dancer_id in self._dedupe(dancer_ids):
            dancer = self.db.query(Dancer).filter(Dancer.eodsa_id == dancer_id).first()
            if not dancer:
                logger.warning(f"Registration fee not recorded: dancer {dancer_id} not found")
                results.append({"dancer_id": dancer_id, "success": False, "error": "Dancer not found"})
                continue

            dancer.registration_fee_paid = True
            dancer.registration_fee_paid_at = now
            dancer.registration_fee_mastery_level = mastery_level
            results.append({"dancer_id": dancer_id, "success": True, "error": None})

        self.db.commit()

        recorded = sum(1 for r in results if r["success"])
        logger.info(
            f"Recorded registration fee for {recorded}/{len(results)} dancers "
            f"(mastery level {mastery_level})"
        )
        return results

    def _partition_by_registration(
        self,
        dancer_ids: List[str],
        mastery_level: Optional[str],
    ) -> tuple[List[str], List[str]]:
        """Split distinct dancer ids into (paid, unpaid), preserving input order."""
        self._require_session()
        ids = self._dedupe(dancer_ids)
        if not ids:
            return [], []

        dancers = {
            dancer.eodsa_id: dancer
            for dancer in self.db.query(Dancer).filter(Dancer.eodsa_id.in_(ids)).all()
        }

        paid, unpaid = [], []
        for dancer_id in ids:
            dancer = dancers.get(dancer_id)
            if dancer is not None and dancer.has_paid_registration(mastery_level):
                paid.append(dancer_id)
            else:
                unpaid.append(dancer_id)
        return paid, unpaid

    @staticmethod
    def _dedupe(ids: Optional[List[str]]) -> List[str]:
        seen = []
        for value in ids or []:
            value = (value or "").strip()
            if value and value not in seen:
                seen.append(value)
        return seen

    @staticmethod
    def _describe(
        ptype: str,
        solo_count: int,
        participant_count: int,
        base_fee: int,
        needing: int,
    ) -> str:
        if ptype == "solo":
            label = f"{solo_count} solo{'s' if solo_count != 1 else ''} package"
        else:
            label = f"{ptype.capitalize()} ({participant_count} dancers)"

        text = f"{label}: R{base_fee}"
        if needing:
            text += (
                f" + registration R{needing * REGISTRATION_FEE_PER_DANCER}"
                f" ({needing} x R{REGISTRATION_FEE_PER_DANCER})"
            )
        return text

    def _require_session(self) -> None:
        if self.db is None:
            raise RuntimeError("FeeService requires a database session for registration lookups")
