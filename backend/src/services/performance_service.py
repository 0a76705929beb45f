"""
Performance service for the performance lifecycle.

Handles:
- Materializing a performance from an approved entry
- Withdrawing from and restoring to judging
- Scheduling status transitions
- Nationals qualification of entries

Performances are never deleted. Withdrawal only flips a flag; scores stay
in place so that a restored performance ranks exactly as before.
"""

from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backend.src.models import (
    Dancer,
    Entry,
    Performance,
    PerformanceStatus,
    PERFORMANCE_STATUS_TRANSITIONS,
)
from backend.src.services.exceptions import ConflictError, ValidationError
from backend.src.services.lookup import get_by_guid
from backend.src.utils.logging_config import get_logger


logger = get_logger("services")


WITHDRAWAL_ACTIONS = ("withdraw", "restore")


class PerformanceService:
    """
    Service for performance lifecycle operations.

    Usage:
        >>> service = PerformanceService(db_session)
        >>> performance = service.create_performance_from_entry("ent_...")
        >>> service.set_withdrawal(performance.guid, "withdraw")
        >>> service.update_status(performance.guid, "in_progress")
    """

    def __init__(self, db: Session):
        """
        Initialize performance service.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    def get_by_guid(self, guid: str) -> Performance:
        """Get a performance by GUID (raises NotFoundError)."""
        return get_by_guid(self.db, Performance, guid)

    def create_performance_from_entry(self, entry_guid: str) -> Performance:
        """
        Materialize the performance of an approved entry.

        Returns the existing performance unchanged if there already is one.

        Raises:
            NotFoundError: If the entry does not exist
            ValidationError: If the entry is not approved
        """
        entry = get_by_guid(self.db, Entry, entry_guid)

        existing = self._for_entry(entry.id)
        if existing is not None:
            return existing

        if not entry.approved:
            raise ValidationError(
                f"Entry {entry.guid} must be approved before it can perform",
                field="entryId",
            )

        performance = Performance(
            event_id=entry.event_id,
            entry_id=entry.id,
            contestant_id=entry.contestant_id,
            title=entry.item_name,
            participant_names=self._participant_names(entry),
            duration=entry.estimated_duration,
            choreographer=entry.choreographer,
            mastery=entry.mastery,
            item_style=entry.item_style,
            item_number=entry.item_number,
            status=PerformanceStatus.SCHEDULED.value,
            withdrawn_from_judging=False,
        )
        try:
            self.db.add(performance)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            existing = self._for_entry(entry.id)
            if existing is None:
                logger.error(f"Failed to create performance for entry {entry_guid}: {e}")
                raise
            return existing

        self.db.refresh(performance)
        logger.info(f"Created performance {performance.guid} from entry {entry.guid}")
        return performance

    def set_withdrawal(self, performance_guid: str, action: str) -> Performance:
        """
        Withdraw a performance from judging or restore it.

        Args:
            performance_guid: Performance GUID (prf_xxx)
            action: "withdraw" or "restore"

        Raises:
            NotFoundError: If the performance does not exist
            ValidationError: If the action is unknown
        """
        if action not in WITHDRAWAL_ACTIONS:
            raise ValidationError(
                f"Action must be one of: {', '.join(WITHDRAWAL_ACTIONS)}",
                field="action",
            )

        performance = self.get_by_guid(performance_guid)
        performance.withdrawn_from_judging = action == "withdraw"
        self.db.commit()
        self.db.refresh(performance)

        logger.info(f"Performance {performance.guid}: {action}")
        return performance

    def update_status(self, performance_guid: str, status: str) -> Performance:
        """
        Move a performance to a new scheduling status.

        Setting the current status again is a no-op.

        Raises:
            NotFoundError: If the performance does not exist
            ValidationError: If the status is unknown
            ConflictError: If the transition is not allowed
        """
        valid = [s.value for s in PerformanceStatus]
        if status not in valid:
            raise ValidationError(
                f"Status must be one of: {', '.join(valid)}",
                field="status",
            )

        performance = self.get_by_guid(performance_guid)
        current = performance.status
        if current == status:
            return performance

        if status not in PERFORMANCE_STATUS_TRANSITIONS.get(current, set()):
            raise ConflictError(
                f"Cannot change performance {performance.guid} from {current} to {status}"
            )

        performance.status = status
        self.db.commit()
        self.db.refresh(performance)

        logger.info(f"Performance {performance.guid} status: {current} -> {status}")
        return performance

    def set_qualification(self, entry_guid: str, qualified: bool) -> Entry:
        """
        Set or clear an entry's nationals qualification.

        Raises:
            NotFoundError: If the entry does not exist
        """
        entry = get_by_guid(self.db, Entry, entry_guid)
        entry.qualified_for_nationals = bool(qualified)
        self.db.commit()
        self.db.refresh(entry)

        logger.info(
            f"Entry {entry.guid} {'qualified' if qualified else 'unqualified'} for nationals"
        )
        return entry

    def _for_entry(self, entry_id: int) -> Optional[Performance]:
        return self.db.query(Performance).filter(Performance.entry_id == entry_id).first()

    def _participant_names(self, entry: Entry) -> list:
        ids = list(entry.participant_ids or [])
        if not ids:
            return []
        names = {
            dancer.eodsa_id: dancer.name
            for dancer in self.db.query(Dancer).filter(Dancer.eodsa_id.in_(ids)).all()
        }
        return [names.get(dancer_id, dancer_id) for dancer_id in ids]
