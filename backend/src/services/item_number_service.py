"""
Item number service keeping entries and performances in step.

An entry's item number is its running-order position within its event. The
performance materialized from the entry carries a copy of the number; this
service is the only writer of either copy.

Design:
- Uniqueness within an event is enforced by uq_entries_event_item_number;
  the in-service scan only produces a friendlier error first
- A missing performance counterpart is a warning, never an error
- reorder_performances() plans the whole batch against current state, so
  swaps and rotations succeed; items that cannot move are reported and
  keep their current number
- sync_all_item_numbers() is idempotent
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from backend.src.models import Entry, Event, Performance
from backend.src.services.exceptions import (
    ConflictError,
    ItemNumberConflictError,
    ValidationError,
)
from backend.src.services.guid import GuidService
from backend.src.services.lookup import find_by_guid, get_by_guid
from backend.src.utils.logging_config import get_logger


logger = get_logger("services")


@dataclass
class ItemNumberAssignment:
    """
    Outcome of assign_item_number().

    performance_synced is False when the entry has no performance yet; the
    entry update still stands and a warning is attached.
    """
    entry_id: str
    item_number: int
    performance_id: Optional[str] = None
    performance_synced: bool = False
    warnings: List[str] = field(default_factory=list)


@dataclass
class ItemFailure:
    """One failed item of a bulk operation."""
    id: str
    item_number: Optional[int]
    reason: str


@dataclass
class ReorderReport:
    """Result of reorder_performances()."""
    updated_count: int = 0
    failed: List[ItemFailure] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


@dataclass
class SyncReport:
    """Result of sync_all_item_numbers()."""
    checked_count: int = 0
    synced_count: int = 0
    failed: List[ItemFailure] = field(default_factory=list)


@dataclass
class _PlannedMove:
    source_id: str
    entry: Entry
    target: int


class ItemNumberService:
    """
    Service for item number assignment, reordering and reconciliation.

    Usage:
        >>> service = ItemNumberService(db_session)
        >>> result = service.assign_item_number("ent_01hgw...", 12)
        >>> report = service.reorder_performances(
        ...     "evt_01hgw...", [("prf_01hgw...", 1), ("ent_01hgx...", 2)]
        ... )
        >>> service.sync_all_item_numbers().synced_count
        0
    """

    def __init__(self, db: Session):
        """
        Initialize item number service.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    def assign_item_number(self, entry_guid: str, item_number: int) -> ItemNumberAssignment:
        """
        Assign an item number to an entry and mirror it onto its performance.

        Args:
            entry_guid: Entry GUID (ent_xxx)
            item_number: Positive running-order number

        Returns:
            ItemNumberAssignment

        Raises:
            ValidationError: If item_number is not a positive integer
            NotFoundError: If the entry does not exist
            ItemNumberConflictError: If another entry of the event holds the number
        """
        self._validate_item_number(item_number)
        entry = get_by_guid(self.db, Entry, entry_guid)

        holder = self._find_holder(entry.event_id, item_number, exclude_entry_id=entry.id)
        if holder is not None:
            raise ItemNumberConflictError(item_number, holder.guid)

        entry.item_number = item_number
        performance = self._performance_for(entry)
        if performance is not None:
            performance.item_number = item_number

        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.error(f"Item number {item_number} conflict on commit for entry {entry_guid}: {e}")
            holder = self._find_holder(entry.event_id, item_number, exclude_entry_id=entry.id)
            raise ItemNumberConflictError(item_number, holder.guid if holder else None)

        result = ItemNumberAssignment(entry_id=entry.guid, item_number=item_number)
        if performance is not None:
            result.performance_id = performance.guid
            result.performance_synced = True
        else:
            message = f"Entry {entry.guid} has no performance yet; only the entry was updated"
            result.warnings.append(message)
            logger.warning(message)

        logger.info(f"Assigned item number {item_number} to entry {entry.guid}")
        return result

    def reorder_performances(
        self,
        event_guid: str,
        items: Sequence[Tuple[str, int]],
    ) -> ReorderReport:
        """
        Apply a batch of (id, item_number) assignments for one event.

        Ids may be entry GUIDs (ent_xxx) or performance GUIDs (prf_xxx).
        Items that cannot be applied are reported and keep their current
        number; the rest are written together.

        Args:
            event_guid: Event GUID (evt_xxx)
            items: Sequence of (id, item_number) pairs

        Returns:
            ReorderReport

        Raises:
            NotFoundError: If the event does not exist
            ConflictError: If a concurrent writer claimed a planned number
        """
        event = get_by_guid(self.db, Event, event_guid)
        report = ReorderReport()

        moves = self._resolve_batch(event, items, report)
        moves = self._plan(event, moves, report)

        for failure in report.failed:
            logger.warning(
                f"Reorder of event {event.guid}: {failure.id} -> {failure.item_number} "
                f"failed: {failure.reason}"
            )

        if not moves:
            return report

        performances = self._performances_by_entry([m.entry.id for m in moves])

        try:
            # Free every number that is about to move so that swaps and
            # rotations never collide with the unique constraint.
            for move in moves:
                if move.entry.item_number != move.target:
                    move.entry.item_number = None
            self.db.flush()

            for move in moves:
                move.entry.item_number = move.target
                performance = performances.get(move.entry.id)
                if performance is not None:
                    performance.item_number = move.target
                else:
                    report.warnings.append(
                        f"Entry {move.entry.guid} has no performance yet; only the entry was updated"
                    )
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.error(f"Reorder of event {event.guid} lost a race with another writer: {e}")
            raise ConflictError(
                f"Item numbers of event {event.guid} were changed concurrently; retry the reorder"
            )

        report.updated_count = len(moves)
        logger.info(
            f"Reordered event {event.guid}: {report.updated_count} updated, "
            f"{len(report.failed)} failed"
        )
        return report

    def sync_all_item_numbers(self) -> SyncReport:
        """
        Copy every entry's item number onto its performance where they differ.

        Entries without a performance are skipped. A performance attached to
        an entry of another event is reported rather than overwritten.

        Returns:
            SyncReport
        """
        report = SyncReport()
        entries = (
            self.db.query(Entry)
            .filter(Entry.item_number.isnot(None))
            .order_by(Entry.id)
            .all()
        )
        performances = self._performances_by_entry([entry.id for entry in entries])

        for entry in entries:
            report.checked_count += 1
            performance = performances.get(entry.id)
            if performance is None:
                continue

            if performance.event_id != entry.event_id:
                report.failed.append(ItemFailure(
                    id=performance.guid,
                    item_number=entry.item_number,
                    reason=f"Performance belongs to a different event than entry {entry.guid}",
                ))
                continue

            if performance.item_number != entry.item_number:
                performance.item_number = entry.item_number
                report.synced_count += 1

        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Item number sync failed: {e}")
            raise

        for failure in report.failed:
            logger.warning(f"Item number sync skipped {failure.id}: {failure.reason}")
        logger.info(
            f"Item number sync: {report.checked_count} checked, "
            f"{report.synced_count} synced, {len(report.failed)} failed"
        )
        return report

    # -- planning ---------------------------------------------------------

    def _resolve_batch(
        self,
        event: Event,
        items: Sequence[Tuple[str, int]],
        report: ReorderReport,
    ) -> List[_PlannedMove]:
        """Resolve ids to entries of the event, rejecting malformed items."""
        moves: List[_PlannedMove] = []
        seen_entries: Dict[int, str] = {}
        claimed: Dict[int, str] = {}

        for source_id, target in items:
            if not isinstance(target, int) or isinstance(target, bool) or target < 1:
                report.failed.append(ItemFailure(source_id, target, "Item number must be a positive integer"))
                continue

            entry = self._entry_for_source(event, source_id)
            if entry is None:
                report.failed.append(ItemFailure(source_id, target, f"Not found in event {event.guid}"))
                continue

            if entry.id in seen_entries:
                report.failed.append(ItemFailure(
                    source_id, target, f"Entry {entry.guid} appears more than once in the batch"
                ))
                continue

            if target in claimed:
                report.failed.append(ItemFailure(
                    source_id, target, f"Item number {target} is requested by {claimed[target]} in the same batch"
                ))
                continue

            seen_entries[entry.id] = source_id
            claimed[target] = source_id
            moves.append(_PlannedMove(source_id=source_id, entry=entry, target=target))

        return moves

    def _plan(
        self,
        event: Event,
        moves: List[_PlannedMove],
        report: ReorderReport,
    ) -> List[_PlannedMove]:
        """
        Drop moves whose target stays occupied.

        A target is free when nobody holds it or its holder is itself moving.
        Dropping a move pins its entry to its current number, which can block
        further moves, so this repeats until stable.
        """
        holders = {
            entry.item_number: entry
            for entry in self.db.query(Entry)
            .filter(Entry.event_id == event.id, Entry.item_number.isnot(None))
            .all()
        }

        active = list(moves)
        while True:
            moving_ids = {move.entry.id for move in active}
            blocked = []
            for move in active:
                holder = holders.get(move.target)
                if holder is None or holder.id == move.entry.id or holder.id in moving_ids:
                    continue
                blocked.append((move, holder))

            if not blocked:
                return active

            for move, holder in blocked:
                active.remove(move)
                report.failed.append(ItemFailure(
                    move.source_id,
                    move.target,
                    f"Item number {move.target} is already assigned to entry {holder.guid}",
                ))

    def _entry_for_source(self, event: Event, source_id: str) -> Optional[Entry]:
        # find_by_guid returns None for ids that do not decode
        prefix = GuidService.get_prefix(source_id)
        if prefix == Entry.GUID_PREFIX:
            entry = find_by_guid(self.db, Entry, source_id)
            if entry is None or entry.event_id != event.id:
                return None
            return entry
        if prefix == Performance.GUID_PREFIX:
            performance = find_by_guid(self.db, Performance, source_id)
            if performance is None or performance.event_id != event.id:
                return None
            if performance.entry.event_id != event.id:
                return None
            return performance.entry
        return None

    # -- helpers ----------------------------------------------------------

    @staticmethod
    def _validate_item_number(item_number) -> None:
        if not isinstance(item_number, int) or isinstance(item_number, bool) or item_number < 1:
            raise ValidationError("Item number must be a positive integer", field="itemNumber")

    def _find_holder(self, event_id: int, item_number: int, exclude_entry_id: int) -> Optional[Entry]:
        return (
            self.db.query(Entry)
            .filter(
                Entry.event_id == event_id,
                Entry.item_number == item_number,
                Entry.id != exclude_entry_id,
            )
            .first()
        )

    def _performance_for(self, entry: Entry) -> Optional[Performance]:
        return self.db.query(Performance).filter(Performance.entry_id == entry.id).first()

    def _performances_by_entry(self, entry_ids: List[int]) -> Dict[int, Performance]:
        if not entry_ids:
            return {}
        return {
            performance.entry_id: performance
            for performance in self.db.query(Performance)
            .filter(Performance.entry_id.in_(entry_ids))
            .all()
        }
