"""
Judge assignment service for allocating judges to events.

Design:
- An event holds at most MAX_JUDGES_PER_EVENT assignments
- A (judge, event) pair is assigned at most once
- Both rules are checked up front for a clear error, then enforced in the
  store: uq_judge_event_assignment covers duplicates, and the capacity
  count runs under a row lock on the event and is re-checked after the
  insert is flushed
- Regional assignment is a set union over the region's events; existing
  assignments are skipped, any other failure aborts the sweep
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backend.src.models import (
    Event,
    Judge,
    JudgeEventAssignment,
    AssignmentStatus,
    MAX_JUDGES_PER_EVENT,
)
from backend.src.services.exceptions import (
    CapacityError,
    DuplicateAssignmentError,
    RegionAssignmentError,
    ServiceError,
    ValidationError,
)
from backend.src.services.lookup import find_by_guid, get_by_guid
from backend.src.utils.logging_config import get_logger


logger = get_logger("services")


@dataclass
class RegionAssignmentResult:
    """Outcome of assign_judge_to_region()."""
    region: str
    total_events: int
    assigned_count: int
    skipped_count: int


class JudgeAssignmentService:
    """
    Service for judge-to-event allocation.

    Usage:
        >>> service = JudgeAssignmentService(db_session)
        >>> assignment = service.assign_judge_to_event("jdg_...", "evt_...", "jdg_admin...")
        >>> result = service.assign_judge_to_region("jdg_...", "Nationals", "jdg_admin...")
        >>> (result.assigned_count, result.skipped_count)
        (3, 1)
    """

    def __init__(self, db: Session):
        """
        Initialize judge assignment service.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    def assign_judge_to_event(
        self,
        judge_guid: str,
        event_guid: str,
        assigned_by: str,
    ) -> JudgeEventAssignment:
        """
        Assign a judge to an event.

        Args:
            judge_guid: Judge GUID (jdg_xxx)
            event_guid: Event GUID (evt_xxx)
            assigned_by: Identifier of the assigning administrator

        Returns:
            Created JudgeEventAssignment

        Raises:
            NotFoundError: If the judge or event does not exist
            DuplicateAssignmentError: If the judge is already assigned
            CapacityError: If the event already has the maximum of judges
        """
        judge = get_by_guid(self.db, Judge, judge_guid)
        event = get_by_guid(self.db, Event, event_guid)
        return self._assign(judge, event, assigned_by)

    def assign_judge_to_region(
        self,
        judge_guid: str,
        region: str,
        assigned_by: str,
    ) -> RegionAssignmentResult:
        """
        Assign a judge to every event of a region (case-insensitive).

        Events that already include the judge are skipped. The first other
        failure stops the sweep; assignments made before it are kept.

        Args:
            judge_guid: Judge GUID (jdg_xxx)
            region: Region name
            assigned_by: Identifier of the assigning administrator

        Returns:
            RegionAssignmentResult

        Raises:
            NotFoundError: If the judge does not exist
            ValidationError: If the region is empty or has no events
            RegionAssignmentError: If an assignment fails for a reason other
                than a duplicate
        """
        if not region or not region.strip():
            raise ValidationError("Region is required", field="region")

        judge = get_by_guid(self.db, Judge, judge_guid)
        events = (
            self.db.query(Event)
            .filter(func.lower(Event.region) == region.strip().lower())
            .order_by(Event.id)
            .all()
        )
        if not events:
            raise ValidationError(f"No events found for region '{region}'", field="region")

        assigned_count = 0
        skipped_count = 0
        for event in events:
            try:
                self._assign(judge, event, assigned_by)
                assigned_count += 1
            except DuplicateAssignmentError:
                skipped_count += 1
                logger.warning(f"Judge {judge.guid} already assigned to event {event.guid}; skipped")
            except ServiceError as e:
                logger.error(
                    f"Regional assignment of judge {judge.guid} to '{region}' "
                    f"aborted at event {event.guid}: {e}"
                )
                raise RegionAssignmentError(e, event.guid, assigned_count, skipped_count)

        logger.info(
            f"Assigned judge {judge.guid} to region '{region}': "
            f"{assigned_count} assigned, {skipped_count} skipped of {len(events)} events"
        )
        return RegionAssignmentResult(
            region=region,
            total_events=len(events),
            assigned_count=assigned_count,
            skipped_count=skipped_count,
        )

    def remove_assignment(self, assignment_guid: str) -> bool:
        """
        Remove an assignment. Removing a missing assignment is not an error.

        Args:
            assignment_guid: Assignment GUID (asg_xxx)

        Returns:
            True if a row was deleted, False if it was already gone
        """
        assignment = find_by_guid(self.db, JudgeEventAssignment, assignment_guid)
        if assignment is None:
            logger.info(f"Assignment {assignment_guid} already absent")
            return False

        self.db.delete(assignment)
        self.db.commit()
        logger.info(f"Removed judge assignment {assignment_guid}")
        return True

    def list_event_assignments(self, event_guid: str) -> List[JudgeEventAssignment]:
        """List the assignments of an event, oldest first."""
        event = get_by_guid(self.db, Event, event_guid)
        return (
            self.db.query(JudgeEventAssignment)
            .filter(JudgeEventAssignment.event_id == event.id)
            .order_by(JudgeEventAssignment.assigned_at, JudgeEventAssignment.id)
            .all()
        )

    def list_judge_assignments(self, judge_guid: str) -> List[JudgeEventAssignment]:
        """List the assignments of a judge, oldest first."""
        judge = get_by_guid(self.db, Judge, judge_guid)
        return (
            self.db.query(JudgeEventAssignment)
            .filter(JudgeEventAssignment.judge_id == judge.id)
            .order_by(JudgeEventAssignment.assigned_at, JudgeEventAssignment.id)
            .all()
        )

    def is_assigned(self, judge_id: int, event_id: int) -> bool:
        """Check whether a judge holds an active assignment for an event."""
        return (
            self.db.query(JudgeEventAssignment.id)
            .filter(
                JudgeEventAssignment.judge_id == judge_id,
                JudgeEventAssignment.event_id == event_id,
                JudgeEventAssignment.status == AssignmentStatus.ACTIVE.value,
            )
            .first()
            is not None
        )

    def _assign(self, judge: Judge, event: Event, assigned_by: str) -> JudgeEventAssignment:
        # Serializes concurrent allocations for the same event (no-op on SQLite)
        self.db.query(Event).filter(Event.id == event.id).with_for_update().one()

        if self._has_assignment(judge.id, event.id):
            self.db.rollback()
            raise DuplicateAssignmentError(judge.guid, event.guid)

        if self._count(event.id) >= MAX_JUDGES_PER_EVENT:
            self.db.rollback()
            raise CapacityError(event.guid, MAX_JUDGES_PER_EVENT)

        assignment = JudgeEventAssignment(
            judge_id=judge.id,
            event_id=event.id,
            assigned_by=assigned_by,
            assigned_at=datetime.utcnow(),
            status=AssignmentStatus.ACTIVE.value,
        )
        try:
            self.db.add(assignment)
            self.db.flush()

            if self._count(event.id) > MAX_JUDGES_PER_EVENT:
                self.db.rollback()
                raise CapacityError(event.guid, MAX_JUDGES_PER_EVENT)

            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Duplicate assignment rejected by store for judge {judge.guid}: {e}")
            raise DuplicateAssignmentError(judge.guid, event.guid)

        self.db.refresh(assignment)
        logger.info(
            f"Assigned judge {judge.guid} to event {event.guid} "
            f"({assignment.guid}) by {assigned_by}"
        )
        return assignment

    def _has_assignment(self, judge_id: int, event_id: int) -> bool:
        return (
            self.db.query(JudgeEventAssignment.id)
            .filter(
                JudgeEventAssignment.judge_id == judge_id,
                JudgeEventAssignment.event_id == event_id,
            )
            .first()
            is not None
        )

    def _count(self, event_id: int) -> int:
        return (
            self.db.query(func.count(JudgeEventAssignment.id))
            .filter(JudgeEventAssignment.event_id == event_id)
            .scalar()
        )
