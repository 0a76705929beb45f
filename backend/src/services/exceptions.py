"""
Custom exceptions for service layer.

Provides specific exception types for business logic errors
that can be translated to appropriate HTTP responses.

Bulk operations never raise for per-item failures; they return a report
instead (see item_number_service.ReorderReport / SyncReport).
"""

from typing import Any, Optional


class ServiceError(Exception):
    """Base exception for service layer errors."""
    pass


class NotFoundError(ServiceError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: Any):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} {identifier} not found")


class ValidationError(ServiceError):
    """Raised when input validation fails."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.message = message
        self.field = field
        super().__init__(message)


class UnknownCategoryError(ValidationError):
    """Raised when a fee lookup key has no entry in the fee schedule."""

    def __init__(self, age_category: str, performance_type: str):
        self.age_category = age_category
        self.performance_type = performance_type
        super().__init__(
            f"No fee defined for age category '{age_category}' "
            f"and performance type '{performance_type}'",
            field="ageCategory",
        )


class ConflictError(ServiceError):
    """Raised when an operation conflicts with existing state."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ItemNumberConflictError(ConflictError):
    """Raised when an item number is already held by another entry of the event."""

    def __init__(self, item_number: int, existing_entry_id: Optional[str] = None):
        self.item_number = item_number
        self.existing_entry_id = existing_entry_id  # GUID format: ent_xxx
        if existing_entry_id:
            message = (
                f"Item number {item_number} is already assigned to entry "
                f"{existing_entry_id}"
            )
        else:
            message = f"Item number {item_number} is already assigned to another entry"
        super().__init__(message)


class DuplicateAssignmentError(ConflictError):
    """Raised when a judge is already assigned to an event."""

    def __init__(self, judge_id: str, event_id: str):
        self.judge_id = judge_id
        self.event_id = event_id
        super().__init__(f"Judge {judge_id} is already assigned to event {event_id}")


class CapacityError(ServiceError):
    """Raised when an event already holds the maximum number of judges."""

    def __init__(self, event_id: str, capacity: int):
        self.event_id = event_id
        self.capacity = capacity
        self.message = (
            f"Event {event_id} already has the maximum of {capacity} judges assigned"
        )
        super().__init__(self.message)


class UnauthorizedError(ServiceError):
    """Raised when the acting judge lacks the rights for an operation."""

    def __init__(self, message: str = "Administrator privileges required"):
        self.message = message
        super().__init__(message)


class RegionAssignmentError(ServiceError):
    """Raised when a regional bulk assignment is aborted by a fatal failure.

    Assignments written before the failure are kept; the counts describe
    the progress made up to the failing event.
    """

    def __init__(
        self,
        cause: ServiceError,
        event_id: str,
        assigned_count: int,
        skipped_count: int,
    ):
        self.cause = cause
        self.event_id = event_id
        self.assigned_count = assigned_count
        self.skipped_count = skipped_count
        self.message = (
            f"Regional assignment aborted at event {event_id}: {cause} "
            f"({assigned_count} assigned, {skipped_count} skipped before failure)"
        )
        super().__init__(self.message)
