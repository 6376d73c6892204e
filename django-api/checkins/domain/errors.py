"""Domain error codes for the check-in module.

Every failure a service can report is a ``DomainError``. The ``kind`` of the
error is stable and is what callers branch on; the ``code`` narrows it down.
"""

from dataclasses import dataclass
from enum import Enum


class ErrorKind(Enum):
    """Coarse error categories exposed to callers."""

    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    VALIDATION = "VALIDATION"
    AUTHORIZATION = "AUTHORIZATION"
    INTERNAL_CONSISTENCY = "INTERNAL_CONSISTENCY"
    TRANSIENT = "TRANSIENT"


class ErrorCode(Enum):
    """Domain error codes."""

    ATHLETE_NOT_FOUND = "ATHLETE_NOT_FOUND"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    CHECK_IN_NOT_FOUND = "CHECK_IN_NOT_FOUND"
    ALREADY_CHECKED_IN = "ALREADY_CHECKED_IN"
    EVENT_FULL = "EVENT_FULL"
    EVENT_NOT_BOOKABLE = "EVENT_NOT_BOOKABLE"
    EVENT_HAS_CHECK_INS = "EVENT_HAS_CHECK_INS"
    ATHLETE_HAS_CHECK_INS = "ATHLETE_HAS_CHECK_INS"
    CAPACITY_BELOW_CHECK_INS = "CAPACITY_BELOW_CHECK_INS"
    INVALID_ID = "INVALID_ID"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    NOT_AUTHORIZED = "NOT_AUTHORIZED"
    CAPACITY_INCONSISTENT = "CAPACITY_INCONSISTENT"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"

    @property
    def kind(self) -> ErrorKind:
        return _KINDS[self]


_KINDS = {
    ErrorCode.ATHLETE_NOT_FOUND: ErrorKind.NOT_FOUND,
    ErrorCode.EVENT_NOT_FOUND: ErrorKind.NOT_FOUND,
    ErrorCode.CHECK_IN_NOT_FOUND: ErrorKind.NOT_FOUND,
    ErrorCode.ALREADY_CHECKED_IN: ErrorKind.CONFLICT,
    ErrorCode.EVENT_FULL: ErrorKind.CONFLICT,
    ErrorCode.EVENT_NOT_BOOKABLE: ErrorKind.CONFLICT,
    ErrorCode.EVENT_HAS_CHECK_INS: ErrorKind.CONFLICT,
    ErrorCode.ATHLETE_HAS_CHECK_INS: ErrorKind.CONFLICT,
    ErrorCode.CAPACITY_BELOW_CHECK_INS: ErrorKind.CONFLICT,
    ErrorCode.INVALID_ID: ErrorKind.VALIDATION,
    ErrorCode.VALIDATION_FAILED: ErrorKind.VALIDATION,
    ErrorCode.NOT_AUTHORIZED: ErrorKind.AUTHORIZATION,
    ErrorCode.CAPACITY_INCONSISTENT: ErrorKind.INTERNAL_CONSISTENCY,
    ErrorCode.STORE_UNAVAILABLE: ErrorKind.TRANSIENT,
}


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    @property
    def kind(self) -> ErrorKind:
        return self.code.kind

    @property
    def retryable(self) -> bool:
        return self.kind is ErrorKind.TRANSIENT

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class AthleteNotFoundError(DomainError):
    """Raised when an athlete is not found."""

    def __init__(self, athlete_id: str) -> None:
        super().__init__(
            code=ErrorCode.ATHLETE_NOT_FOUND,
            message="Athlete not found",
        )
        self.athlete_id = athlete_id


class EventNotFoundError(DomainError):
    """Raised when an event is not found."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        self.event_id = event_id


class CheckInNotFoundError(DomainError):
    """Raised when a check-in is not found."""

    def __init__(self, check_in_id: str) -> None:
        super().__init__(
            code=ErrorCode.CHECK_IN_NOT_FOUND,
            message="Check-in not found",
        )
        self.check_in_id = check_in_id


class AlreadyCheckedInError(DomainError):
    """Raised when the athlete already holds a check-in for the event."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.ALREADY_CHECKED_IN,
            message="Athlete already checked in for this event",
        )


class EventFullError(DomainError):
    """Raised when no capacity slot is left."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.EVENT_FULL,
            message="Event is at full capacity",
        )


class EventNotBookableError(DomainError):
    """Raised when the event is not open for check-ins today."""

    def __init__(self, availability) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_BOOKABLE,
            message=f"Event is not open for check-in ({availability.value})",
        )
        self.availability = availability


class EventHasCheckInsError(DomainError):
    """Raised when deleting an event that still has check-ins."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.EVENT_HAS_CHECK_INS,
            message="Cannot delete event with existing check-ins. Deactivate it instead.",
        )


class CapacityBelowCheckInsError(DomainError):
    """Raised when max capacity would drop below the live check-in count."""

    def __init__(self, current: int) -> None:
        super().__init__(
            code=ErrorCode.CAPACITY_BELOW_CHECK_INS,
            message=f"Max capacity cannot be lower than the {current} existing check-ins",
        )


class InvalidIdError(DomainError):
    """Raised when an identifier is malformed."""

    def __init__(self, field: str = "id") -> None:
        super().__init__(
            code=ErrorCode.INVALID_ID,
            message=f"Invalid {field} format",
        )
        self.field = field


class ValidationFailedError(DomainError):
    """Raised when required fields are missing or malformed."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.VALIDATION_FAILED, message=message)


class NotAuthorizedError(DomainError):
    """Raised when the caller may not perform an administrative operation."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.NOT_AUTHORIZED,
            message="Not authorized to perform this operation",
        )


class CapacityInconsistentError(DomainError):
    """Raised when stored capacity disagrees with the check-in rows."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.CAPACITY_INCONSISTENT,
            message="Event capacity is inconsistent with its check-ins",
        )
        self.event_id = event_id


class StoreUnavailableError(DomainError):
    """Raised when the store cannot be reached. Safe to retry."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.STORE_UNAVAILABLE,
            message="Storage temporarily unavailable, please retry",
        )


class AthleteHasCheckInsError(DomainError):
    """Raised when deleting an athlete that still has check-ins."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.ATHLETE_HAS_CHECK_INS,
            message="Cannot delete athlete with existing check-ins",
        )


class EmailInUseError(ValidationFailedError):
    """Raised when another athlete already uses the email address."""

    def __init__(self) -> None:
        super().__init__("Athlete with this email already exists")
