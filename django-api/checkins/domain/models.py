"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in checkins/models.py (persistence layer).
"""

from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal

from checkins.domain.eligibility import EventAvailability, classify_event
from checkins.domain.value_objects import AthleteId, Capacity, CheckInId, EventId
from checkins.domain.waiver import is_waiver_valid


@dataclass(frozen=True)
class Athlete:
    """Domain representation of an Athlete."""

    id: AthleteId
    first_name: str
    last_name: str
    email: str | None
    phone: str | None
    date_of_birth: date | None
    emergency_contact: str | None
    emergency_contact_email: str | None
    emergency_phone: str | None
    has_valid_waiver: bool
    waiver_signed_date: datetime | None
    waiver_expiration_date: datetime | None
    last_visited: date | None
    created_at: datetime
    updated_at: datetime

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def waiver_valid_at(self, now: datetime) -> bool:
        return is_waiver_valid(self.has_valid_waiver, self.waiver_expiration_date, now)


@dataclass(frozen=True)
class Event:
    """Domain representation of an Event."""

    id: EventId
    name: str
    description: str
    date: date
    start_time: time
    end_time: time
    max_capacity: Capacity
    current_capacity: Capacity
    is_active: bool
    created_by_id: int | None
    created_at: datetime
    updated_at: datetime

    def availability(self, today: date) -> EventAvailability:
        return classify_event(self.date, self.is_active, today)


@dataclass(frozen=True)
class CheckIn:
    """Domain representation of a CheckIn row."""

    id: CheckInId
    athlete_id: AthleteId
    event_id: EventId
    check_in_time: datetime
    waiver_validated: bool
    notes: str | None
    created_at: datetime


@dataclass(frozen=True)
class CheckInDetail:
    """A check-in joined with the athlete and event it references."""

    check_in: CheckIn
    first_name: str
    last_name: str
    email: str | None
    phone: str | None
    event_name: str
    event_date: date


@dataclass(frozen=True)
class CheckInReceipt:
    """Outcome of a successful check-in."""

    detail: CheckInDetail
    waiver_validated: bool

    @property
    def message(self) -> str:
        if self.waiver_validated:
            return "Check-in successful - waiver validated"
        return "Check-in successful - WAIVER VALIDATION REQUIRED"


@dataclass(frozen=True)
class CheckInCommand:
    """Everything one check-in transaction needs, fixed before it starts."""

    athlete_id: AthleteId
    event_id: EventId
    notes: str | None
    now: datetime
    today: date


@dataclass(frozen=True)
class EventDetail:
    """An event together with its check-ins."""

    event: Event
    check_ins: tuple[CheckInDetail, ...] = ()


@dataclass(frozen=True)
class CheckInStats:
    """Venue-wide check-in counts as of a reference instant."""

    today: int
    this_week: int
    total: int
    waiver_validated: int
    waiver_not_validated: int


@dataclass(frozen=True)
class EventStats:
    """Per-event check-in counts."""

    event_id: EventId
    availability: EventAvailability
    total_check_ins: int
    waiver_validated: int
    waiver_not_validated: int
    capacity_used: Decimal


@dataclass(frozen=True)
class ExportRow:
    """One flattened check-in + athlete + event row for reporting."""

    check_in_id: CheckInId
    check_in_time: datetime
    waiver_validated: bool
    notes: str | None
    athlete_id: AthleteId
    first_name: str
    last_name: str
    email: str | None
    phone: str | None
    date_of_birth: date | None
    emergency_contact: str | None
    emergency_phone: str | None
    event_id: EventId
    event_name: str
    event_date: date
    start_time: time
    end_time: time


@dataclass(frozen=True)
class ExportFilters:
    start_date: date | None = None
    end_date: date | None = None
    event_id: EventId | None = None


@dataclass(frozen=True)
class CheckInExport:
    rows: tuple[ExportRow, ...]
    exported_at: datetime
    filters: ExportFilters
