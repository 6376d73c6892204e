"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
Every store exposes ``atomic()``: a transactional unit that commits when the
block exits normally and rolls back in full when it raises. Store outages
surface from it as ``StoreUnavailableError``.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import date, datetime, time
from typing import Any

from checkins.domain import (
    Athlete,
    AthleteId,
    CheckIn,
    CheckInDetail,
    CheckInId,
    Event,
    EventId,
    ExportFilters,
    ExportRow,
)


class TransactionalStore(ABC):
    @abstractmethod
    def atomic(self) -> AbstractContextManager[None]:
        """Open a transaction; nested calls join the outer one."""
        ...


class AthleteStore(TransactionalStore):
    """Interface for athlete persistence operations."""

    @abstractmethod
    def list_athletes(self) -> list[Athlete]:
        """Return all athletes ordered by first name, last name."""
        ...

    @abstractmethod
    def search_athletes(self, query: str, limit: int) -> list[Athlete]:
        """Case-insensitive substring match on first name, last name or email."""
        ...

    @abstractmethod
    def get_athlete(self, athlete_id: AthleteId) -> Athlete | None:
        """Return an athlete by ID, or None if not found."""
        ...

    @abstractmethod
    def create_athlete(self, fields: dict[str, Any]) -> Athlete:
        """Insert an athlete and return it."""
        ...

    @abstractmethod
    def email_in_use(self, email: str, exclude: AthleteId | None = None) -> bool:
        """Whether an athlete other than ``exclude`` already has this email."""
        ...

    @abstractmethod
    def update_athlete(self, athlete_id: AthleteId, changes: dict[str, Any]) -> Athlete | None:
        """Apply ``changes`` and return the athlete; None if it does not exist."""
        ...

    @abstractmethod
    def update_waiver(
        self,
        athlete_id: AthleteId,
        has_valid_waiver: bool,
        waiver_signed_date: datetime | None,
        waiver_expiration_date: datetime | None,
    ) -> Athlete | None:
        """Replace the waiver fields; None if the athlete does not exist."""
        ...

    @abstractmethod
    def athlete_has_check_ins(self, athlete_id: AthleteId) -> bool:
        ...

    @abstractmethod
    def delete_athlete(self, athlete_id: AthleteId) -> bool:
        ...


class EventStore(TransactionalStore):
    """Interface for event persistence operations."""

    @abstractmethod
    def list_events(self) -> list[Event]:
        """Return all events ordered by date descending, start time ascending."""
        ...

    @abstractmethod
    def list_events_on(self, day: date, is_active: bool) -> list[Event]:
        """Return events dated ``day`` with the given active flag, by start time."""
        ...

    @abstractmethod
    def list_inactive_from(self, day: date) -> list[Event]:
        """Return inactive events dated ``day`` or later, soonest first."""
        ...

    @abstractmethod
    def list_before(self, day: date, limit: int) -> list[Event]:
        """Return events dated before ``day``, most recent first."""
        ...

    @abstractmethod
    def get_event(self, event_id: EventId, *, for_update: bool = False) -> Event | None:
        """Return an event by ID, or None if not found.

        ``for_update`` locks the row until the surrounding transaction ends.
        """
        ...

    @abstractmethod
    def create_event(
        self,
        name: str,
        description: str,
        day: date,
        start_time: time,
        end_time: time,
        max_capacity: int,
        created_by_id: int | None,
    ) -> Event:
        """Insert an active event with no check-ins and return it."""
        ...

    @abstractmethod
    def update_event(self, event_id: EventId, changes: dict[str, Any]) -> Event | None:
        """Apply descriptive field changes. Never touches current capacity."""
        ...

    @abstractmethod
    def delete_event(self, event_id: EventId) -> bool:
        """Delete an event; False if it did not exist."""
        ...

    @abstractmethod
    def event_has_check_ins(self, event_id: EventId) -> bool:
        ...


class CheckInStore(TransactionalStore):
    """Interface for check-in persistence and the capacity counter."""

    @abstractmethod
    def get_athlete(self, athlete_id: AthleteId) -> Athlete | None:
        ...

    @abstractmethod
    def get_event(self, event_id: EventId, *, for_update: bool = False) -> Event | None:
        ...

    @abstractmethod
    def check_in_exists(self, athlete_id: AthleteId, event_id: EventId) -> bool:
        ...

    @abstractmethod
    def reserve_slot(self, event_id: EventId) -> bool:
        """Increment current capacity only if it is below max capacity.

        Returns False when the guard fails and nothing was written.
        """
        ...

    @abstractmethod
    def release_slot(self, event_id: EventId) -> bool:
        """Decrement current capacity only if it is above zero.

        Returns False when the guard fails and nothing was written.
        """
        ...

    @abstractmethod
    def insert_check_in(self, check_in: CheckIn) -> None:
        """Persist a check-in.

        Raises:
            AlreadyCheckedInError: If the store's uniqueness constraint on
                (athlete, event) rejects the row.
        """
        ...

    @abstractmethod
    def mark_athlete_visited(self, athlete_id: AthleteId, visited_on: date) -> None:
        ...

    @abstractmethod
    def get_check_in(self, check_in_id: CheckInId, *, for_update: bool = False) -> CheckIn | None:
        ...

    @abstractmethod
    def get_check_in_detail(self, check_in_id: CheckInId) -> CheckInDetail | None:
        ...

    @abstractmethod
    def delete_check_in(self, check_in_id: CheckInId) -> bool:
        ...

    @abstractmethod
    def update_notes(self, check_in_id: CheckInId, notes: str | None) -> bool:
        ...

    @abstractmethod
    def list_check_ins(
        self,
        *,
        event_id: EventId | None = None,
        on_date: date | None = None,
        limit: int | None = None,
    ) -> list[CheckInDetail]:
        """Return joined check-ins ordered by check-in time descending."""
        ...

    @abstractmethod
    def count_check_ins(
        self,
        *,
        event_id: EventId | None = None,
        on_date: date | None = None,
        since: date | None = None,
        waiver_validated: bool | None = None,
    ) -> int:
        """Count check-ins matching every given filter.

        ``on_date`` and ``since`` compare against the calendar date of
        ``check_in_time``.
        """
        ...

    @abstractmethod
    def export_rows(self, filters: ExportFilters) -> list[ExportRow]:
        """Return flattened rows ordered by check-in time descending."""
        ...
