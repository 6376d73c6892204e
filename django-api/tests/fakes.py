"""In-memory store and domain factories for service tests.

Writes are individually atomic and transactions roll back their own writes
when the block raises, which gives the services the same all-or-nothing
contract as the database without serializing concurrent callers.
"""

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import replace
from datetime import date, datetime, time, timezone
from uuid import uuid4

from checkins.domain import (
    Athlete,
    AthleteId,
    Capacity,
    CheckIn,
    CheckInDetail,
    CheckInId,
    Event,
    EventId,
    ExportFilters,
    ExportRow,
)
from checkins.domain.errors import AlreadyCheckedInError, StoreUnavailableError
from checkins.services.base import local_date
from checkins.stores.interfaces import CheckInStore

NOW = datetime(2026, 10, 19, 15, 30, tzinfo=timezone.utc)
TODAY = NOW.date()


def make_athlete(**overrides) -> Athlete:
    fields = dict(
        id=AthleteId(uuid4()),
        first_name="Ada",
        last_name="Lovelace",
        email="ada@example.com",
        phone=None,
        date_of_birth=date(1990, 1, 1),
        emergency_contact=None,
        emergency_contact_email=None,
        emergency_phone=None,
        has_valid_waiver=True,
        waiver_signed_date=None,
        waiver_expiration_date=None,
        last_visited=None,
        created_at=NOW,
        updated_at=NOW,
    )
    fields.update(overrides)
    return Athlete(**fields)


def make_event(**overrides) -> Event:
    fields = dict(
        id=EventId(uuid4()),
        name="Open Gym",
        description="",
        date=TODAY,
        start_time=time(9, 0),
        end_time=time(11, 0),
        max_capacity=Capacity(10),
        current_capacity=Capacity(0),
        is_active=True,
        created_by_id=None,
        created_at=NOW,
        updated_at=NOW,
    )
    fields.update(overrides)
    return Event(**fields)


class InMemoryCheckInStore(CheckInStore):
    """Each write is atomic on its own, like a conditional row update.

    Transactions are not serialized: concurrent callers interleave freely
    between writes, and a failing transaction undoes only its own writes.
    """

    def __init__(self) -> None:
        self.athletes: dict[AthleteId, Athlete] = {}
        self.events: dict[EventId, Event] = {}
        self.check_ins: dict[CheckInId, CheckIn] = {}
        self.unavailable = False
        self.fail_after_insert: Exception | None = None
        self._lock = threading.Lock()
        self._local = threading.local()

    def add_athlete(self, athlete: Athlete) -> Athlete:
        self.athletes[athlete.id] = athlete
        return athlete

    def add_event(self, event: Event) -> Event:
        self.events[event.id] = event
        return event

    @contextmanager
    def atomic(self) -> Iterator[None]:
        if self.unavailable:
            raise StoreUnavailableError()
        if getattr(self._local, "undo", None) is not None:
            yield
            return
        self._local.undo = []
        try:
            yield
        except BaseException:
            with self._lock:
                for undo in reversed(self._local.undo):
                    undo()
            raise
        finally:
            self._local.undo = None

    def _on_rollback(self, undo) -> None:
        log = getattr(self._local, "undo", None)
        if log is not None:
            log.append(undo)

    def _shift_capacity(self, event_id: EventId, delta: int) -> None:
        event = self.events[event_id]
        self.events[event_id] = replace(event, current_capacity=Capacity(event.current_capacity.value + delta))

    def get_athlete(self, athlete_id: AthleteId) -> Athlete | None:
        return self.athletes.get(athlete_id)

    def get_event(self, event_id: EventId, *, for_update: bool = False) -> Event | None:
        return self.events.get(event_id)

    def _has_check_in(self, athlete_id: AthleteId, event_id: EventId) -> bool:
        return any(
            c.athlete_id == athlete_id and c.event_id == event_id for c in list(self.check_ins.values())
        )

    def check_in_exists(self, athlete_id: AthleteId, event_id: EventId) -> bool:
        return self._has_check_in(athlete_id, event_id)

    def reserve_slot(self, event_id: EventId) -> bool:
        with self._lock:
            event = self.events[event_id]
            if event.current_capacity.value >= event.max_capacity.value:
                return False
            self._shift_capacity(event_id, 1)
        self._on_rollback(lambda: self._shift_capacity(event_id, -1))
        return True

    def release_slot(self, event_id: EventId) -> bool:
        with self._lock:
            event = self.events[event_id]
            if event.current_capacity.value <= 0:
                return False
            self._shift_capacity(event_id, -1)
        self._on_rollback(lambda: self._shift_capacity(event_id, 1))
        return True

    def insert_check_in(self, check_in: CheckIn) -> None:
        with self._lock:
            if self._has_check_in(check_in.athlete_id, check_in.event_id):
                raise AlreadyCheckedInError()
            self.check_ins[check_in.id] = check_in
        self._on_rollback(lambda: self.check_ins.pop(check_in.id, None))
        if self.fail_after_insert is not None:
            raise self.fail_after_insert

    def mark_athlete_visited(self, athlete_id: AthleteId, visited_on: date) -> None:
        with self._lock:
            previous = self.athletes[athlete_id]
            self.athletes[athlete_id] = replace(previous, last_visited=visited_on)
        self._on_rollback(lambda: self.athletes.__setitem__(athlete_id, previous))

    def get_check_in(self, check_in_id: CheckInId, *, for_update: bool = False) -> CheckIn | None:
        return self.check_ins.get(check_in_id)

    def _detail(self, check_in: CheckIn) -> CheckInDetail:
        athlete = self.athletes[check_in.athlete_id]
        event = self.events[check_in.event_id]
        return CheckInDetail(
            check_in=check_in,
            first_name=athlete.first_name,
            last_name=athlete.last_name,
            email=athlete.email,
            phone=athlete.phone,
            event_name=event.name,
            event_date=event.date,
        )

    def get_check_in_detail(self, check_in_id: CheckInId) -> CheckInDetail | None:
        check_in = self.check_ins.get(check_in_id)
        return self._detail(check_in) if check_in else None

    def delete_check_in(self, check_in_id: CheckInId) -> bool:
        with self._lock:
            removed = self.check_ins.pop(check_in_id, None)
        if removed is None:
            return False
        self._on_rollback(lambda: self.check_ins.__setitem__(check_in_id, removed))
        return True

    def update_notes(self, check_in_id: CheckInId, notes: str | None) -> bool:
        with self._lock:
            previous = self.check_ins.get(check_in_id)
            if previous is None:
                return False
            self.check_ins[check_in_id] = replace(previous, notes=notes)
        self._on_rollback(lambda: self.check_ins.__setitem__(check_in_id, previous))
        return True

    def _newest_first(self) -> list[CheckIn]:
        return sorted(self.check_ins.values(), key=lambda c: c.check_in_time, reverse=True)

    def list_check_ins(
        self,
        *,
        event_id: EventId | None = None,
        on_date: date | None = None,
        limit: int | None = None,
    ) -> list[CheckInDetail]:
        rows = [
            c
            for c in self._newest_first()
            if (event_id is None or c.event_id == event_id)
            and (on_date is None or local_date(c.check_in_time) == on_date)
        ]
        return [self._detail(c) for c in rows[:limit]]

    def count_check_ins(
        self,
        *,
        event_id: EventId | None = None,
        on_date: date | None = None,
        since: date | None = None,
        waiver_validated: bool | None = None,
    ) -> int:
        return sum(
            1
            for c in self.check_ins.values()
            if (event_id is None or c.event_id == event_id)
            and (on_date is None or local_date(c.check_in_time) == on_date)
            and (since is None or local_date(c.check_in_time) >= since)
            and (waiver_validated is None or c.waiver_validated == waiver_validated)
        )

    def export_rows(self, filters: ExportFilters) -> list[ExportRow]:
        rows = []
        for c in self._newest_first():
            day = local_date(c.check_in_time)
            if filters.start_date and day < filters.start_date:
                continue
            if filters.end_date and day > filters.end_date:
                continue
            if filters.event_id and c.event_id != filters.event_id:
                continue
            athlete, event = self.athletes[c.athlete_id], self.events[c.event_id]
            rows.append(
                ExportRow(
                    check_in_id=c.id,
                    check_in_time=c.check_in_time,
                    waiver_validated=c.waiver_validated,
                    notes=c.notes,
                    athlete_id=athlete.id,
                    first_name=athlete.first_name,
                    last_name=athlete.last_name,
                    email=athlete.email,
                    phone=athlete.phone,
                    date_of_birth=athlete.date_of_birth,
                    emergency_contact=athlete.emergency_contact,
                    emergency_phone=athlete.emergency_phone,
                    event_id=event.id,
                    event_name=event.name,
                    event_date=event.date,
                    start_time=event.start_time,
                    end_time=event.end_time,
                )
            )
        return rows
