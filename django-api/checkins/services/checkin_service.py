"""Check-in service - the transaction engine.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return ``Ok`` with domain models or ``Err`` with a domain error

A check-in runs every precondition, the insert and both cascading updates in
one store transaction. Any failure inside it rolls the whole unit back.
"""

import logging
from datetime import datetime
from typing import Any
from uuid import uuid4

from django.utils import timezone

from checkins.domain import (
    AthleteId,
    CheckIn,
    CheckInCommand,
    CheckInDetail,
    CheckInId,
    CheckInReceipt,
    EventAvailability,
    EventId,
)
from checkins.domain.errors import (
    AlreadyCheckedInError,
    AthleteNotFoundError,
    CapacityInconsistentError,
    CheckInNotFoundError,
    EventFullError,
    EventNotBookableError,
    EventNotFoundError,
)
from checkins.services.base import (
    AuthorizationPredicate,
    Clock,
    local_date,
    parse_id,
    require_authorized,
    returns_result,
)
from checkins.stores.interfaces import CheckInStore

logger = logging.getLogger(__name__)

RECENT_LIMIT = 100


class CheckInService:
    """Service for creating, correcting and listing check-ins."""

    def __init__(
        self,
        store: CheckInStore,
        is_authorized: AuthorizationPredicate,
        clock: Clock = timezone.now,
    ) -> None:
        self._store = store
        self._is_authorized = is_authorized
        self._clock = clock

    @returns_result
    def create_check_in(self, athlete_id: Any, event_id: Any, notes: str | None = None) -> CheckInReceipt:
        """Check an athlete into today's event.

        Returns ``Err`` with:
            InvalidIdError: If either id is malformed.
            AthleteNotFoundError / EventNotFoundError: If a record is missing.
            EventNotBookableError: If the event is disabled, past or not today.
            AlreadyCheckedInError: If the athlete already checked in.
            EventFullError: If no capacity is left.
            StoreUnavailableError: If the store could not be reached.
        """
        now = self._clock()
        command = CheckInCommand(
            athlete_id=parse_id(AthleteId, athlete_id, "athlete id"),
            event_id=parse_id(EventId, event_id, "event id"),
            notes=notes,
            now=now,
            today=local_date(now),
        )
        with self._store.atomic():
            receipt = self._execute(command)
        logger.info(
            "Athlete %s checked into event %s (waiver validated: %s)",
            command.athlete_id,
            command.event_id,
            receipt.waiver_validated,
        )
        return receipt

    def _execute(self, command: CheckInCommand) -> CheckInReceipt:
        athlete = self._store.get_athlete(command.athlete_id)
        if athlete is None:
            raise AthleteNotFoundError(str(command.athlete_id))

        event = self._store.get_event(command.event_id, for_update=True)
        if event is None:
            raise EventNotFoundError(str(command.event_id))

        availability = event.availability(command.today)
        if availability is not EventAvailability.BOOKABLE:
            raise EventNotBookableError(availability)

        if self._store.check_in_exists(athlete.id, event.id):
            raise AlreadyCheckedInError()

        if not self._store.reserve_slot(event.id):
            raise EventFullError()

        waiver_validated = athlete.waiver_valid_at(command.now)
        check_in = CheckIn(
            id=CheckInId(uuid4()),
            athlete_id=athlete.id,
            event_id=event.id,
            check_in_time=command.now,
            waiver_validated=waiver_validated,
            notes=command.notes,
            created_at=command.now,
        )
        self._store.insert_check_in(check_in)
        self._store.mark_athlete_visited(athlete.id, command.today)

        detail = self._store.get_check_in_detail(check_in.id)
        return CheckInReceipt(detail=detail, waiver_validated=waiver_validated)

    @returns_result
    def reverse_check_in(self, caller: Any, check_in_id: Any) -> None:
        """Delete a check-in and give its slot back to the event."""
        require_authorized(self._is_authorized, caller)
        parsed = parse_id(CheckInId, check_in_id, "check-in id")

        with self._store.atomic():
            check_in = self._store.get_check_in(parsed, for_update=True)
            if check_in is None or not self._store.delete_check_in(parsed):
                raise CheckInNotFoundError(str(parsed))
            if not self._store.release_slot(check_in.event_id):
                logger.error(
                    "Event %s has no capacity to release for check-in %s",
                    check_in.event_id,
                    parsed,
                )
                raise CapacityInconsistentError(str(check_in.event_id))

        logger.info("Check-in %s reversed for event %s", parsed, check_in.event_id)

    @returns_result
    def update_notes(self, check_in_id: Any, notes: str | None) -> CheckInDetail:
        parsed = parse_id(CheckInId, check_in_id, "check-in id")
        with self._store.atomic():
            if not self._store.update_notes(parsed, notes):
                raise CheckInNotFoundError(str(parsed))
            return self._store.get_check_in_detail(parsed)

    @returns_result
    def get_check_in(self, check_in_id: Any) -> CheckInDetail:
        parsed = parse_id(CheckInId, check_in_id, "check-in id")
        with self._store.atomic():
            detail = self._store.get_check_in_detail(parsed)
        if detail is None:
            raise CheckInNotFoundError(str(parsed))
        return detail

    @returns_result
    def list_recent(self, limit: int = RECENT_LIMIT) -> list[CheckInDetail]:
        with self._store.atomic():
            return self._store.list_check_ins(limit=limit)

    @returns_result
    def list_for_event(self, event_id: Any) -> list[CheckInDetail]:
        parsed = parse_id(EventId, event_id, "event id")
        with self._store.atomic():
            return self._store.list_check_ins(event_id=parsed)

    @returns_result
    def list_for_day(self, reference_now: datetime | None = None) -> list[CheckInDetail]:
        day = local_date(reference_now or self._clock())
        with self._store.atomic():
            return self._store.list_check_ins(on_date=day)
