"""Event service - catalog management and listings.

Current capacity is never written here; it belongs to the check-in engine.
"""

import logging
from datetime import date, datetime, time
from typing import Any

from django.utils import timezone

from checkins.domain import Event, EventAvailability, EventDetail, EventId
from checkins.domain.errors import (
    CapacityBelowCheckInsError,
    EventHasCheckInsError,
    EventNotFoundError,
    ValidationFailedError,
)
from checkins.services.base import (
    AuthorizationPredicate,
    Clock,
    local_date,
    parse_id,
    require_authorized,
    returns_result,
)
from checkins.stores.interfaces import CheckInStore, EventStore

logger = logging.getLogger(__name__)

PAST_LIMIT = 20
EDITABLE_FIELDS = frozenset(
    {"name", "description", "date", "start_time", "end_time", "max_capacity", "is_active"}
)


def _validate_capacity(max_capacity: Any) -> None:
    if not isinstance(max_capacity, int) or isinstance(max_capacity, bool) or max_capacity <= 0:
        raise ValidationFailedError("Max capacity must be greater than 0")


class EventService:
    """Service for event catalog operations."""

    def __init__(
        self,
        store: EventStore,
        check_in_store: CheckInStore,
        is_authorized: AuthorizationPredicate,
        clock: Clock = timezone.now,
    ) -> None:
        self._store = store
        self._check_in_store = check_in_store
        self._is_authorized = is_authorized
        self._clock = clock

    @returns_result
    def list_events(self) -> list[Event]:
        """Return all events."""
        with self._store.atomic():
            return self._store.list_events()

    @returns_result
    def list_by_availability(
        self,
        availability: EventAvailability,
        reference_now: datetime | None = None,
    ) -> list[Event]:
        """Return today's bookable events, upcoming disabled ones, or recent past ones."""
        today = local_date(reference_now or self._clock())
        with self._store.atomic():
            if availability is EventAvailability.BOOKABLE:
                return self._store.list_events_on(today, is_active=True)
            if availability is EventAvailability.DISABLED:
                return self._store.list_inactive_from(today)
            if availability is EventAvailability.PAST:
                return self._store.list_before(today, PAST_LIMIT)
        raise ValidationFailedError(f"Unsupported listing: {availability.value}")

    @returns_result
    def get_event(self, event_id: Any) -> EventDetail:
        """Return an event with its check-ins.

        Returns ``Err`` with:
            InvalidIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
        """
        parsed = parse_id(EventId, event_id, "event id")
        with self._store.atomic():
            event = self._store.get_event(parsed)
            if event is None:
                raise EventNotFoundError(str(parsed))
            check_ins = self._check_in_store.list_check_ins(event_id=parsed)
        return EventDetail(event=event, check_ins=tuple(check_ins))

    @returns_result
    def create_event(
        self,
        caller: Any,
        name: str,
        day: date,
        start_time: time,
        end_time: time,
        max_capacity: int,
        description: str = "",
    ) -> Event:
        require_authorized(self._is_authorized, caller)
        if not name or not name.strip():
            raise ValidationFailedError("Event name is required")
        if day is None or start_time is None or end_time is None:
            raise ValidationFailedError("Date, start time and end time are required")
        _validate_capacity(max_capacity)

        with self._store.atomic():
            event = self._store.create_event(
                name=name.strip(),
                description=description or "",
                day=day,
                start_time=start_time,
                end_time=end_time,
                max_capacity=max_capacity,
                created_by_id=getattr(caller, "pk", None),
            )
        logger.info("Event %s created for %s", event.id, event.date)
        return event

    @returns_result
    def update_event(self, caller: Any, event_id: Any, changes: dict[str, Any]) -> Event:
        """Partially update an event. ``None`` values leave a field unchanged."""
        require_authorized(self._is_authorized, caller)
        parsed = parse_id(EventId, event_id, "event id")
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValidationFailedError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")
        changes = {key: value for key, value in changes.items() if value is not None}
        if "name" in changes and not str(changes["name"]).strip():
            raise ValidationFailedError("Event name is required")
        if "max_capacity" in changes:
            _validate_capacity(changes["max_capacity"])

        with self._store.atomic():
            event = self._store.get_event(parsed, for_update=True)
            if event is None:
                raise EventNotFoundError(str(parsed))
            if changes.get("max_capacity", event.max_capacity.value) < event.current_capacity.value:
                raise CapacityBelowCheckInsError(event.current_capacity.value)
            if not changes:
                return event
            return self._store.update_event(parsed, changes)

    @returns_result
    def toggle_event(self, caller: Any, event_id: Any) -> Event:
        require_authorized(self._is_authorized, caller)
        parsed = parse_id(EventId, event_id, "event id")
        with self._store.atomic():
            event = self._store.get_event(parsed, for_update=True)
            if event is None:
                raise EventNotFoundError(str(parsed))
            updated = self._store.update_event(parsed, {"is_active": not event.is_active})
        logger.info("Event %s %s", parsed, "activated" if updated.is_active else "deactivated")
        return updated

    @returns_result
    def delete_event(self, caller: Any, event_id: Any) -> None:
        require_authorized(self._is_authorized, caller)
        parsed = parse_id(EventId, event_id, "event id")
        with self._store.atomic():
            if self._store.get_event(parsed, for_update=True) is None:
                raise EventNotFoundError(str(parsed))
            if self._store.event_has_check_ins(parsed):
                raise EventHasCheckInsError()
            self._store.delete_event(parsed)
        logger.info("Event %s deleted", parsed)
