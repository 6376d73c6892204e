"""Django ORM implementation of the stores.

Capacity is only ever changed through conditional ``UPDATE`` statements whose
``WHERE`` clause carries the guard, so the database decides the race and the
affected-row count tells the caller whether it won.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, datetime, time
from typing import Any

from django.db import IntegrityError, InterfaceError, OperationalError, transaction
from django.db.models import F, ProtectedError, Q, QuerySet
from django.utils import timezone

from checkins import models as orm
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
from checkins.domain.errors import (
    AlreadyCheckedInError,
    AthleteHasCheckInsError,
    CapacityBelowCheckInsError,
    EmailInUseError,
    StoreUnavailableError,
)
from checkins.stores.interfaces import AthleteStore, CheckInStore, EventStore

logger = logging.getLogger(__name__)


def _athlete(row: orm.Athlete) -> Athlete:
    return Athlete(
        id=AthleteId(row.id),
        first_name=row.first_name,
        last_name=row.last_name,
        email=row.email,
        phone=row.phone,
        date_of_birth=row.date_of_birth,
        emergency_contact=row.emergency_contact,
        emergency_contact_email=row.emergency_contact_email,
        emergency_phone=row.emergency_phone,
        has_valid_waiver=row.has_valid_waiver,
        waiver_signed_date=row.waiver_signed_date,
        waiver_expiration_date=row.waiver_expiration_date,
        last_visited=row.last_visited,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _event(row: orm.Event) -> Event:
    return Event(
        id=EventId(row.id),
        name=row.name,
        description=row.description,
        date=row.date,
        start_time=row.start_time,
        end_time=row.end_time,
        max_capacity=Capacity(row.max_capacity),
        current_capacity=Capacity(row.current_capacity),
        is_active=row.is_active,
        created_by_id=row.created_by_id,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _check_in(row: orm.CheckIn) -> CheckIn:
    return CheckIn(
        id=CheckInId(row.id),
        athlete_id=AthleteId(row.athlete_id),
        event_id=EventId(row.event_id),
        check_in_time=row.check_in_time,
        waiver_validated=row.waiver_validated,
        notes=row.notes,
        created_at=row.created_at,
    )


def _detail(row: orm.CheckIn) -> CheckInDetail:
    return CheckInDetail(
        check_in=_check_in(row),
        first_name=row.athlete.first_name,
        last_name=row.athlete.last_name,
        email=row.athlete.email,
        phone=row.athlete.phone,
        event_name=row.event.name,
        event_date=row.event.date,
    )


def _export_row(row: orm.CheckIn) -> ExportRow:
    athlete, event = row.athlete, row.event
    return ExportRow(
        check_in_id=CheckInId(row.id),
        check_in_time=row.check_in_time,
        waiver_validated=row.waiver_validated,
        notes=row.notes,
        athlete_id=AthleteId(athlete.id),
        first_name=athlete.first_name,
        last_name=athlete.last_name,
        email=athlete.email,
        phone=athlete.phone,
        date_of_birth=athlete.date_of_birth,
        emergency_contact=athlete.emergency_contact,
        emergency_phone=athlete.emergency_phone,
        event_id=EventId(event.id),
        event_name=event.name,
        event_date=event.date,
        start_time=event.start_time,
        end_time=event.end_time,
    )


class DjangoTransactionMixin:
    """``atomic()`` backed by ``django.db.transaction``."""

    @contextmanager
    def atomic(self) -> Iterator[None]:
        try:
            with transaction.atomic():
                yield
        except (OperationalError, InterfaceError) as exc:
            logger.warning("Store unavailable: %s", exc)
            raise StoreUnavailableError() from exc


class DjangoAthleteStore(DjangoTransactionMixin, AthleteStore):
    """PostgreSQL-backed athlete store using Django ORM."""

    def list_athletes(self) -> list[Athlete]:
        return [_athlete(row) for row in orm.Athlete.objects.order_by("first_name", "last_name")]

    def search_athletes(self, query: str, limit: int) -> list[Athlete]:
        rows = orm.Athlete.objects.filter(
            Q(first_name__icontains=query)
            | Q(last_name__icontains=query)
            | Q(email__icontains=query)
        ).order_by("first_name", "last_name")[:limit]
        return [_athlete(row) for row in rows]

    def get_athlete(self, athlete_id: AthleteId) -> Athlete | None:
        row = orm.Athlete.objects.filter(pk=athlete_id.value).first()
        return _athlete(row) if row else None

    def create_athlete(self, fields: dict[str, Any]) -> Athlete:
        try:
            with transaction.atomic():
                row = orm.Athlete.objects.create(**fields)
        except IntegrityError as exc:
            if fields.get("email") and self.email_in_use(fields["email"]):
                raise EmailInUseError() from exc
            raise
        return _athlete(row)

    def email_in_use(self, email: str, exclude: AthleteId | None = None) -> bool:
        queryset = orm.Athlete.objects.filter(email=email)
        if exclude is not None:
            queryset = queryset.exclude(pk=exclude.value)
        return queryset.exists()

    def update_athlete(self, athlete_id: AthleteId, changes: dict[str, Any]) -> Athlete | None:
        row = orm.Athlete.objects.filter(pk=athlete_id.value).first()
        if row is None:
            return None
        for field, value in changes.items():
            setattr(row, field, value)
        try:
            with transaction.atomic():
                row.save(update_fields=[*changes, "updated_at"])
        except IntegrityError as exc:
            if changes.get("email") and self.email_in_use(changes["email"], exclude=athlete_id):
                raise EmailInUseError() from exc
            raise
        return _athlete(row)

    def update_waiver(
        self,
        athlete_id: AthleteId,
        has_valid_waiver: bool,
        waiver_signed_date: datetime | None,
        waiver_expiration_date: datetime | None,
    ) -> Athlete | None:
        updated = orm.Athlete.objects.filter(pk=athlete_id.value).update(
            has_valid_waiver=has_valid_waiver,
            waiver_signed_date=waiver_signed_date,
            waiver_expiration_date=waiver_expiration_date,
            updated_at=timezone.now(),
        )
        if not updated:
            return None
        return self.get_athlete(athlete_id)

    def athlete_has_check_ins(self, athlete_id: AthleteId) -> bool:
        return orm.CheckIn.objects.filter(athlete_id=athlete_id.value).exists()

    def delete_athlete(self, athlete_id: AthleteId) -> bool:
        try:
            with transaction.atomic():
                deleted, _ = orm.Athlete.objects.filter(pk=athlete_id.value).delete()
        except (ProtectedError, IntegrityError) as exc:
            # A check-in committed after the caller's existence check.
            raise AthleteHasCheckInsError() from exc
        return deleted > 0


class DjangoEventStore(DjangoTransactionMixin, EventStore):
    """PostgreSQL-backed event store using Django ORM."""

    def list_events(self) -> list[Event]:
        return [_event(row) for row in orm.Event.objects.order_by("-date", "start_time")]

    def list_events_on(self, day: date, is_active: bool) -> list[Event]:
        rows = orm.Event.objects.filter(date=day, is_active=is_active).order_by("start_time")
        return [_event(row) for row in rows]

    def list_inactive_from(self, day: date) -> list[Event]:
        rows = orm.Event.objects.filter(date__gte=day, is_active=False).order_by("date", "start_time")
        return [_event(row) for row in rows]

    def list_before(self, day: date, limit: int) -> list[Event]:
        rows = orm.Event.objects.filter(date__lt=day).order_by("-date", "-start_time")[:limit]
        return [_event(row) for row in rows]

    def get_event(self, event_id: EventId, *, for_update: bool = False) -> Event | None:
        queryset = orm.Event.objects.filter(pk=event_id.value)
        if for_update:
            queryset = queryset.select_for_update()
        row = queryset.first()
        return _event(row) if row else None

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
        row = orm.Event.objects.create(
            name=name,
            description=description,
            date=day,
            start_time=start_time,
            end_time=end_time,
            max_capacity=max_capacity,
            current_capacity=0,
            is_active=True,
            created_by_id=created_by_id,
        )
        return _event(row)

    def update_event(self, event_id: EventId, changes: dict[str, Any]) -> Event | None:
        changes = {key: value for key, value in changes.items() if key != "current_capacity"}
        row = orm.Event.objects.filter(pk=event_id.value).first()
        if row is None:
            return None
        for field, value in changes.items():
            setattr(row, field, value)
        try:
            with transaction.atomic():
                # save() rather than update() so post_save invalidates caches.
                row.save(update_fields=[*changes, "updated_at"])
        except IntegrityError as exc:
            raise CapacityBelowCheckInsError(row.current_capacity) from exc
        return _event(row)

    def delete_event(self, event_id: EventId) -> bool:
        deleted, _ = orm.Event.objects.filter(pk=event_id.value).delete()
        return deleted > 0

    def event_has_check_ins(self, event_id: EventId) -> bool:
        return orm.CheckIn.objects.filter(event_id=event_id.value).exists()


class DjangoCheckInStore(DjangoTransactionMixin, CheckInStore):
    """PostgreSQL-backed check-in store using Django ORM."""

    def _joined(self) -> QuerySet:
        return orm.CheckIn.objects.select_related("athlete", "event")

    def get_athlete(self, athlete_id: AthleteId) -> Athlete | None:
        row = orm.Athlete.objects.filter(pk=athlete_id.value).first()
        return _athlete(row) if row else None

    def get_event(self, event_id: EventId, *, for_update: bool = False) -> Event | None:
        queryset = orm.Event.objects.filter(pk=event_id.value)
        if for_update:
            queryset = queryset.select_for_update()
        row = queryset.first()
        return _event(row) if row else None

    def check_in_exists(self, athlete_id: AthleteId, event_id: EventId) -> bool:
        return orm.CheckIn.objects.filter(athlete_id=athlete_id.value, event_id=event_id.value).exists()

    def reserve_slot(self, event_id: EventId) -> bool:
        updated = orm.Event.objects.filter(
            pk=event_id.value,
            current_capacity__lt=F("max_capacity"),
        ).update(current_capacity=F("current_capacity") + 1, updated_at=timezone.now())
        return updated == 1

    def release_slot(self, event_id: EventId) -> bool:
        updated = orm.Event.objects.filter(
            pk=event_id.value,
            current_capacity__gt=0,
        ).update(current_capacity=F("current_capacity") - 1, updated_at=timezone.now())
        return updated == 1

    def insert_check_in(self, check_in: CheckIn) -> None:
        try:
            # Savepoint so the outer transaction stays usable after a violation.
            with transaction.atomic():
                orm.CheckIn.objects.create(
                    id=check_in.id.value,
                    athlete_id=check_in.athlete_id.value,
                    event_id=check_in.event_id.value,
                    check_in_time=check_in.check_in_time,
                    waiver_validated=check_in.waiver_validated,
                    notes=check_in.notes,
                )
        except IntegrityError as exc:
            duplicate = orm.CheckIn.objects.filter(
                athlete_id=check_in.athlete_id.value, event_id=check_in.event_id.value
            ).exists()
            if duplicate:
                raise AlreadyCheckedInError() from exc
            raise

    def mark_athlete_visited(self, athlete_id: AthleteId, visited_on: date) -> None:
        orm.Athlete.objects.filter(pk=athlete_id.value).update(
            last_visited=visited_on, updated_at=timezone.now()
        )

    def get_check_in(self, check_in_id: CheckInId, *, for_update: bool = False) -> CheckIn | None:
        queryset = orm.CheckIn.objects.filter(pk=check_in_id.value)
        if for_update:
            queryset = queryset.select_for_update()
        row = queryset.first()
        return _check_in(row) if row else None

    def get_check_in_detail(self, check_in_id: CheckInId) -> CheckInDetail | None:
        row = self._joined().filter(pk=check_in_id.value).first()
        return _detail(row) if row else None

    def delete_check_in(self, check_in_id: CheckInId) -> bool:
        deleted, _ = orm.CheckIn.objects.filter(pk=check_in_id.value).delete()
        return deleted > 0

    def update_notes(self, check_in_id: CheckInId, notes: str | None) -> bool:
        return orm.CheckIn.objects.filter(pk=check_in_id.value).update(notes=notes) == 1

    def list_check_ins(
        self,
        *,
        event_id: EventId | None = None,
        on_date: date | None = None,
        limit: int | None = None,
    ) -> list[CheckInDetail]:
        queryset = self._joined().order_by("-check_in_time")
        if event_id is not None:
            queryset = queryset.filter(event_id=event_id.value)
        if on_date is not None:
            queryset = queryset.filter(check_in_time__date=on_date)
        if limit is not None:
            queryset = queryset[:limit]
        return [_detail(row) for row in queryset]

    def count_check_ins(
        self,
        *,
        event_id: EventId | None = None,
        on_date: date | None = None,
        since: date | None = None,
        waiver_validated: bool | None = None,
    ) -> int:
        queryset = orm.CheckIn.objects.all()
        if event_id is not None:
            queryset = queryset.filter(event_id=event_id.value)
        if on_date is not None:
            queryset = queryset.filter(check_in_time__date=on_date)
        if since is not None:
            queryset = queryset.filter(check_in_time__date__gte=since)
        if waiver_validated is not None:
            queryset = queryset.filter(waiver_validated=waiver_validated)
        return queryset.count()

    def export_rows(self, filters: ExportFilters) -> list[ExportRow]:
        queryset = self._joined().order_by("-check_in_time")
        if filters.start_date is not None:
            queryset = queryset.filter(check_in_time__date__gte=filters.start_date)
        if filters.end_date is not None:
            queryset = queryset.filter(check_in_time__date__lte=filters.end_date)
        if filters.event_id is not None:
            queryset = queryset.filter(event_id=filters.event_id.value)
        return [_export_row(row) for row in queryset]
