"""Tests for the Django ORM stores and the transactional contract.

Run with: pytest tests/test_django_store.py -v
"""

from datetime import datetime, timezone
from uuid import uuid4

import pytest
from django.db import IntegrityError, transaction

from checkins import models as orm
from checkins.domain import AthleteId, CheckIn, CheckInId, Err, EventId, Ok
from checkins.domain.errors import AlreadyCheckedInError, ErrorCode
from checkins.services import CheckInService
from checkins.stores import DjangoCheckInStore


def allow(caller):
    return True


def check_in_row(athlete, event) -> CheckIn:
    now = datetime.now(timezone.utc)
    return CheckIn(
        id=CheckInId(uuid4()),
        athlete_id=AthleteId(athlete.id),
        event_id=EventId(event.id),
        check_in_time=now,
        waiver_validated=True,
        notes=None,
        created_at=now,
    )


@pytest.mark.django_db
class TestCapacityGuards:
    def test_reserve_slot_increments_below_max(self, make_event):
        event = make_event(max_capacity=2)

        assert DjangoCheckInStore().reserve_slot(EventId(event.id)) is True

        event.refresh_from_db()
        assert event.current_capacity == 1

    def test_reserve_slot_refuses_when_full(self, make_event):
        event = make_event(max_capacity=1, current_capacity=1)

        assert DjangoCheckInStore().reserve_slot(EventId(event.id)) is False

        event.refresh_from_db()
        assert event.current_capacity == 1

    def test_release_slot_refuses_at_zero(self, make_event):
        event = make_event()

        assert DjangoCheckInStore().release_slot(EventId(event.id)) is False

        event.refresh_from_db()
        assert event.current_capacity == 0

    def test_database_rejects_capacity_above_max(self, make_event):
        event = make_event(max_capacity=1)

        with pytest.raises(IntegrityError), transaction.atomic():
            orm.Event.objects.filter(pk=event.pk).update(current_capacity=2)


@pytest.mark.django_db
class TestUniqueness:
    def test_store_rejects_duplicate_pair(self, make_athlete, make_event):
        athlete, event = make_athlete(), make_event()
        store = DjangoCheckInStore()
        store.insert_check_in(check_in_row(athlete, event))

        with pytest.raises(AlreadyCheckedInError):
            store.insert_check_in(check_in_row(athlete, event))

        assert orm.CheckIn.objects.filter(athlete=athlete, event=event).count() == 1


class RacingStore(DjangoCheckInStore):
    """Lets another caller take the last slot between the reads and the write."""

    def __init__(self, intruder) -> None:
        self._intruder = intruder

    def reserve_slot(self, event_id: EventId) -> bool:
        self._intruder()
        return super().reserve_slot(event_id)


class DuplicateRacingStore(DjangoCheckInStore):
    """Skips the early existence check, as if a concurrent insert had not committed yet."""

    def check_in_exists(self, athlete_id, event_id) -> bool:
        return False


@pytest.mark.django_db
class TestTransactionalCheckIn:
    def test_check_in_persists_all_effects(self, make_athlete, make_event):
        athlete, event = make_athlete(), make_event()

        result = CheckInService(DjangoCheckInStore(), allow).create_check_in(athlete.id, event.id)

        assert isinstance(result, Ok)
        event.refresh_from_db()
        athlete.refresh_from_db()
        assert event.current_capacity == 1
        assert athlete.last_visited is not None
        assert orm.CheckIn.objects.filter(athlete=athlete, event=event).exists()

    def test_late_capacity_conflict_rolls_back(self, make_athlete, make_event):
        athlete, event = make_athlete(), make_event(max_capacity=1)

        def fill_last_slot():
            orm.Event.objects.filter(pk=event.pk).update(current_capacity=1)

        result = CheckInService(RacingStore(fill_last_slot), allow).create_check_in(athlete.id, event.id)

        assert isinstance(result, Err)
        assert result.error.code is ErrorCode.EVENT_FULL
        assert not orm.CheckIn.objects.filter(athlete=athlete).exists()
        athlete.refresh_from_db()
        assert athlete.last_visited is None

    def test_constraint_closes_duplicate_race(self, make_athlete, make_event):
        athlete, event = make_athlete(), make_event()
        CheckInService(DjangoCheckInStore(), allow).create_check_in(athlete.id, event.id)

        result = CheckInService(DuplicateRacingStore(), allow).create_check_in(athlete.id, event.id)

        assert result.error.code is ErrorCode.ALREADY_CHECKED_IN
        event.refresh_from_db()
        assert event.current_capacity == 1
        assert orm.CheckIn.objects.filter(event=event).count() == 1

    def test_reversal_keeps_capacity_equal_to_rows(self, make_athlete, make_event):
        event = make_event(max_capacity=3)
        service = CheckInService(DjangoCheckInStore(), allow)
        receipts = [
            service.create_check_in(make_athlete().id, event.id).value for _ in range(3)
        ]

        service.reverse_check_in(object(), receipts[0].detail.check_in.id.value)

        event.refresh_from_db()
        assert event.current_capacity == orm.CheckIn.objects.filter(event=event).count() == 2

    def test_reversal_with_corrupted_capacity_fails_loudly(self, make_athlete, make_event):
        event = make_event()
        service = CheckInService(DjangoCheckInStore(), allow)
        receipt = service.create_check_in(make_athlete().id, event.id).value
        orm.Event.objects.filter(pk=event.pk).update(current_capacity=0)

        result = service.reverse_check_in(object(), receipt.detail.check_in.id.value)

        assert result.error.code is ErrorCode.CAPACITY_INCONSISTENT
        assert orm.CheckIn.objects.filter(event=event).count() == 1
