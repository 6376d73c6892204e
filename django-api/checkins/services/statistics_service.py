"""Read-only check-in rollups and the reporting export.

All counts use the ``waiver_validated`` snapshot stored on each check-in.
"""

from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from django.utils import timezone

from checkins.domain import (
    CheckInExport,
    CheckInStats,
    EventId,
    EventStats,
    ExportFilters,
)
from checkins.domain.errors import EventNotFoundError
from checkins.services.base import (
    AuthorizationPredicate,
    Clock,
    local_date,
    parse_id,
    require_authorized,
    returns_result,
)
from checkins.stores.interfaces import CheckInStore

WEEK = timedelta(days=7)
ONE_DECIMAL = Decimal("0.1")


def capacity_used(check_ins: int, max_capacity: int) -> Decimal:
    """Percentage of capacity taken, rounded half-up to one decimal place."""
    ratio = Decimal(check_ins) / Decimal(max_capacity) * 100
    return ratio.quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP)


class StatisticsService:
    """Service for check-in statistics and export."""

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
    def get_stats_snapshot(self, caller: Any, reference_now: datetime | None = None) -> CheckInStats:
        require_authorized(self._is_authorized, caller)
        today = local_date(reference_now or self._clock())
        count = self._store.count_check_ins
        with self._store.atomic():
            return CheckInStats(
                today=count(on_date=today),
                this_week=count(since=today - WEEK),
                total=count(),
                waiver_validated=count(waiver_validated=True),
                waiver_not_validated=count(waiver_validated=False),
            )

    @returns_result
    def get_event_stats(
        self,
        caller: Any,
        event_id: Any,
        reference_now: datetime | None = None,
    ) -> EventStats:
        require_authorized(self._is_authorized, caller)
        parsed = parse_id(EventId, event_id, "event id")
        today = local_date(reference_now or self._clock())
        count = self._store.count_check_ins
        with self._store.atomic():
            event = self._store.get_event(parsed)
            if event is None:
                raise EventNotFoundError(str(parsed))
            total = count(event_id=parsed)
            validated = count(event_id=parsed, waiver_validated=True)
            not_validated = count(event_id=parsed, waiver_validated=False)
        return EventStats(
            event_id=parsed,
            availability=event.availability(today),
            total_check_ins=total,
            waiver_validated=validated,
            waiver_not_validated=not_validated,
            capacity_used=capacity_used(total, event.max_capacity.value),
        )

    @returns_result
    def export_check_ins(
        self,
        caller: Any,
        start_date: date | None = None,
        end_date: date | None = None,
        event_id: Any = None,
    ) -> CheckInExport:
        """Flattened check-ins for reporting. Filters are optional and combined with AND."""
        require_authorized(self._is_authorized, caller)
        filters = ExportFilters(
            start_date=start_date,
            end_date=end_date,
            event_id=parse_id(EventId, event_id, "event id") if event_id is not None else None,
        )
        with self._store.atomic():
            rows = self._store.export_rows(filters)
        return CheckInExport(rows=tuple(rows), exported_at=self._clock(), filters=filters)
