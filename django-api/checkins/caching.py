"""Cache keys for event listings and their invalidation."""

from datetime import date

from django.conf import settings
from django.core.cache import cache
from django.db import transaction
from django.utils import timezone

from checkins.domain import EventAvailability

EVENT_LIST_KEY = "events:list"
LISTED_AVAILABILITIES = (
    EventAvailability.BOOKABLE,
    EventAvailability.DISABLED,
    EventAvailability.PAST,
)


def event_list_key(day: date) -> str:
    return f"{EVENT_LIST_KEY}:{day.isoformat()}"


def availability_list_key(availability: EventAvailability, day: date) -> str:
    return f"events:{availability.value}:{day.isoformat()}"


def cache_timeout() -> int:
    return settings.CHECKINS_CACHE_TIMEOUT


def invalidate_event_listings() -> None:
    """Drop every cached listing that could show a changed event.

    Runs now and again once the surrounding transaction commits, so a reader
    racing the writer cannot leave a pre-commit listing behind.
    """
    today = timezone.localdate()
    keys = [event_list_key(today), *(availability_list_key(a, today) for a in LISTED_AVAILABILITIES)]
    cache.delete_many(keys)
    transaction.on_commit(lambda: cache.delete_many(keys))
