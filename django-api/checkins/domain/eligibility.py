"""Event availability classification.

Availability is derived from the event's date and active flag every time it is
needed. It is never stored, so a listing fetched earlier cannot make a closed
event bookable.
"""

from datetime import date
from enum import Enum


class EventAvailability(Enum):
    BOOKABLE = "bookable"
    DISABLED = "disabled"
    PAST = "past"
    UPCOMING = "upcoming"


def classify_event(event_date: date, is_active: bool, today: date) -> EventAvailability:
    """Classify an event relative to ``today``.

    ``end_time`` is deliberately not considered: an event dated today that has
    already finished is still bookable.
    """
    if event_date < today:
        return EventAvailability.PAST
    if not is_active:
        return EventAvailability.DISABLED
    if event_date == today:
        return EventAvailability.BOOKABLE
    return EventAvailability.UPCOMING
