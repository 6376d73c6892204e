from checkins.stores.django_store import DjangoAthleteStore, DjangoCheckInStore, DjangoEventStore
from checkins.stores.interfaces import AthleteStore, CheckInStore, EventStore

__all__ = [
    "AthleteStore",
    "CheckInStore",
    "EventStore",
    "DjangoAthleteStore",
    "DjangoCheckInStore",
    "DjangoEventStore",
]
