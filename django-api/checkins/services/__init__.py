from checkins.services.athlete_service import AthleteService
from checkins.services.checkin_service import CheckInService
from checkins.services.event_service import EventService
from checkins.services.statistics_service import StatisticsService

__all__ = [
    "AthleteService",
    "CheckInService",
    "EventService",
    "StatisticsService",
]
