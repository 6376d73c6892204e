from checkins.handlers.views import (
    AthleteDetailView,
    AthleteListView,
    AthleteSearchView,
    AthleteWaiverView,
    CheckInDetailView,
    CheckInExportView,
    CheckInListView,
    CheckInNotesView,
    CheckInStatsView,
    CheckInTodayView,
    EventAvailabilityListView,
    EventCheckInListView,
    EventDetailView,
    EventListView,
    EventStatsView,
    EventToggleView,
)

__all__ = [
    "AthleteDetailView",
    "AthleteListView",
    "AthleteSearchView",
    "AthleteWaiverView",
    "CheckInDetailView",
    "CheckInExportView",
    "CheckInListView",
    "CheckInNotesView",
    "CheckInStatsView",
    "CheckInTodayView",
    "EventAvailabilityListView",
    "EventCheckInListView",
    "EventDetailView",
    "EventListView",
    "EventStatsView",
    "EventToggleView",
]
