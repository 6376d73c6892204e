from django.urls import path

from checkins.domain import EventAvailability
from checkins.handlers import (
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

urlpatterns = [
    path("checkins", CheckInListView.as_view(), name="checkin-list"),
    path("checkins/today", CheckInTodayView.as_view(), name="checkin-today"),
    path("checkins/stats", CheckInStatsView.as_view(), name="checkin-stats"),
    path("checkins/export", CheckInExportView.as_view(), name="checkin-export"),
    path(
        "checkins/event/<str:event_id>",
        EventCheckInListView.as_view(),
        name="checkin-event-list",
    ),
    path("checkins/<str:check_in_id>", CheckInDetailView.as_view(), name="checkin-detail"),
    path("checkins/<str:check_in_id>/notes", CheckInNotesView.as_view(), name="checkin-notes"),
    path("events", EventListView.as_view(), name="event-list"),
    path(
        "events/today",
        EventAvailabilityListView.as_view(availability=EventAvailability.BOOKABLE),
        name="event-today",
    ),
    path(
        "events/disabled",
        EventAvailabilityListView.as_view(availability=EventAvailability.DISABLED),
        name="event-disabled",
    ),
    path(
        "events/past",
        EventAvailabilityListView.as_view(availability=EventAvailability.PAST),
        name="event-past",
    ),
    path("events/<str:event_id>", EventDetailView.as_view(), name="event-detail"),
    path("events/<str:event_id>/toggle", EventToggleView.as_view(), name="event-toggle"),
    path("events/<str:event_id>/stats", EventStatsView.as_view(), name="event-stats"),
    path("athletes", AthleteListView.as_view(), name="athlete-list"),
    path("athletes/search", AthleteSearchView.as_view(), name="athlete-search"),
    path("athletes/<str:athlete_id>", AthleteDetailView.as_view(), name="athlete-detail"),
    path("athletes/<str:athlete_id>/waiver", AthleteWaiverView.as_view(), name="athlete-waiver"),
]
