from checkins.domain.eligibility import EventAvailability, classify_event
from checkins.domain.models import (
    Athlete,
    CheckIn,
    CheckInCommand,
    CheckInDetail,
    CheckInExport,
    CheckInReceipt,
    CheckInStats,
    Event,
    EventDetail,
    EventStats,
    ExportFilters,
    ExportRow,
)
from checkins.domain.results import Err, Ok, Result
from checkins.domain.value_objects import AthleteId, Capacity, CheckInId, EventId
from checkins.domain.waiver import is_waiver_valid

__all__ = [
    "Athlete",
    "Event",
    "EventDetail",
    "CheckIn",
    "CheckInCommand",
    "CheckInDetail",
    "CheckInReceipt",
    "CheckInStats",
    "CheckInExport",
    "EventStats",
    "ExportFilters",
    "ExportRow",
    "AthleteId",
    "EventId",
    "CheckInId",
    "Capacity",
    "EventAvailability",
    "classify_event",
    "is_waiver_valid",
    "Ok",
    "Err",
    "Result",
]
