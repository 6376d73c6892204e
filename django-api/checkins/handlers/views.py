"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

from django.core.cache import cache
from django.utils import timezone
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from checkins.auth import get_authorization_predicate
from checkins.caching import availability_list_key, cache_timeout, event_list_key
from checkins.domain import Err, EventAvailability
from checkins.domain.errors import DomainError, ErrorKind
from checkins.handlers.serializers import (
    AthleteCreateSerializer,
    AthleteSerializer,
    AthleteUpdateSerializer,
    CheckInCreateSerializer,
    CheckInDetailSerializer,
    CheckInExportSerializer,
    CheckInReceiptSerializer,
    CheckInStatsSerializer,
    EventDetailSerializer,
    EventSerializer,
    EventStatsSerializer,
    EventWriteSerializer,
    ExportQuerySerializer,
    NotesSerializer,
    WaiverSerializer,
)
from checkins.services import AthleteService, CheckInService, EventService, StatisticsService
from checkins.stores import DjangoAthleteStore, DjangoCheckInStore, DjangoEventStore

_STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.AUTHORIZATION: status.HTTP_403_FORBIDDEN,
    ErrorKind.INTERNAL_CONSISTENCY: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.TRANSIENT: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def error_response(error: DomainError) -> Response:
    response = Response(
        {"error": {"code": error.code.value, "kind": error.kind.value, "message": error.message}},
        status=_STATUS_BY_KIND[error.kind],
    )
    if error.retryable:
        response["Retry-After"] = "1"
    return response


def invalid_input(errors) -> Response:
    return Response(
        {
            "error": {
                "code": "VALIDATION_FAILED",
                "kind": ErrorKind.VALIDATION.value,
                "message": "Invalid request",
                "fields": errors,
            }
        },
        status=status.HTTP_400_BAD_REQUEST,
    )


def check_in_service() -> CheckInService:
    return CheckInService(DjangoCheckInStore(), get_authorization_predicate())


def statistics_service() -> StatisticsService:
    return StatisticsService(DjangoCheckInStore(), get_authorization_predicate())


def event_service() -> EventService:
    return EventService(DjangoEventStore(), DjangoCheckInStore(), get_authorization_predicate())


def athlete_service() -> AthleteService:
    return AthleteService(DjangoAthleteStore(), get_authorization_predicate())


class OpenMethodsMixin:
    """Let kiosk callers use ``open_methods`` without authenticating."""

    open_methods: tuple[str, ...] = ()

    def get_permissions(self):
        if self.request.method in self.open_methods:
            return [AllowAny()]
        return super().get_permissions()


# Check-ins


class CheckInListView(OpenMethodsMixin, APIView):
    """Handler for GET/POST /api/checkins"""

    open_methods = ("POST",)

    def get(self, request: Request) -> Response:
        result = check_in_service().list_recent()
        if isinstance(result, Err):
            return error_response(result.error)
        return Response({"checkins": CheckInDetailSerializer(result.value, many=True).data})

    def post(self, request: Request) -> Response:
        payload = CheckInCreateSerializer(data=request.data)
        if not payload.is_valid():
            return invalid_input(payload.errors)
        data = payload.validated_data
        result = check_in_service().create_check_in(data["athlete_id"], data["event_id"], data.get("notes"))
        if isinstance(result, Err):
            return error_response(result.error)
        return Response(CheckInReceiptSerializer(result.value).data, status=status.HTTP_201_CREATED)


class CheckInTodayView(APIView):
    """Handler for GET /api/checkins/today"""

    permission_classes = [AllowAny]

    def get(self, request: Request) -> Response:
        result = check_in_service().list_for_day()
        if isinstance(result, Err):
            return error_response(result.error)
        return Response({"checkins": CheckInDetailSerializer(result.value, many=True).data})


class EventCheckInListView(APIView):
    """Handler for GET /api/checkins/event/{event_id}"""

    permission_classes = [AllowAny]

    def get(self, request: Request, event_id: str) -> Response:
        result = check_in_service().list_for_event(event_id)
        if isinstance(result, Err):
            return error_response(result.error)
        return Response({"checkins": CheckInDetailSerializer(result.value, many=True).data})


class CheckInDetailView(APIView):
    """Handler for GET/DELETE /api/checkins/{check_in_id}"""

    def get(self, request: Request, check_in_id: str) -> Response:
        result = check_in_service().get_check_in(check_in_id)
        if isinstance(result, Err):
            return error_response(result.error)
        return Response({"checkin": CheckInDetailSerializer(result.value).data})

    def delete(self, request: Request, check_in_id: str) -> Response:
        result = check_in_service().reverse_check_in(request.user, check_in_id)
        if isinstance(result, Err):
            return error_response(result.error)
        return Response({"message": "Check-in deleted successfully"})


class CheckInNotesView(APIView):
    """Handler for PATCH /api/checkins/{check_in_id}/notes"""

    def patch(self, request: Request, check_in_id: str) -> Response:
        payload = NotesSerializer(data=request.data)
        if not payload.is_valid():
            return invalid_input(payload.errors)
        result = check_in_service().update_notes(check_in_id, payload.validated_data["notes"])
        if isinstance(result, Err):
            return error_response(result.error)
        return Response(
            {"checkin": CheckInDetailSerializer(result.value).data, "message": "Notes updated successfully"}
        )


class CheckInStatsView(APIView):
    """Handler for GET /api/checkins/stats"""

    def get(self, request: Request) -> Response:
        result = statistics_service().get_stats_snapshot(request.user)
        if isinstance(result, Err):
            return error_response(result.error)
        return Response({"stats": CheckInStatsSerializer(result.value).data})


class CheckInExportView(APIView):
    """Handler for GET /api/checkins/export"""

    def get(self, request: Request) -> Response:
        query = ExportQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return invalid_input(query.errors)
        filters = query.validated_data
        result = statistics_service().export_check_ins(
            request.user,
            start_date=filters.get("start_date"),
            end_date=filters.get("end_date"),
            event_id=filters.get("event_id"),
        )
        if isinstance(result, Err):
            return error_response(result.error)
        return Response(CheckInExportSerializer(result.value).data)


# Events


class EventListView(OpenMethodsMixin, APIView):
    """Handler for GET/POST /api/events"""

    open_methods = ("GET",)

    def get(self, request: Request) -> Response:
        today = timezone.localdate()
        key = event_list_key(today)
        data = cache.get(key)
        if data is None:
            result = event_service().list_events()
            if isinstance(result, Err):
                return error_response(result.error)
            data = {"events": EventSerializer(result.value, many=True, context={"today": today}).data}
            cache.set(key, data, cache_timeout())
        return Response(data)

    def post(self, request: Request) -> Response:
        payload = EventWriteSerializer(data=request.data)
        if not payload.is_valid():
            return invalid_input(payload.errors)
        data = payload.validated_data
        result = event_service().create_event(
            request.user,
            name=data["name"],
            day=data["date"],
            start_time=data["start_time"],
            end_time=data["end_time"],
            max_capacity=data["max_capacity"],
            description=data.get("description", ""),
        )
        if isinstance(result, Err):
            return error_response(result.error)
        return Response(
            {"event": EventSerializer(result.value).data, "message": "Event created successfully"},
            status=status.HTTP_201_CREATED,
        )


class EventAvailabilityListView(APIView):
    """Handler for GET /api/events/today, /api/events/disabled and /api/events/past"""

    permission_classes = [AllowAny]
    availability: EventAvailability = EventAvailability.BOOKABLE

    def get(self, request: Request) -> Response:
        today = timezone.localdate()
        key = availability_list_key(self.availability, today)
        data = cache.get(key)
        if data is None:
            result = event_service().list_by_availability(self.availability)
            if isinstance(result, Err):
                return error_response(result.error)
            data = {"events": EventSerializer(result.value, many=True, context={"today": today}).data}
            cache.set(key, data, cache_timeout())
        return Response(data)


class EventDetailView(OpenMethodsMixin, APIView):
    """Handler for GET/PUT/DELETE /api/events/{event_id}"""

    open_methods = ("GET",)

    def get(self, request: Request, event_id: str) -> Response:
        result = event_service().get_event(event_id)
        if isinstance(result, Err):
            return error_response(result.error)
        return Response({"event": EventDetailSerializer(result.value).data})

    def put(self, request: Request, event_id: str) -> Response:
        payload = EventWriteSerializer(data=request.data, partial=True)
        if not payload.is_valid():
            return invalid_input(payload.errors)
        result = event_service().update_event(request.user, event_id, dict(payload.validated_data))
        if isinstance(result, Err):
            return error_response(result.error)
        return Response({"event": EventSerializer(result.value).data, "message": "Event updated successfully"})

    def delete(self, request: Request, event_id: str) -> Response:
        result = event_service().delete_event(request.user, event_id)
        if isinstance(result, Err):
            return error_response(result.error)
        return Response({"message": "Event deleted successfully"})


class EventToggleView(APIView):
    """Handler for PATCH /api/events/{event_id}/toggle"""

    def patch(self, request: Request, event_id: str) -> Response:
        result = event_service().toggle_event(request.user, event_id)
        if isinstance(result, Err):
            return error_response(result.error)
        event = result.value
        verb = "activated" if event.is_active else "deactivated"
        return Response({"event": EventSerializer(event).data, "message": f"Event {verb} successfully"})


class EventStatsView(APIView):
    """Handler for GET /api/events/{event_id}/stats"""

    def get(self, request: Request, event_id: str) -> Response:
        result = statistics_service().get_event_stats(request.user, event_id)
        if isinstance(result, Err):
            return error_response(result.error)
        return Response({"stats": EventStatsSerializer(result.value).data})


# Athletes


class AthleteListView(OpenMethodsMixin, APIView):
    """Handler for GET/POST /api/athletes"""

    open_methods = ("POST",)

    def get(self, request: Request) -> Response:
        result = athlete_service().list_athletes()
        if isinstance(result, Err):
            return error_response(result.error)
        return Response({"athletes": AthleteSerializer(result.value, many=True).data})

    def post(self, request: Request) -> Response:
        payload = AthleteCreateSerializer(data=request.data)
        if not payload.is_valid():
            return invalid_input(payload.errors)
        result = athlete_service().register_athlete(**payload.validated_data)
        if isinstance(result, Err):
            return error_response(result.error)
        return Response(
            {"athlete": AthleteSerializer(result.value).data, "message": "Athlete created successfully"},
            status=status.HTTP_201_CREATED,
        )


class AthleteSearchView(APIView):
    """Handler for GET /api/athletes/search?query="""

    permission_classes = [AllowAny]

    def get(self, request: Request) -> Response:
        result = athlete_service().search_athletes(request.query_params.get("query"))
        if isinstance(result, Err):
            return error_response(result.error)
        return Response({"athletes": AthleteSerializer(result.value, many=True).data})


class AthleteDetailView(OpenMethodsMixin, APIView):
    """Handler for GET/PUT/DELETE /api/athletes/{athlete_id}"""

    open_methods = ("GET",)

    def get(self, request: Request, athlete_id: str) -> Response:
        result = athlete_service().get_athlete(athlete_id)
        if isinstance(result, Err):
            return error_response(result.error)
        return Response({"athlete": AthleteSerializer(result.value).data})

    def put(self, request: Request, athlete_id: str) -> Response:
        payload = AthleteUpdateSerializer(data=request.data)
        if not payload.is_valid():
            return invalid_input(payload.errors)
        result = athlete_service().update_athlete(athlete_id, **payload.validated_data)
        if isinstance(result, Err):
            return error_response(result.error)
        return Response({"athlete": AthleteSerializer(result.value).data, "message": "Athlete updated successfully"})

    def delete(self, request: Request, athlete_id: str) -> Response:
        result = athlete_service().delete_athlete(request.user, athlete_id)
        if isinstance(result, Err):
            return error_response(result.error)
        return Response({"message": "Athlete deleted successfully"})


class AthleteWaiverView(APIView):
    """Handler for PATCH /api/athletes/{athlete_id}/waiver"""

    def patch(self, request: Request, athlete_id: str) -> Response:
        payload = WaiverSerializer(data=request.data)
        if not payload.is_valid():
            return invalid_input(payload.errors)
        result = athlete_service().update_waiver(athlete_id, **payload.validated_data)
        if isinstance(result, Err):
            return error_response(result.error)
        return Response(
            {"athlete": AthleteSerializer(result.value).data, "message": "Waiver status updated successfully"}
        )
