"""Serializers for request input and for transforming domain models to API responses."""

from django.utils import timezone
from rest_framework import serializers


# Input


class CheckInCreateSerializer(serializers.Serializer):
    athlete_id = serializers.UUIDField()
    event_id = serializers.UUIDField()
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class NotesSerializer(serializers.Serializer):
    notes = serializers.CharField(allow_blank=True, allow_null=True)


class EventWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    date = serializers.DateField()
    start_time = serializers.TimeField()
    end_time = serializers.TimeField()
    max_capacity = serializers.IntegerField(min_value=1)
    is_active = serializers.BooleanField(required=False)


class AthleteCreateSerializer(serializers.Serializer):
    first_name = serializers.CharField(max_length=100)
    last_name = serializers.CharField(max_length=100)
    email = serializers.EmailField(required=False, allow_null=True, allow_blank=True)
    phone = serializers.CharField(required=False, allow_null=True, allow_blank=True, max_length=50)
    date_of_birth = serializers.DateField()
    emergency_contact = serializers.CharField(max_length=200)
    emergency_contact_email = serializers.EmailField(required=False, allow_null=True, allow_blank=True)
    emergency_phone = serializers.CharField(max_length=50)
    has_valid_waiver = serializers.BooleanField(required=False, default=False)
    waiver_signed_date = serializers.DateTimeField(required=False, allow_null=True)
    waiver_expiration_date = serializers.DateTimeField(required=False, allow_null=True)


class AthleteUpdateSerializer(serializers.Serializer):
    """Every field is optional; null or absent leaves the stored value alone."""

    first_name = serializers.CharField(required=False, allow_null=True, max_length=100)
    last_name = serializers.CharField(required=False, allow_null=True, max_length=100)
    email = serializers.EmailField(required=False, allow_null=True, allow_blank=True)
    phone = serializers.CharField(required=False, allow_null=True, allow_blank=True, max_length=50)
    date_of_birth = serializers.DateField(required=False, allow_null=True)
    emergency_contact = serializers.CharField(required=False, allow_null=True, max_length=200)
    emergency_contact_email = serializers.EmailField(required=False, allow_null=True, allow_blank=True)
    emergency_phone = serializers.CharField(required=False, allow_null=True, max_length=50)
    has_valid_waiver = serializers.BooleanField(required=False, allow_null=True)
    waiver_signed_date = serializers.DateTimeField(required=False, allow_null=True)
    waiver_expiration_date = serializers.DateTimeField(required=False, allow_null=True)


class WaiverSerializer(serializers.Serializer):
    has_valid_waiver = serializers.BooleanField()
    waiver_signed_date = serializers.DateTimeField(required=False, allow_null=True, default=None)
    waiver_expiration_date = serializers.DateTimeField(required=False, allow_null=True, default=None)


class ExportQuerySerializer(serializers.Serializer):
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)
    event_id = serializers.UUIDField(required=False)


# Output


class AthleteSerializer(serializers.Serializer):
    """Serializer for Athlete domain model."""

    id = serializers.UUIDField(source="id.value")
    first_name = serializers.CharField()
    last_name = serializers.CharField()
    email = serializers.CharField(allow_null=True)
    phone = serializers.CharField(allow_null=True)
    date_of_birth = serializers.DateField(allow_null=True)
    emergency_contact = serializers.CharField(allow_null=True)
    emergency_contact_email = serializers.CharField(allow_null=True)
    emergency_phone = serializers.CharField(allow_null=True)
    has_valid_waiver = serializers.BooleanField()
    waiver_signed_date = serializers.DateTimeField(allow_null=True)
    waiver_expiration_date = serializers.DateTimeField(allow_null=True)
    last_visited = serializers.DateField(allow_null=True)
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()


class EventSerializer(serializers.Serializer):
    """Serializer for Event domain model."""

    id = serializers.UUIDField(source="id.value")
    name = serializers.CharField()
    description = serializers.CharField()
    date = serializers.DateField()
    start_time = serializers.TimeField()
    end_time = serializers.TimeField()
    max_capacity = serializers.IntegerField(source="max_capacity.value")
    current_capacity = serializers.IntegerField(source="current_capacity.value")
    is_active = serializers.BooleanField()
    availability = serializers.SerializerMethodField()
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()

    def get_availability(self, event) -> str:
        today = self.context.get("today") or timezone.localdate()
        return event.availability(today).value


class CheckInDetailSerializer(serializers.Serializer):
    """Serializer for a check-in joined with its athlete and event."""

    id = serializers.UUIDField(source="check_in.id.value")
    athlete_id = serializers.UUIDField(source="check_in.athlete_id.value")
    event_id = serializers.UUIDField(source="check_in.event_id.value")
    check_in_time = serializers.DateTimeField(source="check_in.check_in_time")
    waiver_validated = serializers.BooleanField(source="check_in.waiver_validated")
    notes = serializers.CharField(source="check_in.notes", allow_null=True)
    created_at = serializers.DateTimeField(source="check_in.created_at")
    first_name = serializers.CharField()
    last_name = serializers.CharField()
    email = serializers.CharField(allow_null=True)
    phone = serializers.CharField(allow_null=True)
    event_name = serializers.CharField()
    event_date = serializers.DateField()


class CheckInReceiptSerializer(serializers.Serializer):
    check_in = CheckInDetailSerializer(source="detail")
    waiver_validated = serializers.BooleanField()
    message = serializers.CharField()


class EventDetailSerializer(serializers.Serializer):
    event = EventSerializer()
    check_ins = CheckInDetailSerializer(many=True)

    def to_representation(self, instance):
        data = super().to_representation(instance)
        return {**data["event"], "check_ins": data["check_ins"]}


class CheckInStatsSerializer(serializers.Serializer):
    today = serializers.IntegerField()
    this_week = serializers.IntegerField()
    total = serializers.IntegerField()
    waiver_validated = serializers.IntegerField()
    waiver_not_validated = serializers.IntegerField()


class EventStatsSerializer(serializers.Serializer):
    event_id = serializers.UUIDField(source="event_id.value")
    availability = serializers.CharField(source="availability.value")
    total_check_ins = serializers.IntegerField()
    waiver_validated = serializers.IntegerField()
    waiver_not_validated = serializers.IntegerField()
    capacity_used = serializers.DecimalField(max_digits=6, decimal_places=1)


class ExportRowSerializer(serializers.Serializer):
    check_in_id = serializers.UUIDField(source="check_in_id.value")
    check_in_time = serializers.DateTimeField()
    waiver_validated = serializers.BooleanField()
    notes = serializers.CharField(allow_null=True)
    athlete_id = serializers.UUIDField(source="athlete_id.value")
    first_name = serializers.CharField()
    last_name = serializers.CharField()
    email = serializers.CharField(allow_null=True)
    phone = serializers.CharField(allow_null=True)
    date_of_birth = serializers.DateField(allow_null=True)
    emergency_contact = serializers.CharField(allow_null=True)
    emergency_phone = serializers.CharField(allow_null=True)
    event_id = serializers.UUIDField(source="event_id.value")
    event_name = serializers.CharField()
    event_date = serializers.DateField()
    start_time = serializers.TimeField()
    end_time = serializers.TimeField()


class ExportFiltersSerializer(serializers.Serializer):
    start_date = serializers.DateField(allow_null=True)
    end_date = serializers.DateField(allow_null=True)
    event_id = serializers.SerializerMethodField()

    def get_event_id(self, filters) -> str | None:
        return str(filters.event_id) if filters.event_id else None


class CheckInExportSerializer(serializers.Serializer):
    check_ins = ExportRowSerializer(source="rows", many=True)
    exported_at = serializers.DateTimeField()
    filters = ExportFiltersSerializer()
