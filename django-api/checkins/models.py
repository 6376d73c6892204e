"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/.
The capacity and uniqueness invariants are declared as constraints here so
that the database rejects violations even when application checks race.
"""

import uuid

from django.conf import settings
from django.db import models
from django.db.models import F, Q


class Athlete(models.Model):
    """Persistence model for athletes."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    email = models.EmailField(max_length=255, blank=True, null=True)
    phone = models.CharField(max_length=50, blank=True, null=True)
    date_of_birth = models.DateField(blank=True, null=True)
    emergency_contact = models.CharField(max_length=200, blank=True, null=True)
    emergency_contact_email = models.EmailField(max_length=255, blank=True, null=True)
    emergency_phone = models.CharField(max_length=50, blank=True, null=True)
    has_valid_waiver = models.BooleanField(default=False)
    waiver_signed_date = models.DateTimeField(blank=True, null=True)
    waiver_expiration_date = models.DateTimeField(blank=True, null=True)
    last_visited = models.DateField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["first_name", "last_name"]
        indexes = [
            models.Index(fields=["last_name", "first_name"], name="athlete_name_idx"),
            models.Index(fields=["email"], name="athlete_email_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["email"],
                condition=Q(email__isnull=False) & ~Q(email=""),
                name="checkins_unique_athlete_email",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.first_name} {self.last_name}"


class Event(models.Model):
    """Persistence model for events."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    date = models.DateField()
    start_time = models.TimeField()
    end_time = models.TimeField()
    max_capacity = models.PositiveIntegerField()
    current_capacity = models.PositiveIntegerField(default=0, editable=False)
    is_active = models.BooleanField(default=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_events",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-date", "start_time"]
        indexes = [
            models.Index(fields=["date", "is_active"], name="event_date_active_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(max_capacity__gt=0),
                name="checkins_event_max_capacity_gt_zero",
            ),
            models.CheckConstraint(
                condition=Q(current_capacity__gte=0),
                name="checkins_event_current_capacity_gte_zero",
            ),
            models.CheckConstraint(
                condition=Q(current_capacity__lte=F("max_capacity")),
                name="checkins_event_current_capacity_lte_max",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.date})"


class CheckIn(models.Model):
    """Persistence model for check-ins."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    athlete = models.ForeignKey(Athlete, on_delete=models.PROTECT, related_name="check_ins")
    event = models.ForeignKey(Event, on_delete=models.PROTECT, related_name="check_ins")
    check_in_time = models.DateTimeField(editable=False)
    waiver_validated = models.BooleanField(default=False, editable=False)
    notes = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-check_in_time"]
        indexes = [
            models.Index(fields=["-check_in_time"], name="checkin_time_idx"),
            models.Index(fields=["event", "-check_in_time"], name="checkin_event_time_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["athlete", "event"],
                name="checkins_unique_athlete_event",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.athlete} @ {self.event.name}"
