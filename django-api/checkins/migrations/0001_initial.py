import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Athlete",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("first_name", models.CharField(max_length=100)),
                ("last_name", models.CharField(max_length=100)),
                ("email", models.EmailField(blank=True, max_length=255, null=True)),
                ("phone", models.CharField(blank=True, max_length=50, null=True)),
                ("date_of_birth", models.DateField(blank=True, null=True)),
                ("emergency_contact", models.CharField(blank=True, max_length=200, null=True)),
                ("emergency_contact_email", models.EmailField(blank=True, max_length=255, null=True)),
                ("emergency_phone", models.CharField(blank=True, max_length=50, null=True)),
                ("has_valid_waiver", models.BooleanField(default=False)),
                ("waiver_signed_date", models.DateTimeField(blank=True, null=True)),
                ("waiver_expiration_date", models.DateTimeField(blank=True, null=True)),
                ("last_visited", models.DateField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["first_name", "last_name"],
                "indexes": [
                    models.Index(fields=["last_name", "first_name"], name="athlete_name_idx"),
                    models.Index(fields=["email"], name="athlete_email_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Event",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                ("date", models.DateField()),
                ("start_time", models.TimeField()),
                ("end_time", models.TimeField()),
                ("max_capacity", models.PositiveIntegerField()),
                ("current_capacity", models.PositiveIntegerField(default=0, editable=False)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="created_events",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-date", "start_time"],
                "indexes": [
                    models.Index(fields=["date", "is_active"], name="event_date_active_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("max_capacity__gt", 0)),
                        name="checkins_event_max_capacity_gt_zero",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("current_capacity__gte", 0)),
                        name="checkins_event_current_capacity_gte_zero",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("current_capacity__lte", models.F("max_capacity"))),
                        name="checkins_event_current_capacity_lte_max",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="CheckIn",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("check_in_time", models.DateTimeField(editable=False)),
                ("waiver_validated", models.BooleanField(default=False, editable=False)),
                ("notes", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "athlete",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="check_ins",
                        to="checkins.athlete",
                    ),
                ),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="check_ins",
                        to="checkins.event",
                    ),
                ),
            ],
            options={
                "ordering": ["-check_in_time"],
                "indexes": [
                    models.Index(fields=["-check_in_time"], name="checkin_time_idx"),
                    models.Index(fields=["event", "-check_in_time"], name="checkin_event_time_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("athlete", "event"),
                        name="checkins_unique_athlete_event",
                    ),
                ],
            },
        ),
    ]
