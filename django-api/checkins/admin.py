from django.contrib import admin

from checkins.models import Athlete, CheckIn, Event


class CheckInInline(admin.TabularInline):
    model = CheckIn
    extra = 0
    fields = ["athlete", "check_in_time", "waiver_validated", "notes"]
    readonly_fields = ["athlete", "check_in_time", "waiver_validated"]
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Athlete)
class AthleteAdmin(admin.ModelAdmin):
    list_display = ["first_name", "last_name", "email", "has_valid_waiver", "waiver_expiration_date", "last_visited"]
    list_filter = ["has_valid_waiver"]
    search_fields = ["first_name", "last_name", "email"]
    readonly_fields = ["last_visited"]


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["name", "date", "start_time", "current_capacity", "max_capacity", "is_active"]
    list_filter = ["is_active", "date"]
    search_fields = ["name"]
    readonly_fields = ["current_capacity"]
    inlines = [CheckInInline]


@admin.register(CheckIn)
class CheckInAdmin(admin.ModelAdmin):
    """Check-ins are created and reversed through the API only."""

    list_display = ["athlete", "event", "check_in_time", "waiver_validated"]
    list_filter = ["waiver_validated", "event"]
    readonly_fields = ["athlete", "event", "check_in_time", "waiver_validated"]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
