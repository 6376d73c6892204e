"""Tests for cache behavior.

Run with: pytest tests/test_cache.py -v
"""

from datetime import timedelta

import pytest
from django.core.cache import cache
from django.utils import timezone

from checkins import models as orm
from checkins.caching import availability_list_key, event_list_key
from checkins.domain import EventAvailability


@pytest.mark.django_db
class TestListingCache:
    def test_event_list_is_served_from_cache(self, api_client, make_event):
        event = make_event(name="Before")
        api_client.get("/api/events")

        # Queryset updates send no signals, so the cached listing survives.
        orm.Event.objects.filter(pk=event.pk).update(name="After")
        response = api_client.get("/api/events")

        assert cache.get(event_list_key(timezone.localdate())) is not None
        assert response.json()["events"][0]["name"] == "Before"

    def test_availability_listing_is_cached_per_day(self, api_client, make_event):
        make_event()

        api_client.get("/api/events/today")

        key = availability_list_key(EventAvailability.BOOKABLE, timezone.localdate())
        assert len(cache.get(key)["events"]) == 1

    def test_event_list_is_recomputed_after_midnight(self, api_client, make_event, monkeypatch):
        today = timezone.localdate()
        make_event(date=today)
        assert api_client.get("/api/events").json()["events"][0]["availability"] == "bookable"

        monkeypatch.setattr(timezone, "localdate", lambda *args, **kwargs: today + timedelta(days=1))
        listed = api_client.get("/api/events").json()["events"][0]

        assert listed["availability"] == "past"


@pytest.mark.django_db
class TestCacheInvalidation:
    """Tests for cache invalidation on model changes."""

    def test_event_save_invalidates_list_cache(self, api_client, make_event):
        """Saving an event invalidates today's event list key."""
        event = make_event(name="Before")
        api_client.get("/api/events")

        event.name = "After"
        event.save()

        assert cache.get(event_list_key(timezone.localdate())) is None
        assert api_client.get("/api/events").json()["events"][0]["name"] == "After"

    def test_event_delete_invalidates_availability_cache(self, api_client, make_event):
        event = make_event()
        api_client.get("/api/events/today")

        event.delete()

        assert api_client.get("/api/events/today").json()["events"] == []

    def test_check_in_invalidates_listing_capacity(self, api_client, make_event, make_athlete):
        """A check-in changes current capacity, so listings must not go stale."""
        event = make_event()
        api_client.get("/api/events/today")

        api_client.post(
            "/api/checkins",
            {"athlete_id": str(make_athlete().id), "event_id": str(event.id)},
            format="json",
        )

        listed = api_client.get("/api/events/today").json()["events"][0]
        assert listed["current_capacity"] == 1

    def test_invalidation_repeats_after_commit(self, make_event, django_capture_on_commit_callbacks):
        event = make_event()

        with django_capture_on_commit_callbacks(execute=False) as callbacks:
            event.name = "Renamed"
            event.save()
        cache.set(event_list_key(timezone.localdate()), {"events": ["stale"]})
        for callback in callbacks:
            callback()

        assert cache.get(event_list_key(timezone.localdate())) is None
