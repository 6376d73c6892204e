"""Pytest configuration and shared fixtures."""

from datetime import time
from uuid import uuid4

import pytest
from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework.test import APIClient

from checkins import models as orm


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def staff_user(db):
    return get_user_model().objects.create_user(
        username=f"staff-{uuid4().hex[:8]}", password="unused-password", is_staff=True
    )


@pytest.fixture
def plain_user(db):
    return get_user_model().objects.create_user(
        username=f"user-{uuid4().hex[:8]}", password="unused-password"
    )


@pytest.fixture
def staff_client(api_client: APIClient, staff_user) -> APIClient:
    api_client.force_authenticate(user=staff_user)
    return api_client


@pytest.fixture
def make_athlete(db):
    def factory(**overrides) -> orm.Athlete:
        fields = {
            "first_name": "Ada",
            "last_name": "Lovelace",
            "email": f"{uuid4().hex[:8]}@example.com",
            "has_valid_waiver": True,
        }
        fields.update(overrides)
        return orm.Athlete.objects.create(**fields)

    return factory


@pytest.fixture
def make_event(db):
    def factory(**overrides) -> orm.Event:
        fields = {
            "name": "Open Gym",
            "date": timezone.localdate(),
            "start_time": time(9, 0),
            "end_time": time(11, 0),
            "max_capacity": 10,
            "is_active": True,
        }
        fields.update(overrides)
        return orm.Event.objects.create(**fields)

    return factory
