"""Authorization predicate consulted by administrative operations."""

from typing import Any

from django.conf import settings
from django.utils.module_loading import import_string

from checkins.services.base import AuthorizationPredicate


def is_staff_member(caller: Any) -> bool:
    return bool(
        caller is not None
        and getattr(caller, "is_authenticated", False)
        and getattr(caller, "is_staff", False)
    )


def get_authorization_predicate() -> AuthorizationPredicate:
    return import_string(settings.CHECKINS_AUTHORIZATION_PREDICATE)
