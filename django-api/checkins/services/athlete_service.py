"""Athlete service - registration, lookup, updates and waivers.

Waiver changes never touch existing check-ins; their snapshots stay as they
were recorded.
"""

import logging
from datetime import datetime
from typing import Any

from checkins.domain import Athlete, AthleteId
from checkins.domain.errors import (
    AthleteHasCheckInsError,
    AthleteNotFoundError,
    EmailInUseError,
    ValidationFailedError,
)
from checkins.services.base import AuthorizationPredicate, parse_id, require_authorized, returns_result
from checkins.stores.interfaces import AthleteStore

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 20
ATHLETE_FIELDS = frozenset(
    {
        "first_name",
        "last_name",
        "email",
        "phone",
        "date_of_birth",
        "emergency_contact",
        "emergency_contact_email",
        "emergency_phone",
        "has_valid_waiver",
        "waiver_signed_date",
        "waiver_expiration_date",
    }
)
REQUIRED_FIELDS = ("first_name", "last_name", "date_of_birth", "emergency_contact", "emergency_phone")
REQUIRED_MESSAGE = (
    "First name, last name, date of birth, emergency contact name, and emergency phone are required"
)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _reject_unknown(fields: dict[str, Any]) -> None:
    unknown = set(fields) - ATHLETE_FIELDS
    if unknown:
        raise ValidationFailedError(f"Unknown fields: {', '.join(sorted(unknown))}")


class AthleteService:
    """Service for athlete records."""

    def __init__(self, store: AthleteStore, is_authorized: AuthorizationPredicate) -> None:
        self._store = store
        self._is_authorized = is_authorized

    @returns_result
    def list_athletes(self) -> list[Athlete]:
        with self._store.atomic():
            return self._store.list_athletes()

    @returns_result
    def search_athletes(self, query: str | None) -> list[Athlete]:
        if not query or not query.strip():
            raise ValidationFailedError("Search query is required")
        with self._store.atomic():
            return self._store.search_athletes(query.strip(), SEARCH_LIMIT)

    @returns_result
    def get_athlete(self, athlete_id: Any) -> Athlete:
        parsed = parse_id(AthleteId, athlete_id, "athlete id")
        with self._store.atomic():
            athlete = self._store.get_athlete(parsed)
        if athlete is None:
            raise AthleteNotFoundError(str(parsed))
        return athlete

    @returns_result
    def register_athlete(self, **fields: Any) -> Athlete:
        """Create an athlete.

        Returns ``Err`` with:
            ValidationFailedError: If a required field is missing, a field is
                unknown, or another athlete already uses the email.
        """
        _reject_unknown(fields)
        if any(_is_blank(fields.get(name)) for name in REQUIRED_FIELDS):
            raise ValidationFailedError(REQUIRED_MESSAGE)
        fields["has_valid_waiver"] = bool(fields.get("has_valid_waiver", False))
        if _is_blank(fields.get("email")):
            fields["email"] = None

        with self._store.atomic():
            if fields["email"] and self._store.email_in_use(fields["email"]):
                raise EmailInUseError()
            athlete = self._store.create_athlete(fields)
        logger.info("Athlete %s registered", athlete.id)
        return athlete

    @returns_result
    def update_athlete(self, athlete_id: Any, **changes: Any) -> Athlete:
        """Partially update an athlete. ``None`` values leave a field unchanged."""
        parsed = parse_id(AthleteId, athlete_id, "athlete id")
        _reject_unknown(changes)
        changes = {key: value for key, value in changes.items() if value is not None}
        if any(name in changes and _is_blank(changes[name]) for name in REQUIRED_FIELDS):
            raise ValidationFailedError(REQUIRED_MESSAGE)
        if "email" in changes and _is_blank(changes["email"]):
            del changes["email"]

        with self._store.atomic():
            athlete = self._store.get_athlete(parsed)
            if athlete is None:
                raise AthleteNotFoundError(str(parsed))
            if "email" in changes and self._store.email_in_use(changes["email"], exclude=parsed):
                raise EmailInUseError()
            if changes:
                athlete = self._store.update_athlete(parsed, changes)
        logger.info("Athlete %s updated", parsed)
        return athlete

    @returns_result
    def update_waiver(
        self,
        athlete_id: Any,
        has_valid_waiver: bool,
        waiver_signed_date: datetime | None = None,
        waiver_expiration_date: datetime | None = None,
    ) -> Athlete:
        parsed = parse_id(AthleteId, athlete_id, "athlete id")
        with self._store.atomic():
            athlete = self._store.update_waiver(
                parsed, bool(has_valid_waiver), waiver_signed_date, waiver_expiration_date
            )
        if athlete is None:
            raise AthleteNotFoundError(str(parsed))
        logger.info("Waiver updated for athlete %s", parsed)
        return athlete

    @returns_result
    def delete_athlete(self, caller: Any, athlete_id: Any) -> None:
        """Delete an athlete that has no check-ins.

        Check-ins keep their athlete, so an athlete with history cannot be removed.
        """
        require_authorized(self._is_authorized, caller)
        parsed = parse_id(AthleteId, athlete_id, "athlete id")
        with self._store.atomic():
            if self._store.get_athlete(parsed) is None:
                raise AthleteNotFoundError(str(parsed))
            if self._store.athlete_has_check_ins(parsed):
                raise AthleteHasCheckInsError()
            self._store.delete_athlete(parsed)
        logger.info("Athlete %s deleted", parsed)
