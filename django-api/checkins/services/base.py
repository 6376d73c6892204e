"""Helpers shared by the services.

Services raise domain errors internally; ``returns_result`` turns the public
methods into functions that return ``Ok``/``Err`` instead.
"""

import functools
import logging
from collections.abc import Callable
from datetime import date, datetime
from typing import Any, TypeVar

from django.utils import timezone

from checkins.domain import Err, Ok
from checkins.domain.errors import DomainError, ErrorKind, InvalidIdError, NotAuthorizedError

logger = logging.getLogger(__name__)

T = TypeVar("T")

Clock = Callable[[], datetime]
AuthorizationPredicate = Callable[[Any], bool]

_LOG_LEVELS = {
    ErrorKind.INTERNAL_CONSISTENCY: logging.ERROR,
    ErrorKind.TRANSIENT: logging.WARNING,
}


def returns_result(method: Callable[..., T]) -> Callable[..., Ok[T] | Err]:
    @functools.wraps(method)
    def wrapper(*args: Any, **kwargs: Any) -> Ok[T] | Err:
        try:
            return Ok(method(*args, **kwargs))
        except DomainError as error:
            logger.log(
                _LOG_LEVELS.get(error.kind, logging.INFO),
                "%s rejected: %s",
                method.__qualname__,
                error,
            )
            return Err(error)

    return wrapper


def local_date(moment: datetime) -> date:
    """Calendar date of ``moment`` in the configured time zone."""
    if timezone.is_aware(moment):
        return timezone.localtime(moment).date()
    return moment.date()


def parse_id(id_type: type[T], raw: Any, field: str) -> T:
    if isinstance(raw, id_type):
        return raw
    try:
        return id_type.from_string(raw)
    except (TypeError, ValueError, AttributeError) as exc:
        raise InvalidIdError(field) from exc


def require_authorized(is_authorized: AuthorizationPredicate, caller: Any) -> None:
    if not is_authorized(caller):
        raise NotAuthorizedError()
