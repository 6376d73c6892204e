from datetime import datetime


def is_waiver_valid(
    has_valid_waiver: bool,
    waiver_expiration_date: datetime | None,
    now: datetime,
) -> bool:
    """Return whether a waiver is valid at ``now``.

    A waiver without an expiration date never expires. An expiration equal to
    ``now`` counts as expired.
    """
    if not has_valid_waiver:
        return False
    if waiver_expiration_date is None:
        return True
    return waiver_expiration_date > now
