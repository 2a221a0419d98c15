"""
Timestamps at the persistence boundary.

A record may be written with a placeholder asking the backend to stamp its
own clock (``SERVER_TIMESTAMP``). Whatever comes back is resolved to a
concrete, timezone-aware ``datetime`` on read, so domain objects only ever
hold real instants.
"""

from dataclasses import dataclass
from datetime import datetime
from datetime import timezone as dt_timezone
from typing import Any, Optional, Union

from django.utils import timezone
from django.utils.dateparse import parse_datetime


@dataclass(frozen=True)
class PendingServerTime:
    """Placeholder for a time the persistence backend has not stamped yet."""


@dataclass(frozen=True)
class ResolvedInstant:
    at: datetime


Timestamp = Union[PendingServerTime, ResolvedInstant]

SERVER_TIMESTAMP = PendingServerTime()


def resolve_timestamp(value: Any, fallback: Optional[datetime] = None) -> datetime:
    """
    Turn whatever a backend returned for a time field into an aware datetime.

    Args:
        value: PendingServerTime, ResolvedInstant, datetime, ISO-8601 string or None
        fallback: Instant used when the value is still pending or unreadable
                  (defaults to now)

    Returns:
        Timezone-aware datetime
    """
    if isinstance(value, ResolvedInstant):
        value = value.at
    elif isinstance(value, str):
        value = parse_datetime(value)

    if isinstance(value, datetime):
        if timezone.is_naive(value):
            return timezone.make_aware(value, dt_timezone.utc)
        return value

    return fallback or timezone.now()
