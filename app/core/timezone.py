"""
Time helpers. Instants are stored as naive UTC (TIMESTAMP WITHOUT TIME ZONE);
day boundaries are computed in the clinic timezone. Public shapes carry
UTC-aware instants so clients see an explicit offset.
"""
from datetime import UTC, date, datetime
from typing import Annotated
from zoneinfo import ZoneInfo

from pydantic import AfterValidator

from app.core.config import settings


def clinic_tz() -> ZoneInfo:
    return ZoneInfo(settings.clinic_timezone)


def utc_naive_now() -> datetime:
    """Naive UTC for TIMESTAMP WITHOUT TIME ZONE columns."""
    return datetime.now(UTC).replace(tzinfo=None)


def to_naive_utc(dt: datetime) -> datetime:
    """Convert to naive UTC; naive input is assumed to already be UTC."""
    if dt.tzinfo is not None:
        return dt.astimezone(UTC).replace(tzinfo=None)
    return dt


def as_utc(dt: datetime) -> datetime:
    """Attach UTC to a stored naive instant; aware input is converted to UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


# Serialises as ISO 8601 with a trailing Z
UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


def local_day(dt: datetime) -> date:
    """Calendar day of a (naive UTC or aware) instant in the clinic timezone."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(clinic_tz()).date()
