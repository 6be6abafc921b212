"""Fixed-offset wall-clock storage for datetime columns.

The database keeps naive timestamps that read as local wall-clock time of one
fixed zone (``TIMEZONE_OFFSET_HOURS``). The application works with aware UTC
datetimes. ``WallClockDateTime`` converts on every bind parameter (inserts,
updates and filter values alike) and on every result row, so
``from_storage(to_storage(d)) == d`` for any aware ``d``.

This is a constant shift, not a timezone database: no DST rules, and the
offset must not change once data exists.
"""
from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone

from sqlalchemy import DateTime, event, inspect
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.types import TypeDecorator

from app.core.config import settings

WALL_CLOCK_OFFSET = timedelta(hours=settings.TIMEZONE_OFFSET_HOURS)
WALL_CLOCK_ZONE = timezone(WALL_CLOCK_OFFSET)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_storage(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    return (_as_utc(value) + WALL_CLOCK_OFFSET).replace(tzinfo=None)


def from_storage(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return (value - WALL_CLOCK_OFFSET).replace(tzinfo=timezone.utc)


def local_midnight(day: date) -> datetime:
    """UTC instant at which ``day`` starts on the wall clock."""
    return datetime.combine(day, time.min, tzinfo=WALL_CLOCK_ZONE).astimezone(timezone.utc)


def local_day_bounds(value: datetime | date) -> tuple[datetime, datetime]:
    """Half-open ``[start, end)`` UTC range of the wall-clock day containing ``value``."""
    if isinstance(value, datetime):
        day = _as_utc(value).astimezone(WALL_CLOCK_ZONE).date()
    else:
        day = value
    start = local_midnight(day)
    return start, start + timedelta(days=1)


def local_date(value: datetime) -> date:
    return _as_utc(value).astimezone(WALL_CLOCK_ZONE).date()


class WallClockDateTime(TypeDecorator):
    impl = DateTime
    cache_ok = True

    @property
    def python_type(self):
        return datetime

    def process_bind_param(self, value, dialect):
        if isinstance(value, date) and not isinstance(value, datetime):
            value = local_midnight(value)
        return to_storage(value)

    def process_result_value(self, value, dialect):
        return from_storage(value)


def _has_column(obj, name: str) -> bool:
    return name in inspect(obj).mapper.column_attrs


def _stamp_timestamps(session: Session, flush_context, instances) -> None:
    now = utcnow()
    for obj in session.new:
        if _has_column(obj, "created_at") and getattr(obj, "created_at", None) is None:
            obj.created_at = now
        if _has_column(obj, "updated_at") and getattr(obj, "updated_at", None) is None:
            obj.updated_at = now
    for obj in session.dirty:
        if not _has_column(obj, "updated_at"):
            continue
        if not session.is_modified(obj, include_collections=False):
            continue
        if inspect(obj).attrs.updated_at.history.has_changes():
            continue
        obj.updated_at = now


def install_timestamp_stamping(factory: sessionmaker) -> None:
    """Stamp created_at/updated_at from the application clock when the caller left them unset."""
    if not event.contains(factory, "before_flush", _stamp_timestamps):
        event.listen(factory, "before_flush", _stamp_timestamps)
