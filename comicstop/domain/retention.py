"""Calendar arithmetic for the CreatorHub retention window."""

from datetime import UTC, datetime

from dateutil.relativedelta import relativedelta


def ensure_utc(dt: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def purge_date(disabled_at: datetime, retention_months: int) -> datetime:
    """When retained creator data becomes eligible for deletion."""
    return ensure_utc(disabled_at) + relativedelta(months=retention_months)


def retention_cutoff(now: datetime, retention_months: int) -> datetime:
    """Users disabled strictly before this instant are past the window."""
    return ensure_utc(now) - relativedelta(months=retention_months)


def is_expired(disabled_at: datetime | None, now: datetime, retention_months: int) -> bool:
    if disabled_at is None:
        return False
    return ensure_utc(disabled_at) < retention_cutoff(now, retention_months)
