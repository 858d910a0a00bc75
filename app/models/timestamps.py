from datetime import datetime, timezone
from typing import Optional
from sqlalchemy import DateTime


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Naive values are taken to be UTC already."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_datetime_type() -> DateTime:
    return DateTime(timezone=True)
