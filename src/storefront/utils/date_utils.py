from datetime import datetime, timezone, timedelta
from typing import List

import pytz


class DateUtils:
    """
    Timezone helpers for storage (always UTC) and reporting (store-local days).
    """

    UTC = timezone.utc

    @classmethod
    def now_utc(cls) -> datetime:
        """Get current UTC datetime - always use this for database storage"""
        return datetime.now(cls.UTC)

    @classmethod
    def to_utc(cls, dt: datetime) -> datetime:
        """Convert to UTC, treating naive datetimes as already UTC"""
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=cls.UTC)
        return dt.astimezone(cls.UTC)

    @classmethod
    def is_expired(cls, expiry_date: datetime, buffer_minutes: int = 0) -> bool:
        now = cls.now_utc()
        buffer = timedelta(minutes=buffer_minutes)
        return now > (cls.to_utc(expiry_date) + buffer)

    @classmethod
    def local_date(cls, dt: datetime, timezone_name: str) -> str:
        """Calendar date (YYYY-MM-DD) of dt as seen in the given timezone"""
        tz = pytz.timezone(timezone_name)
        return cls.to_utc(dt).astimezone(tz).date().isoformat()

    @classmethod
    def last_n_local_days(cls, n: int, timezone_name: str, now: datetime = None) -> List[str]:
        """
        The last n calendar dates in the given timezone, oldest first,
        ending with today.
        """
        tz = pytz.timezone(timezone_name)
        today = cls.to_utc(now or cls.now_utc()).astimezone(tz).date()
        return [(today - timedelta(days=offset)).isoformat() for offset in range(n - 1, -1, -1)]
