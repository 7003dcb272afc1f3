"""
Wall-clock sources for month rollover and metrics cutoffs
"""
from datetime import datetime, timedelta


class SystemClock:
    """Naive UTC wall clock"""

    def now(self) -> datetime:
        return datetime.utcnow()


class FrozenClock:
    """Clock pinned to a fixed instant, moved forward explicitly"""

    def __init__(self, now: datetime):
        self._now = now

    def now(self) -> datetime:
        return self._now

    def set(self, now: datetime) -> None:
        self._now = now

    def advance(self, **kwargs) -> None:
        """Move the clock forward by a timedelta built from kwargs (days=, hours=...)"""
        self._now = self._now + timedelta(**kwargs)


def month_key(moment: datetime) -> str:
    """Calendar month key used to stamp usage counters, e.g. '2024-1'"""
    return f"{moment.year}-{moment.month}"
