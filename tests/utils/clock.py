from datetime import datetime, timedelta, timezone


class FrozenClock:
    """Callable clock whose time only moves when a test advances it."""

    def __init__(self, now: datetime = None):
        self.now = now or datetime(2024, 1, 15, 9, 30, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now
