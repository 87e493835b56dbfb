from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Protocol
from zoneinfo import ZoneInfo

from ..core.constants import DEFAULT_BUSINESS_TIMEZONE


class Clock(Protocol):
    """Source of "now" in the deployment's business timezone.

    Returned datetimes are naive wall-clock values of that timezone, the same
    representation used for every persisted timestamp.
    """

    @property
    def timezone_name(self) -> str:
        raise NotImplementedError

    def now(self) -> datetime:
        raise NotImplementedError

    def today(self) -> date:
        raise NotImplementedError


class SystemClock:
    def __init__(self, timezone_name: str = DEFAULT_BUSINESS_TIMEZONE):
        self._tz = ZoneInfo(timezone_name)
        self._timezone_name = timezone_name

    @property
    def timezone_name(self) -> str:
        return self._timezone_name

    def now(self) -> datetime:
        return datetime.now(self._tz).replace(tzinfo=None, microsecond=0)

    def today(self) -> date:
        return self.now().date()


@dataclass
class FixedClock:
    """Deterministic clock for tests and manual replays."""

    current: datetime
    timezone_name: str = field(default=DEFAULT_BUSINESS_TIMEZONE)

    def now(self) -> datetime:
        return self.current

    def today(self) -> date:
        return self.current.date()

    def set(self, value: datetime) -> None:
        self.current = value

    def advance(self, **kwargs) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current
