"""Clock abstractions for calendar-based reporting."""

from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Protocol
from zoneinfo import ZoneInfo


class Clock(Protocol):
    """Source of the current local time."""

    @property
    def tz(self) -> tzinfo:
        """Timezone used for calendar boundaries."""

    def now(self) -> datetime:
        """Return the current timezone-aware time."""


@dataclass(frozen=True)
class SystemClock(Clock):
    """Wall clock in a named IANA timezone."""

    timezone_name: str = "UTC"

    @property
    def tz(self) -> tzinfo:
        return ZoneInfo(self.timezone_name)

    def now(self) -> datetime:
        return datetime.now(tz=self.tz)


@dataclass(frozen=True)
class FixedClock(Clock):
    """Clock pinned to a single instant."""

    instant: datetime

    def __post_init__(self) -> None:
        if self.instant.tzinfo is None:
            raise ValueError("FixedClock requires a timezone-aware datetime")

    @property
    def tz(self) -> tzinfo:
        return self.instant.tzinfo  # type: ignore[return-value]

    def now(self) -> datetime:
        return self.instant


def is_valid_timezone(value: str) -> bool:
    """Return True when value names a known IANA timezone."""
    try:
        ZoneInfo(value)
    except Exception:
        return False
    return True
