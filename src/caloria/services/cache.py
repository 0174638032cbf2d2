"""TTL cache for food search responses."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Protocol

from caloria.services.clock import Clock, SystemClock


class Cache(Protocol):
    """Expiring key-value store."""

    def get(self, key: str) -> object | None:
        """Return the value for key, or None when missing or expired."""

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        """Store value under key for ttl_seconds."""


@dataclass(frozen=True)
class _Slot:
    value: object
    expires_at: datetime


@dataclass
class InMemoryCache(Cache):
    """Process-local cache; when full, the oldest key is dropped first."""

    clock: Clock = field(default_factory=SystemClock)
    max_entries: int = 512
    _slots: dict[str, _Slot] = field(default_factory=dict)

    def get(self, key: str) -> object | None:
        slot = self._slots.get(key)
        if slot is None:
            return None
        if self.clock.now() >= slot.expires_at:
            self.invalidate(key)
            return None
        return slot.value

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        self.invalidate(key)
        while self._slots and len(self._slots) >= self.max_entries:
            self.invalidate(next(iter(self._slots)))
        self._slots[key] = _Slot(
            value=value,
            expires_at=self.clock.now() + timedelta(seconds=ttl_seconds),
        )

    def invalidate(self, key: str) -> None:
        """Drop key if present."""
        self._slots.pop(key, None)

    def __len__(self) -> int:
        return len(self._slots)
