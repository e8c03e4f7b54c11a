"""Core data types shared by the extractor, policy, poll loop and reporter."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum


class Tier(str, Enum):
    """Population tier of a world as shown on the status page."""

    CONGESTED = "Congested"
    STANDARD = "Standard"
    PREFERRED = "Preferred"
    PREFERRED_PLUS = "Preferred+"
    UNKNOWN = "Unknown"

    @classmethod
    def from_label(cls, label: str | None) -> Tier:
        """Parse a tier label case-insensitively; anything else is UNKNOWN."""
        text = (label or "").strip().lower()
        for tier in cls:
            if tier.value.lower() == text:
                return tier
        return cls.UNKNOWN

    @property
    def is_available(self) -> bool:
        return self in AVAILABLE_TIERS


AVAILABLE_TIERS = frozenset({Tier.STANDARD, Tier.PREFERRED, Tier.PREFERRED_PLUS})

# Real tiers only, in the order the extractor checks them.
# Preferred+ must come before Preferred since it contains it.
KNOWN_TIERS = (Tier.CONGESTED, Tier.STANDARD, Tier.PREFERRED_PLUS, Tier.PREFERRED)


class Mode(str, Enum):
    STANDARD = "standard"
    DEV = "dev"


class NotificationKind(str, Enum):
    STATE_CHANGE = "state_change"
    PERIODIC = "periodic"


@dataclass(frozen=True)
class NotificationDecision:
    should_notify: bool
    kind: NotificationKind


@dataclass(frozen=True)
class MonitorState:
    """Last known tier and when the status page was last checked."""

    tier: Tier = Tier.UNKNOWN
    last_checked_at: datetime | None = None


class MonitorStateStore:
    """Holds the current MonitorState.

    The poll loop is the only writer. Updates replace the whole record in one
    assignment so readers always get a consistent (tier, last_checked_at) pair.
    """

    def __init__(self, initial: MonitorState | None = None):
        self._state = initial or MonitorState()

    def snapshot(self) -> MonitorState:
        return self._state

    def record_check(self, tier: Tier, checked_at: datetime) -> MonitorState:
        self._state = MonitorState(tier=tier, last_checked_at=checked_at)
        return self._state

    def touch(self, checked_at: datetime) -> MonitorState:
        """Update the check timestamp and keep the last known tier."""
        self._state = MonitorState(tier=self._state.tier, last_checked_at=checked_at)
        return self._state


@dataclass(frozen=True)
class HealthReport:
    world_name: str
    tier: Tier
    is_available: bool
    last_checked_at: datetime | None
    uptime: timedelta
    interval_minutes: float
    mode: Mode
