"""Decides when a tier reading should produce a chat notification."""

from __future__ import annotations

from .models import Mode, NotificationDecision, NotificationKind, Tier


def is_available(tier: Tier) -> bool:
    return tier.is_available


def decide(prev: Tier, next_tier: Tier, mode: Mode) -> NotificationDecision:
    """Return whether to notify for a new reading and what kind of message it is.

    Standard mode only notifies on the transition into availability. Moves
    between available tiers, drops out of availability and unchanged readings
    stay silent. Dev mode notifies on every reading so delivery can be checked
    without waiting for a real transition.
    """
    kind = NotificationKind.STATE_CHANGE if next_tier != prev else NotificationKind.PERIODIC

    if next_tier == Tier.UNKNOWN:
        return NotificationDecision(should_notify=False, kind=kind)

    if mode == Mode.DEV:
        return NotificationDecision(should_notify=True, kind=kind)

    should_notify = next_tier != prev and is_available(next_tier) and not is_available(prev)
    return NotificationDecision(should_notify=should_notify, kind=NotificationKind.STATE_CHANGE)


def should_mention(mode: Mode, tier: Tier) -> bool:
    """Dev mode always mentions; standard mode mentions only when the world is available."""
    if mode == Mode.DEV:
        return True
    return is_available(tier)
