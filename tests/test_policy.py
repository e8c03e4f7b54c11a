from __future__ import annotations

import itertools

import pytest

from world_monitor.models import Mode, NotificationKind, Tier
from world_monitor.policy import decide, is_available, should_mention

REAL_TIERS = [Tier.CONGESTED, Tier.STANDARD, Tier.PREFERRED, Tier.PREFERRED_PLUS]
ALL_TIERS = REAL_TIERS + [Tier.UNKNOWN]


@pytest.mark.parametrize(("prev", "next_tier"), list(itertools.product(ALL_TIERS, REAL_TIERS)))
def test_standard_mode_notifies_only_on_transition_into_availability(prev: Tier, next_tier: Tier) -> None:
    decision = decide(prev, next_tier, Mode.STANDARD)
    expected = next_tier != prev and is_available(next_tier) and not is_available(prev)
    assert decision.should_notify is expected
    if decision.should_notify:
        assert decision.kind == NotificationKind.STATE_CHANGE


@pytest.mark.parametrize(("prev", "next_tier"), list(itertools.product(ALL_TIERS, REAL_TIERS)))
def test_dev_mode_always_notifies(prev: Tier, next_tier: Tier) -> None:
    decision = decide(prev, next_tier, Mode.DEV)
    assert decision.should_notify is True
    if next_tier != prev:
        assert decision.kind == NotificationKind.STATE_CHANGE
    else:
        assert decision.kind == NotificationKind.PERIODIC


@pytest.mark.parametrize("mode", [Mode.STANDARD, Mode.DEV])
@pytest.mark.parametrize("prev", ALL_TIERS)
def test_unknown_reading_never_notifies(prev: Tier, mode: Mode) -> None:
    assert decide(prev, Tier.UNKNOWN, mode).should_notify is False


def test_first_available_reading_after_startup_notifies() -> None:
    decision = decide(Tier.UNKNOWN, Tier.STANDARD, Mode.STANDARD)
    assert decision.should_notify is True
    assert decision.kind == NotificationKind.STATE_CHANGE
    assert is_available(Tier.STANDARD) is True


def test_lateral_move_between_available_tiers_is_silent() -> None:
    assert decide(Tier.STANDARD, Tier.PREFERRED, Mode.STANDARD).should_notify is False


def test_becoming_unavailable_is_silent() -> None:
    assert decide(Tier.STANDARD, Tier.CONGESTED, Mode.STANDARD).should_notify is False


def test_dev_mode_unchanged_congested_is_periodic() -> None:
    decision = decide(Tier.CONGESTED, Tier.CONGESTED, Mode.DEV)
    assert decision.should_notify is True
    assert decision.kind == NotificationKind.PERIODIC


def test_availability_set() -> None:
    assert [t for t in ALL_TIERS if is_available(t)] == [Tier.STANDARD, Tier.PREFERRED, Tier.PREFERRED_PLUS]


@pytest.mark.parametrize(
    ("mode", "tier", "expected"),
    [
        (Mode.DEV, Tier.CONGESTED, True),
        (Mode.DEV, Tier.STANDARD, True),
        (Mode.STANDARD, Tier.STANDARD, True),
        (Mode.STANDARD, Tier.PREFERRED_PLUS, True),
        (Mode.STANDARD, Tier.CONGESTED, False),
    ],
)
def test_should_mention(mode: Mode, tier: Tier, expected: bool) -> None:
    assert should_mention(mode, tier) is expected


@pytest.mark.parametrize(
    ("label", "tier"),
    [
        ("Standard", Tier.STANDARD),
        ("preferred+", Tier.PREFERRED_PLUS),
        (" CONGESTED ", Tier.CONGESTED),
        ("Online", Tier.UNKNOWN),
        (None, Tier.UNKNOWN),
    ],
)
def test_tier_from_label(label: str | None, tier: Tier) -> None:
    assert Tier.from_label(label) == tier
