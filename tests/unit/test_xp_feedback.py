"""Tests for transient XP popups."""

import pytest

from questline.services.xp_feedback import XPFeedback


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.mark.unit
def test_popups_expire_after_ttl(clock: FakeClock) -> None:
    feedback = XPFeedback(ttl_seconds=1.5, clock=clock)
    feedback.push({"t1": 10, "section-bonus-c1": 20})

    clock.now += 1.0
    assert feedback.active() == {"t1": 10, "section-bonus-c1": 20}

    clock.now += 0.6
    assert feedback.active() == {}


@pytest.mark.unit
def test_repush_restarts_expiry(clock: FakeClock) -> None:
    feedback = XPFeedback(ttl_seconds=1.5, clock=clock)
    feedback.push({"t1": 10})
    clock.now += 1.0
    feedback.push({"t1": -10})

    clock.now += 1.0

    assert feedback.active() == {"t1": -10}


@pytest.mark.unit
def test_default_ttl_from_settings(clock: FakeClock) -> None:
    feedback = XPFeedback(clock=clock)
    feedback.push({"t1": 10})

    clock.now += 1.4
    assert feedback.active() == {"t1": 10}
    feedback.clear()
    assert feedback.active() == {}
