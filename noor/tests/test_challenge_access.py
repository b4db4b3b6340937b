from datetime import datetime

import pytest

from noor.core.clock import FixedClock
from noor.core.config import Settings
from noor.core.errors import AccessDeniedError
from noor.features.challenges.service import ChallengeService
from noor.features.entitlements.service import EntitlementService, StaticSubscriptionStatus
from noor.models.challenge import Challenge
from noor.tests.mocks import ExplodingSubscription

FREE = Challenge(id="career_1", title="Text someone you admire", duration_minutes=2, category_id="career", is_free=True)
PREMIUM = Challenge(id="career_2", title="Update your headline", duration_minutes=3, category_id="career")
PREMIUM_2 = Challenge(id="solo_2", title="Solo coffee date", duration_minutes=1, category_id="solo")
CATALOG = [FREE, PREMIUM, PREMIUM_2]


def _service(tracker, clock, active=False, bypass=False):
    entitlements = EntitlementService(StaticSubscriptionStatus(active), bypass_paywall=bypass)
    return ChallengeService(tracker, entitlements, clock)


def test_free_challenge_always_accessible():
    service = EntitlementService(StaticSubscriptionStatus(False))

    assert service.can_access_challenge(FREE)
    assert not service.can_access_challenge(PREMIUM)


def test_active_entitlement_unlocks_premium():
    service = EntitlementService(StaticSubscriptionStatus(True))

    assert service.is_pro
    assert service.can_access_challenge(PREMIUM)


def test_bypass_unlocks_premium_without_subscription():
    service = EntitlementService.from_settings(StaticSubscriptionStatus(False), Settings(PAYWALL_BYPASS=True))

    assert service.can_access_challenge(PREMIUM)


def test_provider_failure_means_not_pro():
    service = EntitlementService(ExplodingSubscription())

    assert service.is_pro is False
    assert service.can_access_challenge(FREE)
    assert not service.can_access_challenge(PREMIUM)


def test_denied_challenge_never_reaches_tracker(tracker, clock):
    service = _service(tracker, clock, active=False)

    with pytest.raises(AccessDeniedError):
        service.complete_challenge(PREMIUM)

    assert not tracker.is_completed(PREMIUM.id)
    assert tracker.streak == 0
    assert tracker.last_completion_date is None


def test_access_denied_is_a_permission_error(tracker, clock):
    service = _service(tracker, clock, active=False)

    with pytest.raises(PermissionError):
        service.complete_challenge(PREMIUM)


def test_allowed_completion_returns_state(tracker, clock):
    service = _service(tracker, clock, active=True)

    state = service.complete_challenge(PREMIUM)

    assert tracker.is_completed(PREMIUM.id)
    assert state["streak"] == 1
    assert state["status"] == "active"


def test_complete_habit_counts(tracker, clock):
    service = _service(tracker, clock)

    assert service.complete_habit("walk") == 1
    assert service.complete_habit("walk") == 2


def test_today_pick_is_stable_within_a_day(tracker, clock):
    service = _service(tracker, clock, active=True)

    morning = service.pick_today_challenge(CATALOG)
    clock.advance(hours=12)
    evening = service.pick_today_challenge(CATALOG)

    assert morning == evening


def test_today_pick_rotates_by_day_of_year(tracker):
    clock = FixedClock(datetime(2024, 1, 1, 9, 0).astimezone())
    service = _service(tracker, clock, active=True)

    picks = []
    for _ in range(3):
        picks.append(service.pick_today_challenge(CATALOG))
        clock.advance(days=1)

    # Jan 1..3 are day-of-year 1..3
    assert picks == [CATALOG[1], CATALOG[2], CATALOG[0]]


def test_today_pick_only_accessible(tracker, clock):
    service = _service(tracker, clock, active=False)

    for _ in range(5):
        assert service.pick_today_challenge(CATALOG) == FREE
        clock.advance(days=1)


def test_today_pick_when_nothing_accessible_returns_first_locked(tracker, clock):
    service = _service(tracker, clock, active=False)

    assert service.pick_today_challenge([PREMIUM, PREMIUM_2]) == PREMIUM
    assert service.pick_today_challenge([]) is None


def test_duration_text():
    assert PREMIUM.duration_text == "3 min"
