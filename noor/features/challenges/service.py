from __future__ import annotations

from typing import Optional, Sequence

from noor.core.clock import Clock, SystemClock
from noor.core.errors import AccessDeniedError
from noor.features.entitlements.service import EntitlementService
from noor.features.streaks.service import StreakTracker
from noor.models.challenge import Challenge


class ChallengeService:
    """Today's challenge pick and gated completion."""

    def __init__(self, tracker: StreakTracker, entitlements: EntitlementService, clock: Optional[Clock] = None):
        self._tracker = tracker
        self._entitlements = entitlements
        self._clock = clock or SystemClock()

    def pick_today_challenge(self, challenges: Sequence[Challenge]) -> Optional[Challenge]:
        """
        Pick today's challenge (same answer all calendar day).

        Only challenges the user can access are considered; when none are,
        the first challenge is returned so the caller can show it locked.
        """
        if not challenges:
            return None

        accessible = [c for c in challenges if self._entitlements.can_access_challenge(c)]
        if not accessible:
            return challenges[0]

        day_of_year = self._clock.now().timetuple().tm_yday
        return accessible[day_of_year % len(accessible)]

    def complete_challenge(self, challenge: Challenge) -> dict:
        """Mark a challenge complete and return the streak state."""
        if not self._entitlements.can_access_challenge(challenge):
            raise AccessDeniedError(f"Challenge {challenge.id} requires an active subscription")

        self._tracker.mark_complete(challenge.id)
        return self._tracker.get_state()

    def complete_habit(self, habit_id: str) -> int:
        """Count one completion of a habit. Returns the lifetime total."""
        return self._tracker.increment_completion_count(habit_id)
