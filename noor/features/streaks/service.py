from __future__ import annotations

import logging
from datetime import date, datetime
from typing import FrozenSet, Optional

from pydantic import ValidationError

from noor.core.clock import Clock, SystemClock, calendar_day
from noor.core.errors import StorageError
from noor.core.logging import log_event
from noor.features.storage.provider import KeyValueStore
from noor.models.completion import CompletionRecord, CompletionSnapshot, StreakStatus

logger = logging.getLogger(__name__)


class StreakTracker:
    """Daily completion streak over a key-value store.

    Storage is best-effort: read and write failures are logged and the
    in-memory record stays authoritative for the rest of the process.
    """

    def __init__(self, store: KeyValueStore, clock: Optional[Clock] = None, *, autoload: bool = True):
        self._store = store
        self._clock = clock or SystemClock()
        self._record = CompletionRecord()
        if autoload:
            self.load()
            self.reconcile_lapse()

    # Queries ----------------------------------------------------------
    @property
    def streak(self) -> int:
        return self._record.streak

    @property
    def longest_streak(self) -> int:
        return self._record.longest_streak

    @property
    def last_completion_date(self) -> Optional[datetime]:
        return self._record.last_completion_date

    @property
    def completed_ids(self) -> FrozenSet[str]:
        return frozenset(self._record.completed_ids)

    def is_completed(self, challenge_id: str) -> bool:
        return challenge_id in self._record.completed_ids

    def completion_count(self, habit_id: str) -> int:
        return self._record.habit_counts.get(habit_id, 0)

    def get_state(self) -> dict:
        record = self._record
        status = self._status()
        return {
            "streak": 0 if status == "lapsed" else record.streak,
            "longest_streak": record.longest_streak,
            "last_completion_date": record.last_completion_date.isoformat() if record.last_completion_date else None,
            "completed_count": len(record.completed_ids),
            "status": status,
            "next_action_hint": self._next_action_hint(status),
        }

    # Mutations --------------------------------------------------------
    def mark_complete(self, challenge_id: str) -> None:
        record = self._record
        record.completed_ids.add(challenge_id)

        now = self._clock.now()
        previous = record.streak
        gap = self._days_since_last(now)

        if gap is None:
            record.streak = 1
        elif gap == 0:
            pass  # already completed today
        elif gap == 1:
            record.streak += 1
        else:
            # Two or more idle days, or a last completion dated in the future.
            record.streak = 1

        record.last_completion_date = now
        record.longest_streak = max(record.longest_streak, record.streak)

        if record.streak > previous:
            log_event(
                "info",
                "streak.incremented",
                event_type="streak.incremented",
                extra={"challenge_id": challenge_id, "streak": record.streak},
                logger=logger,
            )
        elif record.streak < previous:
            log_event(
                "info",
                "streak.reset",
                event_type="streak.reset",
                extra={"challenge_id": challenge_id, "previous": previous, "gap_days": gap},
                logger=logger,
            )

        self.save()

    def increment_completion_count(self, habit_id: str) -> int:
        counts = self._record.habit_counts
        counts[habit_id] = counts.get(habit_id, 0) + 1
        self.save()
        return counts[habit_id]

    def reconcile_lapse(self) -> bool:
        """Zero a streak that lapsed while nothing was running.

        Exactly one idle day is not a lapse: the next completion still
        extends the streak. Returns True when the streak was zeroed.
        """
        gap = self._days_since_last(self._clock.now())
        if gap is None or gap <= 1:
            return False

        previous = self._record.streak
        self._record.streak = 0
        log_event(
            "info",
            "streak.lapsed",
            event_type="streak.lapsed",
            extra={"previous": previous, "gap_days": gap},
            logger=logger,
        )
        self.save()
        return True

    # Lifecycle --------------------------------------------------------
    def load(self) -> None:
        """Replace in-memory state with what the store holds.

        Missing or malformed keys fall back to their defaults one by one.
        """
        fields = CompletionSnapshot.model_fields
        raw = {}
        try:
            for field in fields.values():
                value = self._store.get(field.alias)
                if value is not None:
                    raw[field.alias] = value
        except StorageError as exc:
            log_event(
                "warning",
                "storage.read_failed",
                error_code=exc.code,
                extra={"error": exc.message},
                logger=logger,
            )
            self._record = CompletionRecord()
            return

        valid = {}
        for key, value in raw.items():
            try:
                CompletionSnapshot.model_validate({key: value})
            except ValidationError:
                log_event(
                    "warning",
                    "storage.value_ignored",
                    error_code="invalid_value",
                    extra={"key": key, "value": value},
                    logger=logger,
                )
                continue
            valid[key] = value

        self._record = CompletionSnapshot.model_validate(valid).to_record()

    def save(self) -> bool:
        """Persist the full record. Returns False when the write failed."""
        payload = CompletionSnapshot.from_record(self._record).to_storage()
        try:
            self._store.set_many(payload)
        except StorageError as exc:
            log_event(
                "warning",
                "storage.write_failed",
                error_code=exc.code,
                extra={"error": exc.message},
                logger=logger,
            )
            return False
        return True

    # Internal helpers -------------------------------------------------
    def _days_since_last(self, now: datetime) -> Optional[int]:
        last = self._record.last_completion_date
        if last is None:
            return None
        today: date = now.date()
        return (today - calendar_day(last, now)).days

    def _status(self) -> StreakStatus:
        gap = self._days_since_last(self._clock.now())
        if gap is None:
            return "none"
        if gap <= 0:
            return "active"
        if gap == 1:
            return "at_risk"
        return "lapsed"

    def _next_action_hint(self, status: StreakStatus) -> str:
        if status == "none":
            return "Complete one challenge today to start your streak."
        if status == "active":
            return "Done for today. Come back tomorrow to keep it going."
        if status == "at_risk":
            return f"Complete a challenge today to make it {self._record.streak + 1} days."
        return "Fresh start: one challenge today begins a new streak."
