from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Annotated, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

StreakStatus = Literal["none", "active", "at_risk", "lapsed"]

# Durable storage keys
COMPLETED_IDS_KEY = "completedChallengeIds"
STREAK_KEY = "streakCount"
LAST_COMPLETION_KEY = "lastCompletionDate"
LONGEST_STREAK_KEY = "longestStreak"
HABIT_COUNTS_KEY = "habitCompletionCounts"

STORAGE_KEYS = (
    COMPLETED_IDS_KEY,
    STREAK_KEY,
    LAST_COMPLETION_KEY,
    LONGEST_STREAK_KEY,
    HABIT_COUNTS_KEY,
)


@dataclass
class CompletionRecord:
    """
    Completion and streak state for the single local user.
    Day-level semantics, no storage concerns.
    """

    completed_ids: set[str] = field(default_factory=set)
    streak: int = 0
    last_completion_date: Optional[datetime] = None
    longest_streak: int = 0
    habit_counts: dict[str, int] = field(default_factory=dict)


class CompletionSnapshot(BaseModel):
    """Serialized CompletionRecord, one field per storage key."""

    model_config = ConfigDict(populate_by_name=True)

    completed_ids: List[str] = Field(default_factory=list, alias=COMPLETED_IDS_KEY)
    streak: int = Field(default=0, ge=0, alias=STREAK_KEY)
    last_completion_date: Optional[datetime] = Field(default=None, alias=LAST_COMPLETION_KEY)
    longest_streak: int = Field(default=0, ge=0, alias=LONGEST_STREAK_KEY)
    habit_counts: Dict[str, Annotated[int, Field(ge=0)]] = Field(default_factory=dict, alias=HABIT_COUNTS_KEY)

    @classmethod
    def from_record(cls, record: CompletionRecord) -> "CompletionSnapshot":
        return cls(
            completed_ids=sorted(record.completed_ids),
            streak=record.streak,
            last_completion_date=record.last_completion_date,
            longest_streak=record.longest_streak,
            habit_counts=dict(record.habit_counts),
        )

    def to_record(self) -> CompletionRecord:
        # A streak without a last completion date cannot be trusted.
        streak = self.streak if self.last_completion_date is not None else 0
        return CompletionRecord(
            completed_ids=set(self.completed_ids),
            streak=streak,
            last_completion_date=self.last_completion_date,
            longest_streak=max(self.longest_streak, streak),
            habit_counts=dict(self.habit_counts),
        )

    def to_storage(self) -> dict:
        """JSON-compatible values keyed by storage key."""
        return self.model_dump(mode="json", by_alias=True)
