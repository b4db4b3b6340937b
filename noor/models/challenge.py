from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Challenge:
    """Domain model for a micro-challenge. Content lives with the caller."""

    id: str
    title: str
    duration_minutes: int
    category_id: str
    is_free: bool = False

    @property
    def duration_text(self) -> str:
        return f"{self.duration_minutes} min"
