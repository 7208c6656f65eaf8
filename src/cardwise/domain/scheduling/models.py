"""
Domain models for spaced-repetition scheduling.

These are pure data structures with no I/O or external dependencies.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from cardwise.domain.constants import (
    DEFAULT_EASE_FACTOR,
    DEFAULT_INTERVAL,
    DEFAULT_REPETITIONS,
    PASS_THRESHOLD,
)
from cardwise.domain.errors import InvalidArgument


class ReviewOutcome(str, Enum):
    """Rating the learner gives after recalling a card."""

    AGAIN = "again"
    HARD = "hard"
    GOOD = "good"
    EASY = "easy"

    @property
    def quality(self) -> int:
        """SM-2 quality score. Only 0, 3, 4 and 5 are reachable."""
        return _QUALITY[self]

    @property
    def is_pass(self) -> bool:
        return self.quality >= PASS_THRESHOLD


_QUALITY = {
    ReviewOutcome.AGAIN: 0,
    ReviewOutcome.HARD: 3,
    ReviewOutcome.GOOD: 4,
    ReviewOutcome.EASY: 5,
}


@dataclass(frozen=True)
class CardMemoryState:
    """
    Per-card scheduling record.

    Attributes:
        ease_factor: Multiplier controlling how fast intervals grow (>= 1.3 after scheduling).
        repetitions: Consecutive successful reviews since the last lapse.
        interval: Days until the next review, as computed at the last review.
    """

    ease_factor: float = DEFAULT_EASE_FACTOR
    repetitions: int = DEFAULT_REPETITIONS
    interval: int = DEFAULT_INTERVAL

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "CardMemoryState":
        """
        Build a state from a loosely-typed stored record.

        Missing or None fields take their defaults. Negative counts are clamped
        to 0; NaN, infinite, non-numeric and fractional counts are rejected.
        """
        ease = record.get("ease_factor")
        reps = record.get("repetitions")
        interval = record.get("interval")
        return cls(
            ease_factor=DEFAULT_EASE_FACTOR if ease is None else _finite("ease_factor", ease),
            repetitions=DEFAULT_REPETITIONS if reps is None else _count("repetitions", reps),
            interval=DEFAULT_INTERVAL if interval is None else _count("interval", interval),
        )

    @classmethod
    def coerce(cls, value: "CardMemoryState | Mapping[str, Any]") -> "CardMemoryState":
        """Validate either a state or a raw record into a clean state."""
        if isinstance(value, CardMemoryState):
            return cls.from_record(value.to_record())
        if isinstance(value, Mapping):
            return cls.from_record(value)
        raise InvalidArgument(f"Expected a memory state or mapping, got {type(value).__name__}")

    def to_record(self) -> dict[str, Any]:
        return {
            "ease_factor": self.ease_factor,
            "repetitions": self.repetitions,
            "interval": self.interval,
        }


@dataclass(frozen=True)
class CardRecord:
    """
    A flashcard's persisted scheduling data.

    Timestamps are epoch milliseconds. ``next_review_date`` of None means the
    card has never been scheduled and is due immediately.
    """

    card_id: str
    memory: CardMemoryState = field(default_factory=CardMemoryState)
    next_review_date: int | None = None
    last_reviewed: int | None = None

    @classmethod
    def from_record(cls, card_id: str, record: Mapping[str, Any]) -> "CardRecord":
        next_review = record.get("next_review_date")
        last_reviewed = record.get("last_reviewed")
        return cls(
            card_id=card_id,
            memory=CardMemoryState.from_record(record),
            next_review_date=_timestamp("next_review_date", next_review),
            last_reviewed=_timestamp("last_reviewed", last_reviewed),
        )

    def to_record(self) -> dict[str, Any]:
        return {
            **self.memory.to_record(),
            "next_review_date": self.next_review_date,
            "last_reviewed": self.last_reviewed,
        }


def _finite(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidArgument(f"{name} must be a number, got {value!r}")
    try:
        number = float(value)
    except OverflowError:
        raise InvalidArgument(f"{name} is too large, got {value!r}") from None
    if not math.isfinite(number):
        raise InvalidArgument(f"{name} must be finite, got {value!r}")
    return number


def _count(name: str, value: Any) -> int:
    number = _finite(name, value)
    if not number.is_integer():
        raise InvalidArgument(f"{name} must be a whole number, got {value!r}")
    return max(0, int(number))


def _timestamp(name: str, value: Any) -> int | None:
    return None if value is None else int(_finite(name, value))
