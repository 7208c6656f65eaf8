"""
Review Service: application layer orchestrator.

Sequences load -> schedule -> persist for one card at a time. Everything it
needs is passed in explicitly; the scheduler itself stays pure.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from cardwise.application.scheduler import compute_next_review, parse_outcome, project_intervals
from cardwise.domain.constants import (
    CARD_INDEX_KEY,
    CARD_KEY_PREFIX,
    DEFAULT_FORECAST_DAYS,
    MS_PER_DAY,
)
from cardwise.domain.errors import CardNotFound, InvalidArgument, StoreError
from cardwise.domain.scheduling.models import CardMemoryState, CardRecord, ReviewOutcome
from cardwise.domain.scheduling.ports import KeyValueStore

logger = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


def next_review_date(now: int, interval: int) -> int:
    """Epoch-ms timestamp ``interval`` days after ``now``."""
    return now + interval * MS_PER_DAY


def is_due(review_date: int | None, now: int) -> bool:
    """A card is due once its next review date has been reached, or if it has none."""
    return review_date is None or review_date <= now


@dataclass(frozen=True)
class ReviewResult:
    """Outcome of committing one review."""

    card: CardRecord
    outcome: ReviewOutcome
    previous: CardMemoryState

    @property
    def passed(self) -> bool:
        """Whether the recall counted as correct (hard, good or easy)."""
        return self.outcome.is_pass


class ReviewService:
    """
    Application service for scheduling and persisting card reviews.

    Follows Dependency Inversion: depends on the KeyValueStore abstraction,
    not a concrete adapter.
    """

    def __init__(
        self,
        store: KeyValueStore,
        clock: Callable[[], int] | None = None,
        strict_outcomes: bool = True,
    ):
        """
        Args:
            store: The key-value store (port) holding card records.
            clock: Returns the current time in epoch milliseconds.
            strict_outcomes: Reject unknown outcomes instead of scoring them as again.
        """
        self._store = store
        self._clock = clock or now_ms
        self._strict = strict_outcomes

    # --- cards ---

    def card_ids(self) -> list[str]:
        ids = self._store.get(CARD_INDEX_KEY) or []
        if not isinstance(ids, list):
            raise StoreError(f"Card index {CARD_INDEX_KEY!r} is corrupt")
        return [str(i) for i in ids]

    def add_card(self, card_id: str) -> CardRecord:
        """Create a card with the default memory state, due immediately."""
        if not card_id:
            raise InvalidArgument("Card id must not be empty")
        ids = self.card_ids()
        if card_id in ids:
            raise InvalidArgument(f"Card already exists: {card_id!r}")

        card = CardRecord(card_id=card_id, next_review_date=self._clock())
        self._save(card)
        self._store.set(CARD_INDEX_KEY, ids + [card_id])
        logger.info(f"Added card {card_id}")
        return card

    def get_card(self, card_id: str) -> CardRecord:
        record = self._store.get(_key(card_id))
        if record is None:
            raise CardNotFound(card_id)
        if not isinstance(record, dict):
            raise StoreError(f"Record for card {card_id!r} is not an object")
        return CardRecord.from_record(card_id, record)

    def remove_card(self, card_id: str) -> None:
        ids = self.card_ids()
        if card_id not in ids:
            raise CardNotFound(card_id)
        self._store.remove(_key(card_id))
        self._store.set(CARD_INDEX_KEY, [i for i in ids if i != card_id])
        logger.info(f"Removed card {card_id}")

    def list_cards(self) -> list[CardRecord]:
        return [self.get_card(card_id) for card_id in self.card_ids()]

    # --- reviews ---

    def review(self, card_id: str, outcome: ReviewOutcome | str) -> ReviewResult:
        """
        Apply a review to a stored card and persist the result.

        Returns:
            ReviewResult carrying the updated card and whether the recall passed.
        """
        card = self.get_card(card_id)
        rating = parse_outcome(outcome, strict=self._strict)
        memory = compute_next_review(card.memory, rating)

        now = self._clock()
        updated = CardRecord(
            card_id=card_id,
            memory=memory,
            next_review_date=next_review_date(now, memory.interval),
            last_reviewed=now,
        )
        self._save(updated)
        logger.info(
            f"Reviewed {card_id} as {rating.value}: interval={memory.interval}d "
            f"reps={memory.repetitions} ease={memory.ease_factor:.2f}"
        )
        return ReviewResult(card=updated, outcome=rating, previous=card.memory)

    def preview(self, card_id: str) -> dict[ReviewOutcome, int]:
        """Projected interval for each outcome. Nothing is persisted."""
        return project_intervals(self.get_card(card_id).memory)

    # --- queues ---

    def due_cards(self) -> list[CardRecord]:
        """Due cards, most overdue first. Never-scheduled cards lead."""
        now = self._clock()
        due = [c for c in self.list_cards() if is_due(c.next_review_date, now)]
        return sorted(due, key=lambda c: c.next_review_date or 0)

    def forecast(self, days: int = DEFAULT_FORECAST_DAYS) -> list[tuple[date, int]]:
        """
        Count cards falling due on each of the next ``days`` local calendar days.

        Cards that are already overdue, or were never scheduled, count towards today.
        """
        if days < 1:
            raise InvalidArgument(f"days must be at least 1, got {days}")

        today = datetime.fromtimestamp(self._clock() / 1000).date()
        buckets = [today + timedelta(days=i) for i in range(days)]
        counts = dict.fromkeys(buckets, 0)

        for card in self.list_cards():
            if card.next_review_date is None:
                counts[today] += 1
                continue
            due_day = datetime.fromtimestamp(card.next_review_date / 1000).date()
            if due_day < today:
                counts[today] += 1
            elif due_day in counts:
                counts[due_day] += 1

        return [(day, counts[day]) for day in buckets]

    def _save(self, card: CardRecord) -> None:
        self._store.set(_key(card.card_id), card.to_record())


def _key(card_id: str) -> str:
    return f"{CARD_KEY_PREFIX}{card_id}"
