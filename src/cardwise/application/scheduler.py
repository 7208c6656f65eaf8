"""
SM-2 family scheduler.

This is a pure computation module with no I/O: it never reads the clock and
never mutates its inputs.
"""

import logging
import math
from collections.abc import Mapping
from typing import Any

from cardwise.domain.constants import (
    EASY_BONUS,
    FIRST_INTERVAL,
    FIRST_INTERVAL_EASY,
    HARD_MULTIPLIER,
    LAPSE_INTERVAL,
    MAX_QUALITY,
    MIN_EASE_FACTOR,
    PASS_THRESHOLD,
    SECOND_INTERVAL,
    SECOND_INTERVAL_EASY,
    SECOND_INTERVAL_HARD,
)
from cardwise.domain.errors import InvalidArgument
from cardwise.domain.scheduling.models import CardMemoryState, ReviewOutcome

logger = logging.getLogger(__name__)


def parse_outcome(value: ReviewOutcome | str, strict: bool = True) -> ReviewOutcome:
    """
    Resolve a rating into a ReviewOutcome.

    Unrecognized values raise InvalidArgument when ``strict``; otherwise they
    are scored as AGAIN and a warning is logged.
    """
    if isinstance(value, ReviewOutcome):
        return value
    try:
        return ReviewOutcome(value)
    except ValueError:
        if strict:
            raise InvalidArgument(f"Unrecognized review outcome: {value!r}") from None
        logger.warning(f"Unrecognized review outcome {value!r}, treating as 'again'")
        return ReviewOutcome.AGAIN


def compute_next_review(
    current: CardMemoryState | Mapping[str, Any],
    outcome: ReviewOutcome | str,
    *,
    strict: bool = True,
) -> CardMemoryState:
    """
    Compute a card's memory state after one review.

    Args:
        current: The card's state, or a raw stored record whose missing fields
            default to ease 2.5, 0 repetitions and a 0-day interval.
        outcome: again, hard, good or easy.
        strict: Reject unknown outcomes instead of scoring them as again.

    Returns:
        A new CardMemoryState. The caller derives the due date from ``interval``.
    """
    state = CardMemoryState.coerce(current)
    quality = parse_outcome(outcome, strict=strict).quality

    ease = state.ease_factor
    repetitions = state.repetitions
    interval = state.interval

    if quality >= PASS_THRESHOLD:
        if repetitions == 0:
            interval = FIRST_INTERVAL_EASY if quality == 5 else FIRST_INTERVAL
        elif repetitions == 1:
            if quality == 3:
                interval = SECOND_INTERVAL_HARD
            elif quality == 5:
                interval = SECOND_INTERVAL_EASY
            else:
                interval = SECOND_INTERVAL
        elif quality == 3:
            interval = _round_half_up(interval * HARD_MULTIPLIER)
        elif quality == 5:
            interval = _round_half_up(interval * ease * EASY_BONUS)
        else:
            interval = _round_half_up(interval * ease)

        repetitions += 1

        # EF' = EF + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02))
        miss = MAX_QUALITY - quality
        ease += 0.1 - miss * (0.08 + miss * 0.02)
    else:
        # Lapse: ease is left as-is
        repetitions = 0
        interval = LAPSE_INTERVAL

    return CardMemoryState(
        ease_factor=max(ease, MIN_EASE_FACTOR),
        repetitions=repetitions,
        interval=interval,
    )


def project_intervals(current: CardMemoryState | Mapping[str, Any]) -> dict[ReviewOutcome, int]:
    """Interval each outcome would produce, without committing any of them."""
    return {
        outcome: compute_next_review(current, outcome).interval
        for outcome in ReviewOutcome
    }


def format_interval(days: int) -> str:
    """Human label for an interval, e.g. '1 day' or '6 days'."""
    return "1 day" if days == 1 else f"{days} days"


def _round_half_up(value: float) -> int:
    try:
        return int(math.floor(value + 0.5))
    except OverflowError:
        raise InvalidArgument(f"Interval overflowed: {value!r}") from None
