"""Centralized constants for the cardwise scheduler.

All magic numbers and defaults live here so every layer imports from a
single source of truth.
"""

# ---------- Memory state defaults ----------
DEFAULT_EASE_FACTOR = 2.5
DEFAULT_REPETITIONS = 0
DEFAULT_INTERVAL = 0

# ---------- SM-2 ----------
MIN_EASE_FACTOR = 1.3
PASS_THRESHOLD = 3  # quality >= this counts as a successful recall
MAX_QUALITY = 5

LAPSE_INTERVAL = 1  # days

# Bootstrap intervals (days) for the first two successful reviews
FIRST_INTERVAL = 1
FIRST_INTERVAL_EASY = 4
SECOND_INTERVAL_HARD = 3
SECOND_INTERVAL = 6
SECOND_INTERVAL_EASY = 8

HARD_MULTIPLIER = 1.2
EASY_BONUS = 1.3

# ---------- Time ----------
MS_PER_DAY = 86_400_000

# ---------- Store ----------
CARD_INDEX_KEY = "cards"
CARD_KEY_PREFIX = "card:"

# ---------- Forecast ----------
DEFAULT_FORECAST_DAYS = 7
