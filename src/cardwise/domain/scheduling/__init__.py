# Domain Scheduling Package
from .models import CardMemoryState, CardRecord, ReviewOutcome
from .ports import KeyValueStore

__all__ = ["CardMemoryState", "CardRecord", "ReviewOutcome", "KeyValueStore"]
